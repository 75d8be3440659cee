"""
Tests for fiscal field extraction and confidence scoring.
"""

from dataclasses import replace
from decimal import Decimal

import pytest

from fiscal_stamp.fiscal_extraction import ExtractionResult, FiscalData


class TestRfcExtraction:
    """Test RFC extraction."""

    @pytest.mark.parametrize("text, expected", [
        ("RFC: ABC123456XYZ", "ABC123456XYZ"),
        ("emisor abc123456xyz con domicilio", "ABC123456XYZ"),
        ("Persona física GODE561231GR8.", "GODE561231GR8"),
        ("R.F.C.:ÑABC010101A1B\n", "ÑABC010101A1B"),
        ("Emisor: &AB010101A1B total", "&AB010101A1B"),
        ("RFC &ab010101a1b", "&AB010101A1B"),
    ])
    def test_rfc_embedded_in_text(self, extractor, text, expected):
        assert extractor.extract(text).rfc_emisor == expected

    def test_first_rfc_wins(self, extractor):
        data = extractor.extract("Emisor AAA010101AAA Receptor BBB020202BBB")
        assert data.rfc_emisor == "AAA010101AAA"

    def test_rfc_must_be_word_bounded(self, extractor):
        assert extractor.extract("XABC123456XYZ9").rfc_emisor is None


class TestPeriodoExtraction:
    """Test periodo extraction and normalization."""

    @pytest.mark.parametrize("text, expected", [
        ("Periodo: 15/03/2024", "2024-03"),
        ("Periodo: marzo 2024", "2024-03"),
        ("Mes: 03-15-24", "2024-03"),
        ("Period 2024-03-15", "2024-03"),
        ("PERIODO DICIEMBRE 2023", "2023-12"),
        ("Month: 5/3/24", "2024-03"),
    ])
    def test_known_formats(self, extractor, text, expected):
        assert extractor.extract(text).periodo == expected

    def test_quarter_passes_through(self, extractor):
        assert extractor.extract("Periodo: Q1 2024").periodo == "Q1 2024"

    def test_missing_periodo(self, extractor):
        assert extractor.extract("RFC: ABC123456XYZ").periodo is None


class TestMontoExtraction:
    """Test monto extraction."""

    @pytest.mark.parametrize("text, expected", [
        ("Total: $1,234.56", Decimal("1234.56")),
        ("MONTO $ 999", Decimal("999")),
        ("Importe: 1 234 567.89", Decimal("1234567.89")),
        ("Suma 12345.00 MXN", Decimal("12345.00")),
    ])
    def test_amounts(self, extractor, text, expected):
        assert extractor.extract(text).monto_total == expected

    def test_first_labelled_amount_wins(self, extractor):
        data = extractor.extract("Subtotal: $100.00\nTotal: $116.00")
        assert data.monto_total == Decimal("100.00")

    def test_label_without_digits_is_no_match(self, extractor):
        assert extractor.extract("Total: pendiente").monto_total is None


class TestOtherFields:
    """Test fecha de emision, nombre del emisor and tipo de comprobante."""

    @pytest.mark.parametrize("text, expected", [
        ("Fecha de emisión: 20/03/2024", "2024-03-20"),
        ("FECHA EMISION 5-3-24", "2024-03-05"),
        ("Emission date: 03/25/2024", "2024-03-25"),
    ])
    def test_fecha_emision(self, extractor, text, expected):
        assert extractor.extract(text).fecha_emision == expected

    def test_nombre_emisor_before_rfc(self, extractor):
        data = extractor.extract("Razón social: Servicios Integrales Del Bajio SERV010203AB1")
        assert data.nombre_emisor == "Servicios Integrales Del Bajio"

    def test_nombre_emisor_absent(self, extractor):
        assert extractor.extract("RFC: ABC123456XYZ").nombre_emisor is None

    def test_nombre_emisor_outside_window(self, extractor):
        text = "Comercializadora Del Norte " + "x" * 600 + " ABC123456XYZ"
        assert extractor.extract(text).nombre_emisor is None

    def test_nombre_emisor_next_to_later_occurrence(self, extractor):
        text = "RFC: ABC123456XYZ\nEmitido por Grupo Industrial Sol ABC123456XYZ"
        assert extractor.extract(text).nombre_emisor == "Grupo Industrial Sol"

    @pytest.mark.parametrize("text, expected", [
        ("FACTURA ELECTRÓNICA", "Factura"),
        ("NOTA DE CRÉDITO 123", "Nota de Crédito"),
        ("Nota de debito", "Nota de Débito"),
        ("Recibo de honorarios", "Recibo"),
        ("Comprobante de pago CFDI", "Comprobante de Pago"),
        ("Documento sin tipo", "Comprobante Fiscal"),
    ])
    def test_tipo_comprobante(self, extractor, text, expected):
        assert extractor.extract(text).tipo_comprobante == expected

    def test_empty_text(self, extractor):
        assert extractor.extract("") == FiscalData()


class TestScore:
    """Test the weighted confidence score."""

    def test_full_document_scores_100(self, extractor, sample_text):
        data = extractor.extract(sample_text)

        assert data.rfc_emisor == "ABC123456XYZ"
        assert data.periodo == "2024-03"
        assert data.monto_total == Decimal("1234.56")
        assert data.fecha_emision == "2024-03-20"
        assert data.nombre_emisor == "Comercializadora Del Norte"
        assert data.tipo_comprobante == "Factura"
        assert extractor.score(data) == 100

    def test_empty_data_scores_0(self, extractor):
        assert extractor.score(FiscalData()) == 0

    def test_weights(self, extractor):
        assert extractor.score(FiscalData(rfc_emisor="ABC123456XYZ")) == 30
        assert extractor.score(FiscalData(periodo="2024-03")) == 25
        assert extractor.score(FiscalData(monto_total=Decimal("1"))) == 25
        assert extractor.score(FiscalData(fecha_emision="2024-03-20")) == 10
        assert extractor.score(FiscalData(nombre_emisor="Acme Uno")) == 10

    @pytest.mark.parametrize("rfc", ["AB1234567890", "ABCDE12345678", "ABC12345", "ABC1234567890XY"])
    def test_structurally_invalid_rfc_scores_nothing(self, extractor, rfc):
        assert extractor.score(FiscalData(rfc_emisor=rfc)) == 0

    def test_zero_amount_scores_nothing(self, extractor):
        assert extractor.score(FiscalData(monto_total=Decimal("0"))) == 0

    def test_score_is_monotonic(self, extractor):
        additions = [
            {"rfc_emisor": "ABC123456XYZ"},
            {"periodo": "2024-03"},
            {"monto_total": Decimal("10.50")},
            {"fecha_emision": "2024-03-20"},
            {"nombre_emisor": "Acme Uno"},
        ]
        data = FiscalData()
        previous = extractor.score(data)

        for change in additions:
            data = replace(data, **change)
            current = extractor.score(data)
            assert current >= previous
            previous = current

        assert previous == 100


class TestExtractionResult:
    """Test the flattened extraction result."""

    def test_fields_have_defaults(self, extractor):
        result = extractor.extract_result("Documento sin datos")

        assert isinstance(result, ExtractionResult)
        assert result.fields["RFC"] == "N/A"
        assert result.fields["monto_total"] == "0.00"
        assert result.fields["tipo_comprobante"] == "Comprobante Fiscal"
        assert result.fields["confidence_score"] == "0"
        assert result.fields["page_count"] == "1"

    def test_fields_from_sample(self, extractor, sample_text):
        result = extractor.extract_result(sample_text)

        assert result.confidence_score == 100
        assert result.fields["monto_total"] == "1234.56"
        assert result.raw_text == sample_text
        assert result.to_flat_dict()["confidence_score"] == 100

    def test_page_count(self, extractor, two_page_text):
        assert extractor.extract_result(two_page_text).fields["page_count"] == "2"
