"""
Tests for metadata rule evaluation.
"""

import json

import pytest

from fiscal_stamp.rule_engine import VendorContext, compile_rule
from fiscal_stamp.utils.exceptions import InvalidRulePattern
from fiscal_stamp.template_rules import (
    DelimitedRegex,
    PlainTemplate,
    RawRegex,
    classify_rule,
    parse_template,
)

RFC_RULE = r"(?:RFC|R\.F\.C\.?)[\s:]*([A-Z0-9]{12,13})"


class TestDelimitedRegex:
    """Test the {{regex '...'}} dialect."""

    def test_first_group(self, engine):
        rule = DelimitedRegex(r"Folio: (\d+)")
        assert engine.evaluate(rule, "Factura Folio: 4521", VendorContext()) == "4521"

    def test_case_sensitive(self, engine):
        rule = DelimitedRegex(r"Folio: (\d+)")
        assert engine.evaluate(rule, "folio: 4521", VendorContext()) == ""

    def test_no_capture_group(self, engine):
        assert engine.evaluate(DelimitedRegex(r"Folio: \d+"), "Folio: 1", VendorContext()) == ""

    def test_malformed_pattern_is_empty(self, engine):
        assert engine.evaluate(DelimitedRegex("Folio: ([0-9]+"), "Folio: 1", VendorContext()) == ""

    def test_from_rule_string(self, engine):
        assert engine.evaluate("{{regex 'Serie ([A-Z])'}}", "Serie B", VendorContext()) == "B"


class TestRawRegex:
    """Test the raw regular expression dialect."""

    def test_rfc_rule_end_to_end(self, engine):
        text = "Datos del emisor ... RFC: ABC123456XYZ ... régimen general"
        assert engine.evaluate(RawRegex(RFC_RULE), text, VendorContext()) == "ABC123456XYZ"

    def test_rfc_rule_from_template(self, engine):
        template = parse_template(json.dumps({"metadataRules": {"RFC": RFC_RULE}}))
        fields = engine.evaluate_all(template, "... RFC: ABC123456XYZ ...", VendorContext())
        assert fields == {"RFC": "ABC123456XYZ"}

    def test_case_insensitive(self, engine):
        assert engine.evaluate(RawRegex(r"total:\s*(\S+)"), "TOTAL: 10.00", VendorContext()) == "10.00"

    def test_multiline_retry(self, engine):
        rule = RawRegex(r"^Folio:\s*(\d+)$")
        assert engine.evaluate(rule, "Encabezado\nFolio: 77\nPie", VendorContext()) == "77"

    def test_value_is_trimmed(self, engine):
        rule = RawRegex(r"Nombre:(.*)")
        assert engine.evaluate(rule, "Nombre:   ACME SA   \n", VendorContext()) == "ACME SA"

    def test_no_match_is_not_available(self, engine):
        assert engine.evaluate(RawRegex(r"Folio (\d+)"), "sin folio", VendorContext()) == "N/A"

    def test_malformed_pattern_is_not_available(self, engine):
        assert engine.evaluate(RawRegex(r"([0-9]+))"), "123", VendorContext()) == "N/A"

    def test_candidates_never_substituted(self, engine):
        text = "Emisor ABC123456XYZ"
        rule = RawRegex(r"RFC emisor: (X{20})")
        assert engine.evaluate(rule, text, VendorContext()) == "N/A"


class TestPlainTemplate:
    """Test the placeholder text dialect."""

    def test_vendor_placeholders(self, engine, vendor):
        rule = PlainTemplate("Cargado por {{vendor.email}} ({{vendor.userId}})")
        assert engine.evaluate(rule, "", vendor) == "Cargado por proveedor@empresa.mx (42)"

    def test_metadata_tokens_stay_verbatim(self, engine, vendor):
        rule = classify_rule("RFC {{metadata.RFC}}")
        assert engine.evaluate(rule, "RFC: ABC123456XYZ", vendor) == "RFC {{metadata.RFC}}"


class TestFindCandidates:
    """Test diagnostic candidate scans."""

    def test_rfc_candidates(self, engine):
        text = "AAA010101AAA y BBB020202BBB y AAA010101AAA"
        assert engine.find_candidates(r"RFC (\d+)", text) == ["AAA010101AAA", "BBB020202BBB"]

    def test_lowercase_rfc_candidates(self, engine):
        text = "emisor abc123456xyz"
        assert engine.find_candidates(r"RFC: ([A-Z]{13})", text) == ["abc123456xyz"]

    def test_period_candidates(self, engine):
        assert engine.find_candidates(r"Periodo (\w+)", "del 03/2024 al 04/2024") == ["03/2024", "04/2024"]

    def test_amount_candidates_are_limited(self, engine):
        text = " ".join(f"${n}.00" for n in range(1, 10))
        candidates = engine.find_candidates(r"Monto total (\w+)", text)
        assert candidates == ["$1.00", "$2.00", "$3.00", "$4.00", "$5.00"]

    def test_no_keyword_no_scan(self, engine):
        assert engine.find_candidates(r"Folio (\d+)", "ABC123456XYZ $5.00") == []

    def test_empty_text(self, engine):
        assert engine.find_candidates(r"RFC (\w+)", "") == []


class TestEvaluateAll:
    """Test evaluating a whole template."""

    def test_declaration_order_and_isolation(self, engine, vendor):
        template = parse_template(json.dumps({
            "metadataRules": {
                "roto": "([0-9]+))",
                "RFC": RFC_RULE,
                "nota": "Subido por {{vendor.email}}",
                "folio": "{{regex 'Folio: ([0-9]+)'}}",
            }
        }))

        fields = engine.evaluate_all(template, "RFC: ABC123456XYZ Folio: 9", vendor)

        assert list(fields) == ["roto", "RFC", "nota", "folio"]
        assert fields == {
            "roto": "N/A",
            "RFC": "ABC123456XYZ",
            "nota": "Subido por proveedor@empresa.mx",
            "folio": "9",
        }

    def test_unsupported_rule_type(self, engine):
        with pytest.raises(TypeError):
            engine.evaluate(42, "text", VendorContext())


class TestCompileRule:
    """Test compile_rule."""

    def test_valid_pattern(self):
        assert compile_rule(r"Folio: (\d+)").search("Folio: 12").group(1) == "12"

    def test_invalid_pattern(self):
        with pytest.raises(InvalidRulePattern) as exc_info:
            compile_rule("([0-9]+")
        assert exc_info.value.details["pattern"] == "([0-9]+"
