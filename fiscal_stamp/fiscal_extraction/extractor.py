"""
Fiscal Field Extractor Module.

This module provides the FiscalFieldExtractor class that applies a fixed
set of label-anchored pattern matchers to raw document text and computes
a weighted confidence score.

Extracted Fields:
    - RFC (issuer taxpayer id)
    - Periodo (fiscal period)
    - Monto total
    - Fecha de emision
    - Nombre del emisor
    - Tipo de comprobante

Each category is matched independently and the first match wins; values
are not cross-validated against each other.

Author: ML Engineering Team
"""

import re
from typing import Optional, Tuple

from config import get_config
from fiscal_stamp.utils.logger import get_logger
from fiscal_stamp.utils.helpers import count_pages
from .fiscal_data import FiscalData, ExtractionResult, DEFAULT_TIPO_COMPROBANTE
from .normalizers import PeriodNormalizer, DateNormalizer, AmountNormalizer
from .validators import RfcValidator, AmountValidator

# Initialize module logger
logger = get_logger(__name__)


# =============================================================================
# PATTERNS
# =============================================================================

# Not preceded or followed by another RFC character ("&" is not a word char)
RFC_PATTERN = re.compile(
    r'(?<![A-Z0-9Ñ&])([A-ZÑ&]{3,4}\d{6}[A-Z0-9]{3})(?![A-Z0-9Ñ&])',
    re.IGNORECASE
)

PERIODO_PATTERN = re.compile(
    r'(?:periodo|period|mes|month|fecha)[\s:]*'
    r'(\d{1,2}[-/]\d{1,2}[-/]\d{2,4}'
    r'|\d{4}[-/]\d{1,2}[-/]\d{1,2}'
    r'|(?:enero|febrero|marzo|abril|mayo|junio|julio|agosto|'
    r'septiembre|octubre|noviembre|diciembre)\s+\d{4}'
    r'|Q[1-4]\s+\d{4})',
    re.IGNORECASE
)

MONTO_PATTERN = re.compile(
    r'(?:total|monto|amount|suma|importe|subtotal)[\s:]*\$?\s*'
    r'([0-9]{1,3}(?:[, ]?[0-9]{3})*(?:\.[0-9]{2})?)(?![0-9])',
    re.IGNORECASE
)

FECHA_EMISION_PATTERN = re.compile(
    r'(?:fecha\s+de\s+emisi[oó]n|fecha\s+emisi[oó]n|emission\s+date)[\s:]*'
    r'(\d{1,2}[-/]\d{1,2}[-/]\d{2,4})',
    re.IGNORECASE
)

# 2-6 capitalized words ending right before the RFC occurrence
NOMBRE_BEFORE_RFC_PATTERN = re.compile(
    r'([A-ZÁÉÍÓÚÑ][a-záéíóúñ]+(?:\s+[A-ZÁÉÍÓÚÑ][a-záéíóúñ]+){1,5})\s+$'
)

# Ordered; the first label with any keyword present wins
TIPO_COMPROBANTE_KEYWORDS = (
    ("Factura", ("factura", "invoice")),
    ("Nota de Crédito", ("nota de crédito", "nota de credito", "credit note")),
    ("Nota de Débito", ("nota de débito", "nota de debito", "debit note")),
    ("Recibo", ("recibo", "receipt")),
    ("Comprobante de Pago", ("comprobante de pago", "payment receipt")),
)


# =============================================================================
# SCORE WEIGHTS
# =============================================================================

WEIGHT_RFC = 30
WEIGHT_PERIODO = 25
WEIGHT_MONTO = 25
WEIGHT_FECHA_EMISION = 10
WEIGHT_NOMBRE_EMISOR = 10


class FiscalFieldExtractor:
    """
    Regex and heuristic fiscal field extractor.

    Instances hold no per-document state; one extractor can serve any
    number of documents concurrently.

    Attributes:
        name_window: Characters scanned on each side of the RFC when
            looking for the issuer name
        default_tipo: Label used when no document type keyword is found

    Example:
        >>> extractor = FiscalFieldExtractor()
        >>> data = extractor.extract("RFC: ABC123456XYZ Total: $1,234.56")
        >>> data.rfc_emisor
        'ABC123456XYZ'
        >>> extractor.score(data)
        55
    """

    def __init__(self) -> None:
        """Initialize the extractor from configuration."""
        self.name_window = get_config("extraction.name_window", 500)
        self.default_tipo = get_config(
            "extraction.default_tipo_comprobante",
            DEFAULT_TIPO_COMPROBANTE
        )

        self.period_normalizer = PeriodNormalizer()
        self.date_normalizer = DateNormalizer()
        self.amount_normalizer = AmountNormalizer()
        self.rfc_validator = RfcValidator()
        self.amount_validator = AmountValidator()

        logger.debug(f"FiscalFieldExtractor initialized (name_window={self.name_window})")

    def extract(self, text: Optional[str]) -> FiscalData:
        """
        Extract fiscal fields from document text.

        Args:
            text: Raw document text (all pages concatenated).

        Returns:
            FiscalData with every field that was found.
        """
        if not text:
            return FiscalData(tipo_comprobante=self.default_tipo)

        rfc, rfc_offset = self._extract_rfc(text)

        data = FiscalData(
            rfc_emisor=rfc,
            periodo=self._extract_periodo(text),
            monto_total=self._extract_monto(text),
            nombre_emisor=self._extract_nombre_emisor(text, rfc, rfc_offset),
            fecha_emision=self._extract_fecha_emision(text),
            tipo_comprobante=self._extract_tipo_comprobante(text)
        )

        logger.debug(
            f"Extracted fiscal data: RFC={data.rfc_emisor}, periodo={data.periodo}, "
            f"monto={data.monto_total}, tipo={data.tipo_comprobante}"
        )
        return data

    def score(self, data: FiscalData) -> int:
        """
        Compute the weighted confidence score for extracted data.

        Weights: valid RFC 30, periodo 25, positive monto 25,
        fecha de emision 10, nombre del emisor 10.

        Args:
            data: Extracted fiscal data.

        Returns:
            Score between 0 and 100.
        """
        score = 0

        if self.rfc_validator.is_valid(data.rfc_emisor):
            score += WEIGHT_RFC
        if data.periodo:
            score += WEIGHT_PERIODO
        if self.amount_validator.is_positive(data.monto_total):
            score += WEIGHT_MONTO
        if data.fecha_emision:
            score += WEIGHT_FECHA_EMISION
        if data.nombre_emisor:
            score += WEIGHT_NOMBRE_EMISOR

        return score

    def extract_result(self, text: Optional[str]) -> ExtractionResult:
        """
        Extract, score and flatten in one step.

        The field map carries the fiscal fields plus confidence_score and
        page_count, all as strings.

        Args:
            text: Raw document text.

        Returns:
            ExtractionResult for the text.
        """
        data = self.extract(text)
        confidence = self.score(data)

        fields = data.to_fields()
        fields['confidence_score'] = str(confidence)
        fields['page_count'] = str(count_pages(text or ""))

        return ExtractionResult(
            fields=fields,
            confidence_score=confidence,
            raw_text=text or ""
        )

    # -------------------------------------------------------------------------
    # Field extractors
    # -------------------------------------------------------------------------

    def _extract_rfc(self, text: str) -> Tuple[Optional[str], int]:
        match = RFC_PATTERN.search(text)
        if not match:
            return None, -1
        return match.group(1).upper(), match.start(1)

    def _extract_periodo(self, text: str) -> Optional[str]:
        match = PERIODO_PATTERN.search(text)
        if not match:
            return None
        return self.period_normalizer.normalize(match.group(1))

    def _extract_monto(self, text: str):
        match = MONTO_PATTERN.search(text)
        if not match:
            return None
        return self.amount_normalizer.to_decimal(match.group(1))

    def _extract_fecha_emision(self, text: str) -> Optional[str]:
        match = FECHA_EMISION_PATTERN.search(text)
        if not match:
            return None
        return self.date_normalizer.normalize(match.group(1))

    def _extract_nombre_emisor(
        self,
        text: str,
        rfc: Optional[str],
        rfc_offset: int
    ) -> Optional[str]:
        """
        Find the issuer name written just before the RFC.

        Every occurrence of the RFC inside the window around its first
        match is tried in order; the first one preceded by a run of
        capitalized words wins.
        """
        if not rfc or rfc_offset < 0:
            return None

        start = max(0, rfc_offset - self.name_window)
        end = min(len(text), max(rfc_offset + self.name_window, rfc_offset + len(rfc)))
        window = text[start:end]

        for occurrence in re.finditer(re.escape(rfc), window, re.IGNORECASE):
            match = NOMBRE_BEFORE_RFC_PATTERN.search(window, 0, occurrence.start())
            if match:
                return match.group(1).strip()

        return None

    def _extract_tipo_comprobante(self, text: str) -> str:
        lowered = text.lower()
        for label, keywords in TIPO_COMPROBANTE_KEYWORDS:
            if any(keyword in lowered for keyword in keywords):
                return label
        return self.default_tipo
