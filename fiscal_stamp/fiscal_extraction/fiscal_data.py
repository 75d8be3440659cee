"""
Fiscal Data Classes.

This module defines the data structures produced by fiscal field
extraction: the typed FiscalData record and the flat ExtractionResult
handed to persistence collaborators.

Author: ML Engineering Team
"""

import json
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional

from config import get_config

NOT_FOUND = "N/A"
DEFAULT_TIPO_COMPROBANTE = "Comprobante Fiscal"


@dataclass(frozen=True)
class FiscalData:
    """
    Fiscal fields extracted from one document.

    Attributes:
        rfc_emisor: Issuer taxpayer id, upper-cased
        periodo: Fiscal period as YYYY-MM (or the raw value when unparseable)
        monto_total: Total amount
        nombre_emisor: Issuer name found next to the RFC
        fecha_emision: Issue date as YYYY-MM-DD (or the raw value)
        tipo_comprobante: Document type label, always populated

    Example:
        >>> data = FiscalData(rfc_emisor="ABC123456XYZ", monto_total=Decimal("1234.56"))
        >>> data.to_fields()["monto_total"]
        '1234.56'
    """
    rfc_emisor: Optional[str] = None
    periodo: Optional[str] = None
    monto_total: Optional[Decimal] = None
    nombre_emisor: Optional[str] = None
    fecha_emision: Optional[str] = None
    tipo_comprobante: str = DEFAULT_TIPO_COMPROBANTE

    @property
    def monto_display(self) -> str:
        """Total amount with two decimals, "0.00" when absent."""
        if self.monto_total is None:
            return "0.00"
        return f"{self.monto_total:.2f}"

    def to_fields(self) -> Dict[str, str]:
        """
        Convert to the flat field map used downstream.

        Absent values are reported with the not-found sentinel so the map
        always carries the same keys.

        Returns:
            Dictionary of field names to string values.
        """
        missing = get_config("rules.not_found_value", NOT_FOUND)
        return {
            'RFC': self.rfc_emisor or missing,
            'periodo': self.periodo or missing,
            'monto_total': self.monto_display,
            'nombre_emisor': self.nombre_emisor or missing,
            'fecha_emision': self.fecha_emision or missing,
            'tipo_comprobante': self.tipo_comprobante or DEFAULT_TIPO_COMPROBANTE,
        }


@dataclass(frozen=True)
class ExtractionResult:
    """
    Result of running the fiscal extractor over a document's text.

    Attributes:
        fields: Field name to string value
        confidence_score: Weighted score 0..100
        raw_text: Text the fields were extracted from
    """
    fields: Dict[str, str] = field(default_factory=dict)
    confidence_score: int = 0
    raw_text: str = ""

    def to_flat_dict(self) -> Dict[str, Any]:
        """
        Convert to flat dictionary suitable for persistence.

        Returns:
            Flat dictionary with no nested structures.
        """
        result = dict(self.fields)
        result['confidence_score'] = self.confidence_score
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_flat_dict(), indent=indent, ensure_ascii=False)

    def __repr__(self) -> str:
        return (
            f"ExtractionResult("
            f"rfc={self.fields.get('RFC')}, "
            f"total={self.fields.get('monto_total')}, "
            f"confidence={self.confidence_score}%)"
        )
