"""
Fiscal Extraction Module for the Fiscal Stamping Engine.

This module provides functionality for:
    - Label-anchored extraction of Mexican fiscal fields
    - Period, date and amount normalization
    - Weighted confidence scoring

Author: ML Engineering Team
"""

from .fiscal_data import FiscalData, ExtractionResult
from .extractor import FiscalFieldExtractor
from .normalizers import PeriodNormalizer, DateNormalizer, AmountNormalizer
from .validators import RfcValidator, AmountValidator

__all__ = [
    'FiscalData',
    'ExtractionResult',
    'FiscalFieldExtractor',
    'PeriodNormalizer',
    'DateNormalizer',
    'AmountNormalizer',
    'RfcValidator',
    'AmountValidator'
]
