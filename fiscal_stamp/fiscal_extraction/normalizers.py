"""
Data Normalizers Module.

This module provides normalization functions for:
    - Fiscal periods (YYYY-MM)
    - Issue dates (YYYY-MM-DD)
    - Currency amounts (Decimal)

Values that do not match a known shape are passed through unchanged;
a caller cannot tell such a value apart from a normalized one by type
alone.

Author: ML Engineering Team
"""

import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple

from dateutil import parser as date_parser

from fiscal_stamp.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


class SpanishMonthInfo(date_parser.parserinfo):
    """dateutil parser vocabulary with the Spanish month names."""

    MONTHS = [
        ("ene", "enero"),
        ("feb", "febrero"),
        ("mar", "marzo"),
        ("abr", "abril"),
        ("may", "mayo"),
        ("jun", "junio"),
        ("jul", "julio"),
        ("ago", "agosto"),
        ("sep", "sept", "septiembre"),
        ("oct", "octubre"),
        ("nov", "noviembre"),
        ("dic", "diciembre"),
    ]


SPANISH_MONTHS = SpanishMonthInfo()


def expand_year(year: str) -> str:
    """
    Expand a two-digit year into the 2000s.

    Example:
        >>> expand_year("24")
        "2024"
    """
    if len(year) == 2:
        return "20" + year
    return year


def order_day_month(first: str, second: str) -> Tuple[str, str]:
    """
    Decide which of two leading date components is the month.

    Day-first is assumed; when the second component cannot be a month
    but the first can, the order is swapped.

    Args:
        first: First numeric component.
        second: Second numeric component.

    Returns:
        Tuple of (day, month).
    """
    if int(second) > 12 and int(first) <= 12:
        return second, first
    return first, second


class PeriodNormalizer:
    """
    Normalizes fiscal period strings to YYYY-MM.

    Recognized shapes:
        - DD/MM/YYYY, DD-MM-YY (and MM-DD when the day is > 12)
        - YYYY-MM-DD
        - Spanish month name + year ("marzo 2024")

    Quarter periods ("Q1 2024") and any other shape pass through.

    Example:
        >>> normalizer = PeriodNormalizer()
        >>> normalizer.normalize("15/03/2024")
        "2024-03"
        >>> normalizer.normalize("marzo 2024")
        "2024-03"
    """

    ISO_DATE = re.compile(r'(\d{4})[-/](\d{1,2})[-/](\d{1,2})')
    DAY_FIRST_DATE = re.compile(r'(\d{1,2})[-/](\d{1,2})[-/](\d{2,4})')
    MONTH_NAME = re.compile(
        r'(?:enero|febrero|marzo|abril|mayo|junio|julio|agosto|'
        r'septiembre|octubre|noviembre|diciembre)\s+\d{4}',
        re.IGNORECASE
    )

    # Day component used when parsing "<month> <year>"
    _DEFAULT_DATE = datetime(2000, 1, 1)

    def normalize(self, period: Optional[str]) -> Optional[str]:
        """
        Normalize a period string.

        Args:
            period: Raw period text as matched in the document.

        Returns:
            "YYYY-MM", or the stripped input when no known shape matches.
        """
        if not period:
            return period

        period = period.strip()

        match = self.ISO_DATE.fullmatch(period)
        if match:
            year, month, _ = match.groups()
            return f"{year}-{month.zfill(2)}"

        match = self.DAY_FIRST_DATE.search(period)
        if match:
            first, second, year = match.groups()
            _, month = order_day_month(first, second)
            return f"{expand_year(year)}-{month.zfill(2)}"

        if self.MONTH_NAME.search(period):
            try:
                parsed = date_parser.parse(
                    period,
                    parserinfo=SPANISH_MONTHS,
                    default=self._DEFAULT_DATE
                )
                return f"{parsed.year:04d}-{parsed.month:02d}"
            except (ValueError, OverflowError) as e:
                logger.debug(f"Could not parse month period '{period}': {e}")

        logger.debug(f"Period left unnormalized: '{period}'")
        return period


class DateNormalizer:
    """
    Normalizes issue dates to YYYY-MM-DD.

    Example:
        >>> DateNormalizer().normalize("5/3/24")
        "2024-03-05"
    """

    DAY_FIRST_DATE = re.compile(r'(\d{1,2})[-/](\d{1,2})[-/](\d{2,4})')

    def normalize(self, date_str: Optional[str]) -> Optional[str]:
        """
        Normalize a day-first date string.

        Args:
            date_str: Raw date text.

        Returns:
            "YYYY-MM-DD", or the input when no known shape matches.
        """
        if not date_str:
            return date_str

        match = self.DAY_FIRST_DATE.search(date_str)
        if not match:
            logger.debug(f"Date left unnormalized: '{date_str}'")
            return date_str

        first, second, year = match.groups()
        day, month = order_day_month(first, second)
        return f"{expand_year(year)}-{month.zfill(2)}-{day.zfill(2)}"


class AmountNormalizer:
    """
    Normalizes matched amount strings to Decimal.

    Thousands separators (comma or whitespace) are stripped before parsing.

    Example:
        >>> AmountNormalizer().to_decimal("1,234.56")
        Decimal('1234.56')
    """

    SEPARATORS = re.compile(r'[,\s]')

    def to_decimal(self, amount_str: Optional[str]) -> Optional[Decimal]:
        """
        Convert an amount string to Decimal.

        Args:
            amount_str: Digits with optional separators and fraction.

        Returns:
            Decimal value, or None when the cleaned string is not numeric.
        """
        if not amount_str:
            return None

        cleaned = self.SEPARATORS.sub('', amount_str)

        try:
            value = Decimal(cleaned)
        except InvalidOperation:
            logger.debug(f"Could not parse amount: '{amount_str}'")
            return None

        if not value.is_finite():
            return None

        return value
