"""
Fiscal Field Validators Module.

This module provides validation functions for:
    - RFC (taxpayer id) structure
    - Total amounts

Author: ML Engineering Team
"""

from decimal import Decimal
from typing import Optional, Tuple

from fiscal_stamp.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


class RfcValidator:
    """
    Validates the structure of an RFC.

    An RFC is 12 or 13 characters long and starts with a run of 3 or 4
    letters (A-Z, Ñ or &). Legal entities use 3 letters, individuals 4.

    Example:
        >>> validator = RfcValidator()
        >>> validator.is_valid("ABC123456XYZ")
        True
        >>> validator.validate("AB1234567XYZ")
        (False, "RFC must start with 3 or 4 letters, found 2")
    """

    MIN_LENGTH = 12
    MAX_LENGTH = 13
    LETTERS = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZÑ&")

    def is_valid(self, rfc: Optional[str]) -> bool:
        """
        Check if an RFC is structurally valid.

        Args:
            rfc: RFC string to validate.

        Returns:
            True if valid, False otherwise.
        """
        valid, _ = self.validate(rfc)
        return valid

    def validate(self, rfc: Optional[str]) -> Tuple[bool, str]:
        """
        Validate an RFC with detailed feedback.

        Args:
            rfc: RFC string to validate.

        Returns:
            Tuple of (is_valid, message).
        """
        if not rfc:
            return False, "RFC is empty"

        if not self.MIN_LENGTH <= len(rfc) <= self.MAX_LENGTH:
            return False, f"RFC length {len(rfc)} outside 12-13"

        leading = 0
        for char in rfc.upper():
            if char not in self.LETTERS:
                break
            leading += 1

        if leading not in (3, 4):
            return False, f"RFC must start with 3 or 4 letters, found {leading}"

        return True, "Valid RFC"


class AmountValidator:
    """
    Validates total amounts.

    Example:
        >>> AmountValidator().is_positive(Decimal("0"))
        False
    """

    def is_positive(self, amount: Optional[Decimal]) -> bool:
        """Check that an amount is present and greater than zero."""
        return amount is not None and amount > 0
