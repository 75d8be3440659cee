"""
Custom Exceptions Module.

This module defines all custom exceptions used throughout the fiscal
stamping engine. Only InvalidTemplate is expected to reach callers of the
core; rule and stamping failures are recovered where they occur.

Exception Hierarchy:
    FiscalStampError (base)
    ├── InputError
    │   └── MissingInputFileError
    ├── TemplateError
    │   └── InvalidTemplate
    ├── RuleEvaluationError
    │   └── InvalidRulePattern
    └── StampError
        └── StampGenerationFailure
"""


class FiscalStampError(Exception):
    """
    Base exception for all fiscal stamping errors.

    Attributes:
        message: Human-readable error message.
        details: Optional dictionary with additional error details.
    """

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# INPUT ERRORS
# =============================================================================

class InputError(FiscalStampError):
    """Base exception for CLI input handling errors."""
    pass


class MissingInputFileError(InputError):
    """Raised when an input file cannot be found."""

    def __init__(self, filepath: str):
        message = f"File not found: {filepath}"
        details = {"filepath": filepath}
        super().__init__(message, details)


# =============================================================================
# TEMPLATE ERRORS
# =============================================================================

class TemplateError(FiscalStampError):
    """Base exception for template definition errors."""
    pass


class InvalidTemplate(TemplateError):
    """
    Raised when a template definition is empty or malformed.

    Example:
        >>> raise InvalidTemplate("metadataRules must be an object", "metadataRules")
    """

    def __init__(self, reason: str, location: str = None):
        message = f"Invalid template definition: {reason}"
        details = {"location": location} if location else None
        super().__init__(message, details)
        self.reason = reason
        self.location = location


# =============================================================================
# RULE ERRORS
# =============================================================================

class RuleEvaluationError(FiscalStampError):
    """Base exception for metadata rule evaluation errors."""
    pass


class InvalidRulePattern(RuleEvaluationError):
    """Raised when a user-supplied rule expression does not compile."""

    def __init__(self, pattern: str, reason: str = None):
        message = f"Invalid rule pattern: {pattern}"
        details = {"pattern": pattern, "reason": reason}
        super().__init__(message, details)


# =============================================================================
# STAMP ERRORS
# =============================================================================

class StampError(FiscalStampError):
    """Base exception for output document generation errors."""
    pass


class StampGenerationFailure(StampError):
    """Raised by the document builder; always recovered by the stamper."""

    def __init__(self, reason: str = None):
        message = "Stamped document generation failed"
        details = {"reason": reason}
        super().__init__(message, details)


__all__ = [
    'FiscalStampError',
    'InputError',
    'MissingInputFileError',
    'TemplateError',
    'InvalidTemplate',
    'RuleEvaluationError',
    'InvalidRulePattern',
    'StampError',
    'StampGenerationFailure',
]
