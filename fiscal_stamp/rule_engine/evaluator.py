"""
Rule Evaluation Engine Module.

Evaluates template metadata rules against document text. The rule dialect
is decided when the template is parsed; this module only dispatches on
the variant:

    DelimitedRegex  - inner pattern searched as-is; first group or ""
    RawRegex        - case-insensitive, then case-insensitive + multiline;
                      trimmed first group or "N/A"
    PlainTemplate   - placeholder substitution with no extracted fields

A raw regex that does not compile evaluates to "N/A". When a raw regex
finds nothing, nearby candidate values are logged to help fix the rule;
they are never used as the result.

Author: ML Engineering Team
"""

import re
from typing import Dict, List, Optional, Union

from config import get_config
from fiscal_stamp.utils.exceptions import InvalidRulePattern
from fiscal_stamp.utils.logger import get_logger
from fiscal_stamp.template_rules import (
    DelimitedRegex,
    PlainTemplate,
    RawRegex,
    RulePattern,
    TemplateDefinition,
    classify_rule,
)
from .placeholders import VendorContext, substitute

# Initialize module logger
logger = get_logger(__name__)


# Candidate scans used for diagnostics only
RFC_CANDIDATE_PATTERN = re.compile(r'[A-Z]{3,4}[0-9]{6,9}[A-Z0-9]{3}', re.IGNORECASE)
AMOUNT_CANDIDATE_PATTERN = re.compile(r'\$?[0-9,]+\.?[0-9]{0,2}', re.IGNORECASE)
PERIOD_CANDIDATE_PATTERN = re.compile(r'[0-9]{1,2}/[0-9]{4}', re.IGNORECASE)


def compile_rule(pattern: str, flags: int = 0) -> re.Pattern:
    """
    Compile a user-supplied rule expression.

    Raises:
        InvalidRulePattern: If the expression does not compile.
    """
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise InvalidRulePattern(pattern, str(e)) from e


class RuleEvaluationEngine:
    """
    Evaluates metadata rules against document text.

    The engine keeps no per-call state and can be shared between threads.

    Attributes:
        not_found_value: Result of a raw regex with no match
        candidate_limit: Maximum diagnostic candidates logged per rule

    Example:
        >>> engine = RuleEvaluationEngine()
        >>> rule = RawRegex(r"(?:RFC|R\\.F\\.C\\.?)[\\s:]*([A-Z0-9]{12,13})")
        >>> engine.evaluate(rule, "RFC: ABC123456XYZ", VendorContext())
        'ABC123456XYZ'
    """

    def __init__(self) -> None:
        """Initialize the engine from configuration."""
        self.not_found_value = get_config("rules.not_found_value", "N/A")
        self.candidate_limit = get_config("rules.diagnostic_candidates", 5)

    def evaluate(
        self,
        rule: Union[RulePattern, str],
        text: Optional[str],
        vendor: Optional[VendorContext] = None
    ) -> str:
        """
        Evaluate a single rule.

        Args:
            rule: Classified rule, or a raw rule string to classify.
            text: Document text to search.
            vendor: Vendor identity for placeholder rules.

        Returns:
            The rule's value; "" or "N/A" when nothing matched.
        """
        if isinstance(rule, str):
            rule = classify_rule(rule)

        text = text or ""

        if isinstance(rule, DelimitedRegex):
            return self._evaluate_delimited(rule.pattern, text)
        if isinstance(rule, RawRegex):
            return self._evaluate_raw(rule.pattern, text)
        if isinstance(rule, PlainTemplate):
            return substitute(rule.text, {}, vendor) or ""

        raise TypeError(f"Unsupported rule type: {type(rule).__name__}")

    def evaluate_all(
        self,
        template: TemplateDefinition,
        text: Optional[str],
        vendor: Optional[VendorContext] = None
    ) -> Dict[str, str]:
        """
        Evaluate every metadata rule of a template in declaration order.

        Args:
            template: Parsed template definition.
            text: Document text to search.
            vendor: Vendor identity for placeholder rules.

        Returns:
            Field name to evaluated value, in rule order.
        """
        results = {}

        for field_name, rule in template.metadata_rules.items():
            try:
                results[field_name] = self.evaluate(rule, text, vendor)
            except Exception as e:
                logger.warning(f"Error evaluating rule for {field_name}: {e}")
                results[field_name] = self.not_found_value

            logger.debug(f"Rule {field_name} -> '{results[field_name]}'")

        return results

    def find_candidates(self, pattern: str, text: Optional[str]) -> List[str]:
        """
        Scan for values a failed rule probably meant to capture.

        The scan is chosen by keywords in the pattern: "RFC" looks for
        RFC-shaped tokens, "monto"/"total" for amounts and
        "periodo"/"period" for MM/YYYY tokens.

        Args:
            pattern: Rule pattern that found nothing.
            text: Document text.

        Returns:
            Distinct candidates in order of appearance, at most
            candidate_limit of them.
        """
        if not text:
            return []

        lowered = pattern.lower()
        scans = []
        if "rfc" in lowered:
            scans.append(RFC_CANDIDATE_PATTERN)
        if "monto" in lowered or "total" in lowered:
            scans.append(AMOUNT_CANDIDATE_PATTERN)
        if "periodo" in lowered or "period" in lowered:
            scans.append(PERIOD_CANDIDATE_PATTERN)

        candidates = []
        for scan in scans:
            for match in scan.finditer(text):
                value = match.group(0)
                if value and value not in candidates:
                    candidates.append(value)

        return candidates[:self.candidate_limit]

    # -------------------------------------------------------------------------
    # Dialects
    # -------------------------------------------------------------------------

    def _evaluate_delimited(self, pattern: str, text: str) -> str:
        try:
            compiled = compile_rule(pattern)
        except InvalidRulePattern as e:
            logger.warning(f"Delimited regex skipped: {e}")
            return ""

        match = compiled.search(text)
        return self._first_group(match) if match else ""

    def _evaluate_raw(self, pattern: str, text: str) -> str:
        try:
            match = compile_rule(pattern, re.IGNORECASE).search(text)
            if not match:
                match = compile_rule(pattern, re.IGNORECASE | re.MULTILINE).search(text)
        except InvalidRulePattern as e:
            logger.warning(f"Raw regex skipped: {e}")
            return self.not_found_value

        if match:
            return self._first_group(match).strip()

        candidates = self.find_candidates(pattern, text)
        if candidates:
            logger.info(f"No match for '{pattern}', candidates in text: {candidates}")
        else:
            logger.debug(f"No match for '{pattern}'")

        return self.not_found_value

    @staticmethod
    def _first_group(match: re.Match) -> str:
        if match.re.groups < 1:
            return ""
        return match.group(1) or ""
