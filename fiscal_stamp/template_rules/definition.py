"""
Template Definition Data Classes.

This module defines the parsed form of a template rule set: the ordered
metadata rules, the optional page rules and the optional cover page.

Every metadata rule is classified exactly once, when the template is
parsed, into one of three explicit variants:

    DelimitedRegex  - ``{{regex '<pattern>'}}``
    RawRegex        - any rule containing both ``(`` and ``)``
    PlainTemplate   - everything else (placeholder text)

Classes:
    DelimitedRegex, RawRegex, PlainTemplate: Rule pattern variants
    PageRules: Page selection and footer text
    CoverPage: Cover page fields
    TemplateDefinition: Complete parsed template
"""

import re
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Union


# {{regex 'RFC:\s*([A-Z0-9]{10,13})'}}
DELIMITED_REGEX_PATTERN = re.compile(r"\{\{regex\s+'([^']+)'\}\}")


@dataclass(frozen=True)
class DelimitedRegex:
    """A regular expression wrapped as ``{{regex '<pattern>'}}``."""
    pattern: str


@dataclass(frozen=True)
class RawRegex:
    """A bare regular expression; matched case-insensitively."""
    pattern: str


@dataclass(frozen=True)
class PlainTemplate:
    """Literal text with optional ``{{...}}`` placeholders."""
    text: str


RulePattern = Union[DelimitedRegex, RawRegex, PlainTemplate]


def classify_rule(rule: str) -> RulePattern:
    """
    Classify a rule string into its pattern variant.

    Args:
        rule: Rule string as declared in the template.

    Returns:
        DelimitedRegex, RawRegex or PlainTemplate.

    Example:
        >>> classify_rule("{{regex 'RFC: ([A-Z0-9]+)'}}")
        DelimitedRegex(pattern='RFC: ([A-Z0-9]+)')
        >>> classify_rule("RFC:? ([A-Z0-9]{12,13})")
        RawRegex(pattern='RFC:? ([A-Z0-9]{12,13})')
        >>> classify_rule("Procesado por {{vendor.email}}")
        PlainTemplate(text='Procesado por {{vendor.email}}')
    """
    delimited = DELIMITED_REGEX_PATTERN.search(rule)
    if delimited:
        return DelimitedRegex(delimited.group(1))

    if '(' in rule and ')' in rule:
        return RawRegex(rule)

    return PlainTemplate(rule)


@dataclass(frozen=True)
class PageRules:
    """
    Page-level rules.

    Attributes:
        keep_pages: 1-based page numbers to keep; None keeps every page
        footer_text: Footer template string
    """
    keep_pages: Optional[FrozenSet[int]] = None
    footer_text: Optional[str] = None


@dataclass(frozen=True)
class CoverPage:
    """
    Cover page rules.

    Attributes:
        enabled: Whether cover fields are rendered
        fields: Field name to template string, in declaration order
    """
    enabled: bool = False
    fields: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TemplateDefinition:
    """
    A fully parsed template rule set.

    Attributes:
        metadata_rules: Field name to classified rule, in evaluation order
        page_rules: Optional page rules
        cover_page: Optional cover page

    Example:
        >>> definition = TemplateRuleParser().parse(json_blob)
        >>> list(definition.metadata_rules)
        ['RFC', 'periodo', 'monto_total']
    """
    metadata_rules: Dict[str, RulePattern] = field(default_factory=dict)
    page_rules: Optional[PageRules] = None
    cover_page: Optional[CoverPage] = None

    @property
    def has_rules(self) -> bool:
        """True when at least one metadata rule is declared."""
        return bool(self.metadata_rules)

    @property
    def cover_page_enabled(self) -> bool:
        """True when a cover page is declared and enabled."""
        return self.cover_page is not None and self.cover_page.enabled
