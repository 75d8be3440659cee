"""
Template Rule Parser Module.

Parses the serialized (JSON) template definition produced by the template
storage collaborator into a TemplateDefinition.

Schema:
    {
        "metadataRules": {"<field>": "<rule>", ...},
        "pageRules": {"keepPages": [1, 2], "footerText": "..."},
        "coverPage": {"enabled": true, "fields": {"<field>": "...", ...}}
    }

Property names are matched case-insensitively, unknown properties are
ignored and missing sections stay absent. Field names inside
metadataRules and coverPage.fields keep their declared casing.

Author: ML Engineering Team
"""

import json
from typing import Any, Dict, List, Optional, Tuple

from fiscal_stamp.utils.logger import get_logger
from fiscal_stamp.utils.exceptions import InvalidTemplate
from .definition import (
    CoverPage,
    PageRules,
    RulePattern,
    TemplateDefinition,
    classify_rule,
)

# Initialize module logger
logger = get_logger(__name__)


def _reject_duplicate_keys(pairs: List[Tuple[str, Any]]) -> Dict[str, Any]:
    """object_pairs_hook that refuses repeated keys inside one object."""
    result = {}
    for key, value in pairs:
        if key in result:
            raise InvalidTemplate(f"duplicate key '{key}'", key)
        result[key] = value
    return result


class TemplateRuleParser:
    """
    Parser for serialized template definitions.

    Parsing is atomic: either a complete TemplateDefinition is returned or
    InvalidTemplate is raised. Rules are classified into their pattern
    variant here, once, so evaluation never re-inspects the rule string.

    Example:
        >>> parser = TemplateRuleParser()
        >>> definition = parser.parse('{"metadataRules": {"RFC": "RFC:? ([A-Z0-9]{12,13})"}}')
        >>> definition.metadata_rules["RFC"]
        RawRegex(pattern='RFC:? ([A-Z0-9]{12,13})')
    """

    def parse(self, serialized: str) -> TemplateDefinition:
        """
        Parse a serialized template definition.

        Args:
            serialized: JSON text of the template definition.

        Returns:
            Parsed TemplateDefinition.

        Raises:
            InvalidTemplate: If the input is empty, not valid JSON, or has
                the wrong structure.
        """
        if not isinstance(serialized, str) or not serialized.strip():
            raise InvalidTemplate("definition cannot be null or empty")

        try:
            document = json.loads(serialized, object_pairs_hook=_reject_duplicate_keys)
        except (ValueError, RecursionError) as e:
            raise InvalidTemplate(f"invalid JSON definition: {e}") from e

        if document is None:
            logger.debug("Template definition is JSON null, using empty definition")
            return TemplateDefinition()

        root = self._require_object(document, "$")

        metadata_rules = self._parse_metadata_rules(
            self._property(root, "metadataRules", "$")
        )
        page_rules = self._parse_page_rules(
            self._property(root, "pageRules", "$")
        )
        cover_page = self._parse_cover_page(
            self._property(root, "coverPage", "$")
        )

        definition = TemplateDefinition(
            metadata_rules=metadata_rules,
            page_rules=page_rules,
            cover_page=cover_page
        )

        logger.debug(
            f"Parsed template: {len(metadata_rules)} metadata rules, "
            f"page_rules={'yes' if page_rules else 'no'}, "
            f"cover_page={'enabled' if definition.cover_page_enabled else 'off'}"
        )
        return definition

    def is_valid(self, serialized: str) -> bool:
        """
        Check whether a serialized template definition parses.

        Args:
            serialized: JSON text of the template definition.

        Returns:
            True if parse() would succeed, False otherwise.
        """
        try:
            self.parse(serialized)
            return True
        except InvalidTemplate as e:
            logger.debug(f"Template rejected: {e}")
            return False

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    def _parse_metadata_rules(self, value: Any) -> Dict[str, RulePattern]:
        """Parse metadataRules into classified rules, preserving order."""
        if value is None:
            return {}

        rules = self._require_string_map(value, "metadataRules")
        return {name: classify_rule(rule) for name, rule in rules.items()}

    def _parse_page_rules(self, value: Any) -> Optional[PageRules]:
        """Parse the optional pageRules section."""
        if value is None:
            return None

        section = self._require_object(value, "pageRules")

        keep_pages = self._property(section, "keepPages", "pageRules")
        if keep_pages is not None:
            if not isinstance(keep_pages, list):
                raise InvalidTemplate("keepPages must be an array", "pageRules.keepPages")
            for page in keep_pages:
                # bool is an int subclass but never a page index
                if isinstance(page, bool) or not isinstance(page, int):
                    raise InvalidTemplate(
                        f"keepPages entries must be integers, got {page!r}",
                        "pageRules.keepPages"
                    )
            keep_pages = frozenset(keep_pages)

        footer_text = self._property(section, "footerText", "pageRules")
        if footer_text is not None and not isinstance(footer_text, str):
            raise InvalidTemplate("footerText must be a string", "pageRules.footerText")

        return PageRules(keep_pages=keep_pages, footer_text=footer_text)

    def _parse_cover_page(self, value: Any) -> Optional[CoverPage]:
        """Parse the optional coverPage section."""
        if value is None:
            return None

        section = self._require_object(value, "coverPage")

        enabled = self._property(section, "enabled", "coverPage")
        if enabled is None:
            enabled = False
        elif not isinstance(enabled, bool):
            raise InvalidTemplate("enabled must be a boolean", "coverPage.enabled")

        fields = self._property(section, "fields", "coverPage")
        fields = {} if fields is None else self._require_string_map(fields, "coverPage.fields")

        return CoverPage(enabled=enabled, fields=fields)

    # -------------------------------------------------------------------------
    # Structural helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _require_object(value: Any, location: str) -> Dict[str, Any]:
        if not isinstance(value, dict):
            raise InvalidTemplate(
                f"expected an object, got {type(value).__name__}",
                location
            )
        return value

    def _require_string_map(self, value: Any, location: str) -> Dict[str, str]:
        mapping = self._require_object(value, location)
        for name, entry in mapping.items():
            if not isinstance(entry, str):
                raise InvalidTemplate(
                    f"value for '{name}' must be a string",
                    f"{location}.{name}"
                )
        return dict(mapping)

    @staticmethod
    def _property(section: Dict[str, Any], name: str, location: str) -> Any:
        """
        Case-insensitive property lookup.

        Args:
            section: JSON object to search.
            name: Schema property name.
            location: Path of the section, for error messages.

        Returns:
            The property value, or None when absent.

        Raises:
            InvalidTemplate: If the property is declared more than once
                with different casing.
        """
        wanted = name.lower()
        matches = [key for key in section if key.lower() == wanted]

        if not matches:
            return None
        if len(matches) > 1:
            raise InvalidTemplate(
                f"property '{name}' declared more than once: {matches}",
                location
            )
        return section[matches[0]]


def parse_template(serialized: str) -> TemplateDefinition:
    """
    Convenience function to parse a serialized template definition.

    Args:
        serialized: JSON text of the template definition.

    Returns:
        Parsed TemplateDefinition.
    """
    return TemplateRuleParser().parse(serialized)
