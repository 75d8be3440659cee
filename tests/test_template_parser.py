"""
Tests for template definition parsing.

This module tests TemplateRuleParser and rule classification.
"""

import json

import pytest

from fiscal_stamp.template_rules import (
    CoverPage,
    DelimitedRegex,
    PageRules,
    PlainTemplate,
    RawRegex,
    TemplateDefinition,
    classify_rule,
    parse_template,
)
from fiscal_stamp.utils.exceptions import InvalidTemplate, TemplateError


class TestClassifyRule:
    """Test rule dialect classification."""

    def test_delimited_regex(self):
        """The inner pattern of a {{regex '...'}} rule is extracted."""
        rule = classify_rule("{{regex 'Folio: ([0-9]+)'}}")
        assert rule == DelimitedRegex("Folio: ([0-9]+)")

    def test_raw_regex_needs_both_parentheses(self):
        assert classify_rule(r"RFC:\s*([A-Z0-9]{12,13})") == RawRegex(r"RFC:\s*([A-Z0-9]{12,13})")
        assert isinstance(classify_rule("Total (MXN"), PlainTemplate)

    def test_plain_template(self):
        rule = classify_rule("Procesado por {{vendor.email}}")
        assert rule == PlainTemplate("Procesado por {{vendor.email}}")

    def test_delimited_takes_precedence_over_raw(self):
        """A delimited rule also contains parentheses but stays delimited."""
        assert isinstance(classify_rule("{{regex 'A(b)c'}}"), DelimitedRegex)


class TestTemplateRuleParser:
    """Test TemplateRuleParser.parse."""

    def test_full_definition(self, template_parser, template_json):
        definition = template_parser.parse(template_json)

        assert list(definition.metadata_rules) == ["RFC", "periodo", "procesado_por"]
        assert isinstance(definition.metadata_rules["RFC"], RawRegex)
        assert isinstance(definition.metadata_rules["periodo"], DelimitedRegex)
        assert isinstance(definition.metadata_rules["procesado_por"], PlainTemplate)

        assert definition.page_rules == PageRules(
            keep_pages=frozenset({1, 2, 3}),
            footer_text="Documento procesado el {{now}} por {{vendor.email}}"
        )
        assert definition.cover_page_enabled
        assert definition.cover_page.fields["RFC emisor"] == "{{metadata.RFC}}"

    def test_missing_sections_are_absent(self, template_parser):
        definition = template_parser.parse('{"metadataRules": {}}')

        assert definition.metadata_rules == {}
        assert definition.page_rules is None
        assert definition.cover_page is None
        assert not definition.has_rules
        assert not definition.cover_page_enabled

    def test_json_null_is_empty_definition(self, template_parser):
        assert template_parser.parse("null") == TemplateDefinition()

    def test_property_names_are_case_insensitive(self, template_parser):
        definition = template_parser.parse(json.dumps({
            "MetadataRules": {"Rfc": "RFC ([A-Z0-9]+)"},
            "PAGERULES": {"KeepPages": [2]},
            "coverpage": {"Enabled": False, "FIELDS": {"Nota": "x"}},
        }))

        # field names keep their declared casing
        assert list(definition.metadata_rules) == ["Rfc"]
        assert definition.page_rules.keep_pages == frozenset({2})
        assert definition.cover_page == CoverPage(enabled=False, fields={"Nota": "x"})

    def test_unknown_properties_are_ignored(self, template_parser):
        definition = template_parser.parse(json.dumps({
            "version": 3,
            "metadataRules": {"folio": "Folio (\\d+)"},
            "pageRules": {"orientation": "portrait"},
        }))

        assert list(definition.metadata_rules) == ["folio"]
        assert definition.page_rules == PageRules()

    def test_cover_page_enabled_defaults_to_false(self, template_parser):
        definition = template_parser.parse('{"coverPage": {"fields": {"a": "b"}}}')
        assert definition.cover_page.enabled is False

    @pytest.mark.parametrize("serialized", ["", "   ", "\n\t"])
    def test_empty_input_raises(self, template_parser, serialized):
        with pytest.raises(InvalidTemplate):
            template_parser.parse(serialized)

    def test_none_input_raises(self, template_parser):
        with pytest.raises(InvalidTemplate):
            template_parser.parse(None)

    @pytest.mark.parametrize("serialized", [
        "{not json",
        "[1, 2, 3]",
        '"just a string"',
        '{"metadataRules": ["RFC"]}',
        '{"metadataRules": {"RFC": 12}}',
        '{"pageRules": {"keepPages": "1,2"}}',
        '{"pageRules": {"keepPages": [1, "2"]}}',
        '{"pageRules": {"keepPages": [true]}}',
        '{"pageRules": {"footerText": 5}}',
        '{"coverPage": {"enabled": "yes"}}',
        '{"coverPage": {"fields": {"a": null}}}',
    ])
    def test_malformed_definitions_raise(self, template_parser, serialized):
        with pytest.raises(InvalidTemplate):
            template_parser.parse(serialized)

    def test_duplicate_field_names_raise(self, template_parser):
        serialized = '{"metadataRules": {"RFC": "a (b)", "RFC": "c (d)"}}'
        with pytest.raises(InvalidTemplate) as exc_info:
            template_parser.parse(serialized)
        assert "duplicate" in exc_info.value.reason

    def test_case_variant_sections_raise(self, template_parser):
        with pytest.raises(InvalidTemplate):
            template_parser.parse('{"metadataRules": {}, "METADATARULES": {}}')

    def test_error_carries_location(self, template_parser):
        with pytest.raises(InvalidTemplate) as exc_info:
            template_parser.parse('{"pageRules": {"footerText": 5}}')
        assert exc_info.value.location == "pageRules.footerText"
        assert isinstance(exc_info.value, TemplateError)

    def test_is_valid(self, template_parser, template_json):
        assert template_parser.is_valid(template_json)
        assert not template_parser.is_valid("")
        assert not template_parser.is_valid("{broken")

    def test_parse_template_function(self, template_json):
        assert parse_template(template_json).has_rules
