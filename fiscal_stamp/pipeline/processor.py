"""
Template Processor Module.

This module orchestrates one document through the engine:

    1. Restrict the page text to the template's keepPages
    2. Built-in fiscal extraction and confidence scoring
    3. Template metadata rules, merged over the built-in fields
    4. Footer and cover page placeholder resolution
    5. Stamped output document

Only InvalidTemplate escapes process(); any other failure is recorded
in the result's "error" field and the original bytes are returned.

Author: ML Engineering Team
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from config import get_config
from fiscal_stamp.document_stamper import DocumentStamper
from fiscal_stamp.fiscal_extraction import FiscalFieldExtractor
from fiscal_stamp.rule_engine import RuleEvaluationEngine, VendorContext, substitute
from fiscal_stamp.template_rules import TemplateDefinition, TemplateRuleParser
from fiscal_stamp.utils.helpers import DEFAULT_PAGE_BREAK, count_pages, split_pages
from fiscal_stamp.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


@dataclass(frozen=True)
class Enrichment:
    """
    Optional enrichment strings supplied by the AI collaborator.

    Attributes:
        title: Document title
        summary: Document summary
        contact_information: Contact block text
    """
    title: str = ""
    summary: str = ""
    contact_information: str = ""


@dataclass
class ProcessResult:
    """
    Result of processing one document.

    Attributes:
        final_bytes: Stamped document, or the original bytes on failure
        fields: Field name to value, flat strings
        confidence_score: Built-in extraction confidence 0..100
        footer_text: Resolved footer text, if the template declares one
        cover_page_fields: Resolved cover page fields, if enabled
        success: False when processing failed and fell back
    """
    final_bytes: bytes = b""
    fields: Dict[str, str] = field(default_factory=dict)
    confidence_score: int = 0
    footer_text: Optional[str] = None
    cover_page_fields: Dict[str, str] = field(default_factory=dict)
    success: bool = True

    def to_flat_dict(self) -> Dict[str, Any]:
        """
        Convert to flat dictionary suitable for persistence.

        Cover page fields are prefixed with "cover." to keep keys unique.

        Returns:
            Flat dictionary with no nested structures.
        """
        result = dict(self.fields)
        if self.footer_text is not None:
            result['footer_text'] = self.footer_text
        for name, value in self.cover_page_fields.items():
            result[f'cover.{name}'] = value
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_flat_dict(), indent=indent, ensure_ascii=False)


class TemplateProcessor:
    """
    Runs extraction, rule evaluation and stamping for one document.

    Components are created once and shared by every call; process() keeps
    no state between documents.

    Example:
        >>> processor = TemplateProcessor()
        >>> result = processor.process(pdf_bytes, page_text, template_json, vendor)
        >>> result.fields["RFC"]
        'ABC123456XYZ'
    """

    def __init__(self) -> None:
        """Initialize the processor and its components."""
        self.parser = TemplateRuleParser()
        self.extractor = FiscalFieldExtractor()
        self.engine = RuleEvaluationEngine()
        self.stamper = DocumentStamper()

        self.page_break = get_config("extraction.page_break", DEFAULT_PAGE_BREAK)
        self.not_found_value = get_config("rules.not_found_value", "N/A")

        logger.info("TemplateProcessor initialized")

    def process(
        self,
        original_bytes: bytes,
        text: Optional[str],
        template: Union[TemplateDefinition, str],
        vendor: Optional[VendorContext] = None,
        enrichment: Optional[Enrichment] = None
    ) -> ProcessResult:
        """
        Process one document.

        Args:
            original_bytes: Original document bytes (fallback output).
            text: Extracted page text, pages joined by the page-break sentinel.
            template: Parsed template, or its serialized JSON.
            vendor: Vendor identity for placeholders.
            enrichment: Optional title, summary and contact strings.

        Returns:
            ProcessResult with the output bytes and field map.

        Raises:
            InvalidTemplate: If a serialized template does not parse.
        """
        if isinstance(template, str):
            template = self.parser.parse(template)

        vendor = vendor or VendorContext()
        enrichment = enrichment or Enrichment()
        text = text or ""

        result = ProcessResult(final_bytes=original_bytes)

        try:
            working_text = self._select_pages(text, template)

            # Built-in extraction
            fiscal_data = self.extractor.extract(working_text)
            result.confidence_score = self.extractor.score(fiscal_data)

            result.fields = fiscal_data.to_fields()
            result.fields['confidence_score'] = str(result.confidence_score)
            result.fields['page_count'] = str(count_pages(text, self.page_break))

            logger.info(f"Built-in extraction confidence: {result.confidence_score}%")

            # Template rules
            custom_fields = {}
            for name, value in self.engine.evaluate_all(template, working_text, vendor).items():
                if self._is_no_match(value) and not self._is_no_match(result.fields.get(name)):
                    logger.debug(f"Rule {name} found nothing, keeping built-in value")
                    continue
                if name not in result.fields:
                    custom_fields[name] = value
                result.fields[name] = value

            # Footer and cover page
            if template.page_rules is not None and template.page_rules.footer_text is not None:
                result.footer_text = substitute(
                    template.page_rules.footer_text, result.fields, vendor
                )

            if template.cover_page_enabled:
                result.cover_page_fields = {
                    name: substitute(value, result.fields, vendor) or ""
                    for name, value in template.cover_page.fields.items()
                }

            # Stamping
            extra_fields = dict(custom_fields)
            extra_fields.update(result.cover_page_fields)

            result.final_bytes = self.stamper.stamp(
                fiscal_data,
                result.confidence_score,
                vendor.email,
                enrichment.title,
                enrichment.summary,
                enrichment.contact_information,
                original_bytes=original_bytes,
                footer_text=result.footer_text or "",
                extra_fields=extra_fields,
                field_values=result.fields
            )

            logger.info(f"Processed document: {len(result.fields)} fields")

        except Exception as e:
            logger.error(f"Processing failed: {e}")
            result.fields['error'] = f"Processing failed: {e}"
            result.final_bytes = original_bytes
            result.success = False

        return result

    def _select_pages(self, text: str, template: TemplateDefinition) -> str:
        """Keep only the template's keepPages (1-based); out-of-range pages are ignored."""
        if template.page_rules is None or not template.page_rules.keep_pages:
            return text

        pages = split_pages(text, self.page_break)
        keep = sorted(p for p in template.page_rules.keep_pages if 1 <= p <= len(pages))

        if not keep:
            logger.warning(
                f"keepPages {sorted(template.page_rules.keep_pages)} selects none of "
                f"{len(pages)} pages, using the whole text"
            )
            return text

        logger.debug(f"Keeping pages {keep} of {len(pages)}")
        return self.page_break.join(pages[p - 1] for p in keep)

    def _is_no_match(self, value: Optional[str]) -> bool:
        return not value or value == self.not_found_value
