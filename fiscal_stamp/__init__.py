"""
Fiscal Stamping Engine - Source Package.

This package contains all core modules for the template-driven fiscal
extraction and document stamping engine. Each module has a single
responsibility.

Modules:
    - template_rules: Template definition parsing and rule classification
    - fiscal_extraction: Regex/heuristic fiscal fields and confidence score
    - rule_engine: Metadata rule evaluation and placeholder substitution
    - document_stamper: Raw PDF construction of the stamped document
    - pipeline: End-to-end processing of one document

Architecture:
    Page text + Template → Fiscal Extraction → Rule Evaluation → Placeholders
                                                                     ↓
                                                          Document Stamper
"""

__version__ = "1.0.0"
__author__ = "ML Engineering Team"

__all__ = [
    'template_rules',
    'fiscal_extraction',
    'rule_engine',
    'document_stamper',
    'pipeline',
    'utils'
]
