"""
Pytest configuration and fixtures.

This module provides shared fixtures and configuration for all tests.
"""

import json

import pytest

from config import ConfigurationManager
from fiscal_stamp.fiscal_extraction import FiscalFieldExtractor
from fiscal_stamp.rule_engine import RuleEvaluationEngine, VendorContext
from fiscal_stamp.document_stamper import DocumentStamper
from fiscal_stamp.pipeline import TemplateProcessor
from fiscal_stamp.template_rules import TemplateRuleParser

RFC_RULE = r"(?:RFC|R\.F\.C\.?)[\s:]*([A-Z0-9]{12,13})"


@pytest.fixture(autouse=True)
def reset_config():
    """Give every test a freshly loaded configuration."""
    ConfigurationManager.reset()
    yield
    ConfigurationManager.reset()


@pytest.fixture
def sample_text():
    """Sample fiscal document text with every built-in field present."""
    return (
        "FACTURA\n"
        "Comercializadora Del Norte ABC123456XYZ\n"
        "Domicilio fiscal: Av. Reforma 100, CDMX\n"
        "Periodo: 15/03/2024\n"
        "Fecha de emisión: 20/03/2024\n"
        "Concepto: Servicios de consultoría\n"
        "Total: $1,234.56\n"
    )


@pytest.fixture
def two_page_text():
    """Two pages joined by the page-break sentinel."""
    return (
        "FACTURA\nRFC: ABC123456XYZ\nPeriodo: marzo 2024\n"
        "---PAGE-BREAK---"
        "Detalle de conceptos\nTotal: $500.00\n"
    )


@pytest.fixture
def vendor():
    """Vendor identity for placeholder resolution."""
    return VendorContext(email="proveedor@empresa.mx", user_id="42")


@pytest.fixture
def template_dict():
    """Template definition as a Python structure."""
    return {
        "metadataRules": {
            "RFC": RFC_RULE,
            "periodo": "{{regex 'Periodo: ([0-9/]+)'}}",
            "procesado_por": "Procesado por {{vendor.email}}",
        },
        "pageRules": {
            "keepPages": [1, 2, 3],
            "footerText": "Documento procesado el {{now}} por {{vendor.email}}",
        },
        "coverPage": {
            "enabled": True,
            "fields": {
                "Proveedor": "{{vendor.email}}",
                "RFC emisor": "{{metadata.RFC}}",
            },
        },
    }


@pytest.fixture
def template_json(template_dict):
    """Serialized template definition."""
    return json.dumps(template_dict)


@pytest.fixture
def original_pdf():
    """Stand-in for the original document bytes."""
    return b"%PDF-1.4\n% original document\n%%EOF\n"


@pytest.fixture
def template_parser():
    return TemplateRuleParser()


@pytest.fixture
def extractor():
    return FiscalFieldExtractor()


@pytest.fixture
def engine():
    return RuleEvaluationEngine()


@pytest.fixture
def stamper():
    return DocumentStamper()


@pytest.fixture
def processor():
    return TemplateProcessor()


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    # Add custom markers
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers."""
    for item in items:
        if "integration" in item.nodeid or "processor" in item.nodeid or "main" in item.nodeid:
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
