"""
Pipeline Module for the Fiscal Stamping Engine.

Author: ML Engineering Team
"""

from .processor import TemplateProcessor, ProcessResult, Enrichment

__all__ = [
    'TemplateProcessor',
    'ProcessResult',
    'Enrichment'
]
