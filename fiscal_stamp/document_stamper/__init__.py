"""
Document Stamper Module for the Fiscal Stamping Engine.

This module provides functionality for:
    - Writing PDF content streams (paths, colors, text)
    - Building PDF files from an object table with computed xref offsets
    - Rendering the stamped single-page output document

Author: ML Engineering Team
"""

from .content_stream import ContentStream, escape_pdf_string
from .pdf_builder import PdfDocumentBuilder, build_single_page_document
from .stamper import DocumentStamper, EMAIL_PATTERN

__all__ = [
    'ContentStream',
    'escape_pdf_string',
    'PdfDocumentBuilder',
    'build_single_page_document',
    'DocumentStamper',
    'EMAIL_PATTERN'
]
