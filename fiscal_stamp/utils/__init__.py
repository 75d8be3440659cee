"""
Utility Module for the Fiscal Stamping Engine.

This module provides common utilities used across all other modules:
    - Logging configuration
    - Custom exceptions
    - Text and page helpers
"""

from .logger import setup_logger, set_level, get_logger
from .helpers import ensure_directory, utc_timestamp, wrap_words, split_pages, count_pages

__all__ = [
    'setup_logger',
    'set_level',
    'get_logger',
    'ensure_directory',
    'utc_timestamp',
    'wrap_words',
    'split_pages',
    'count_pages'
]
