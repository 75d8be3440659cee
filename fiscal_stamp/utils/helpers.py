"""
Helper Utilities Module.

This module provides common utility functions used throughout the
fiscal stamping engine. Functions here should be generic and reusable
across different modules.

Functions:
    - ensure_directory: Create directory if it doesn't exist
    - validate_file_exists: Check a path points to a regular file
    - utc_timestamp: Current UTC time as a formatted string
    - wrap_words: Greedy word wrap to a fixed column width
    - split_pages: Split concatenated page text on the page-break sentinel
    - count_pages: Number of pages in concatenated page text
"""

from datetime import datetime
from pathlib import Path
from typing import List, Union

from dateutil import tz

from config import get_config

DEFAULT_PAGE_BREAK = "---PAGE-BREAK---"


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists.

    Returns:
        Path object pointing to the directory.

    Example:
        >>> ensure_directory("outputs/stamped")
        PosixPath('outputs/stamped')
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def validate_file_exists(filepath: Union[str, Path]) -> bool:
    """
    Check if a file exists and is a regular file.

    Args:
        filepath: Path to check.

    Returns:
        True if file exists and is a regular file.
    """
    path = Path(filepath)
    return path.exists() and path.is_file()


def utc_timestamp(format_str: str = "%Y-%m-%dT%H:%M:%S") -> str:
    """
    Generate a sortable UTC timestamp string.

    Args:
        format_str: strftime format string.

    Returns:
        Formatted timestamp string.

    Example:
        >>> utc_timestamp()
        "2026-10-17T14:30:22"
    """
    return datetime.now(tz.UTC).strftime(format_str)


def wrap_words(text: str, max_chars: int) -> List[str]:
    """
    Greedy word wrap on single spaces.

    Words longer than the width are kept whole on their own line. Empty
    input yields an empty list.

    Args:
        text: Text to wrap.
        max_chars: Maximum characters per line.

    Returns:
        List of lines.

    Example:
        >>> wrap_words("Factura de servicios profesionales", 20)
        ['Factura de servicios', 'profesionales']
    """
    if not text:
        return []

    lines = []
    current = ""

    for word in text.split(' '):
        candidate = f"{current} {word}" if current else word
        if len(candidate) <= max_chars:
            current = candidate
        else:
            if current:
                lines.append(current)
            current = word

    if current:
        lines.append(current)

    return lines if lines else [text]


def split_pages(text: str, sentinel: str = None) -> List[str]:
    """
    Split concatenated page text on the page-break sentinel.

    A trailing sentinel does not produce an extra empty page.

    Args:
        text: Concatenated page text.
        sentinel: Page-break marker; defaults to the configured one.

    Returns:
        List of page texts (empty list for empty input).
    """
    if not text:
        return []

    sentinel = sentinel or get_config("extraction.page_break", DEFAULT_PAGE_BREAK)
    pages = text.split(sentinel)

    if len(pages) > 1 and not pages[-1].strip():
        pages = pages[:-1]

    return pages


def count_pages(text: str, sentinel: str = None) -> int:
    """
    Count pages in concatenated page text.

    Text without any sentinel counts as a single page.

    Args:
        text: Concatenated page text.
        sentinel: Page-break marker; defaults to the configured one.

    Returns:
        Number of pages.
    """
    return len(split_pages(text, sentinel))
