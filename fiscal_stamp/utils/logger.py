"""
Logging Module.

Every module of the stamping engine logs under the "fiscal_stamp"
namespace. The CLI configures that namespace once from settings.yaml;
library callers may attach their own handlers instead.

Console lines are colored by level with colorama. A rotating file
handler is added when logging.file.enabled is set.

Usage:
    from fiscal_stamp.utils.logger import setup_logger_from_config, get_logger

    setup_logger_from_config()
    logger = get_logger(__name__)
    logger.info("Stamping document...")
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, Union

import colorama
from colorama import Fore, Style

from config import get_config

colorama.init()

APP_LOGGER_NAME = "fiscal_stamp"

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LEVEL_COLORS = {
    logging.DEBUG: Fore.CYAN,
    logging.INFO: Fore.GREEN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.RED + Style.BRIGHT,
}


class ColoredFormatter(logging.Formatter):
    """Console formatter that wraps each line in its level color."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        return f"{color}{line}{Style.RESET_ALL}" if color else line


def _to_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.INFO)


def setup_logger(
    level: Union[str, int] = "INFO",
    log_format: Optional[str] = None,
    date_format: Optional[str] = None,
    log_file: Optional[str] = None,
    max_bytes: int = 10485760,
    backup_count: int = 5,
    colorize: bool = True
) -> logging.Logger:
    """
    Configure the "fiscal_stamp" logger.

    Existing handlers are replaced, so calling this twice does not
    duplicate output.

    Args:
        level: Logging level name or number.
        log_format: Record format; defaults to DEFAULT_FORMAT.
        date_format: Timestamp format; defaults to DEFAULT_DATE_FORMAT.
        log_file: Rotating log file path; None disables file logging.
        max_bytes: Size at which the log file rotates.
        backup_count: Rotated files kept.
        colorize: Color console lines by level.

    Returns:
        The configured application logger.
    """
    log_format = log_format or DEFAULT_FORMAT
    date_format = date_format or DEFAULT_DATE_FORMAT

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    formatter_class = ColoredFormatter if colorize else logging.Formatter
    console_handler.setFormatter(formatter_class(log_format, datefmt=date_format))
    app_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(logging.Formatter(log_format, datefmt=date_format))
        app_logger.addHandler(file_handler)

    app_logger.propagate = False
    set_level(level)

    app_logger.debug("Logging initialized")
    return app_logger


def set_level(level: Union[str, int]) -> None:
    """Change the level of the application logger and all its handlers."""
    numeric_level = _to_level(level)
    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(numeric_level)
    for handler in app_logger.handlers:
        handler.setLevel(numeric_level)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger inside the application namespace.

    Example:
        >>> get_logger("fiscal_stamp.pipeline.processor").name
        'fiscal_stamp.pipeline.processor'
        >>> get_logger("main").name
        'fiscal_stamp.main'
    """
    if name == APP_LOGGER_NAME or name.startswith(APP_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")


def setup_logger_from_config() -> logging.Logger:
    """
    Configure logging from the "logging" section of settings.yaml.

    Returns:
        The configured application logger.
    """
    log_file = None
    if get_config("logging.file.enabled", False):
        log_file = get_config("logging.file.path")

    return setup_logger(
        level=get_config("logging.level", "INFO"),
        log_format=get_config("logging.format"),
        date_format=get_config("logging.date_format"),
        log_file=log_file,
        max_bytes=get_config("logging.file.max_bytes", 10485760),
        backup_count=get_config("logging.file.backup_count", 5),
        colorize=get_config("logging.console.colorize", True)
    )
