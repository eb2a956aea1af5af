"""Logging configuration for fitmatch."""

import logging
import sys
from typing import TextIO

from fitmatch.config.settings import get_settings

# Parent of every module logger in the package
LOGGER_NAME = "fitmatch"

# Default log format
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Set once the console handler is installed
_configured = False


def configure_logging(
    level: str | None = None,
    format_string: str = LOG_FORMAT,
    date_format: str = DATE_FORMAT,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure and return the main application logger.

    Module loggers created with ``logging.getLogger(__name__)`` inside the
    ``fitmatch`` package are children of this logger and inherit its level
    and handler.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to ``Settings.log_level`` (``LOG_LEVEL``).
        format_string: Format string for log messages.
        date_format: Format string for timestamps.
        stream: Stream for the console handler. Defaults to stderr, since
            the CLI writes its JSON results to stdout.

    Returns:
        The configured application logger.
    """
    global _configured

    logger = logging.getLogger(LOGGER_NAME)

    # Explicit level wins over the environment
    if level is None:
        level = get_settings().log_level
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(log_level)

    if not _configured:
        # Drop handlers left over from a previous run in the same process
        logger.handlers.clear()

        formatter = logging.Formatter(format_string, datefmt=date_format)

        # stdout carries the JSON envelope, so logs never go there by default
        console_handler = logging.StreamHandler(stream or sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        # Keep scoring debug output out of the root logger
        logger.propagate = False

        _configured = True
    else:
        # Reconfiguring only changes the level
        for handler in logger.handlers:
            handler.setLevel(log_level)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger for a specific module.

    Args:
        name: The module name (prefixed with 'fitmatch.' unless it
            already lives under the package).

    Returns:
        A child logger for the module.
    """
    if name == LOGGER_NAME or name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def reset_logging() -> None:
    """Reset logging configuration (useful for testing)."""
    global _configured

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True

    _configured = False
