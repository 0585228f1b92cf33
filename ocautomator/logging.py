"""Logging configuration for the ocautomator package."""
import logging
import sys
from typing import Optional

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(
    debug_mode: bool = False,
    level: Optional[str] = None,
    fmt: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the root logger for a CLI run.

    Args:
        debug_mode: Force DEBUG level regardless of ``level``
        level: Level name such as "INFO" (default: INFO)
        fmt: Log record format (default: DEFAULT_FORMAT)

    Returns:
        The package logger
    """
    if debug_mode:
        log_level = logging.DEBUG
    else:
        log_level = logging.getLevelName((level or "INFO").upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO

    root = logging.getLogger()
    root.setLevel(log_level)

    # Replace our own handler on every call; sys.stderr may have been swapped since
    for handler in list(root.handlers):
        if getattr(handler, "_ocautomator", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler._ocautomator = True
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    root.addHandler(handler)

    logger = logging.getLogger("ocautomator")
    if debug_mode:
        logger.debug("Debug mode enabled")
    return logger
