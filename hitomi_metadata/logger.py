"""
Logging configuration for the Hitomi.la metadata source.

Log lines go to stderr: stdout belongs to the JSON written by
run_extractor.py.  The default level comes from HITOMI_LOG_LEVEL (a level
name such as DEBUG or WARNING), INFO when unset.
"""

import logging
import os
import sys
from typing import Optional

DEFAULT_LEVEL = logging.INFO


def level_from_env() -> int:
    """Resolve HITOMI_LOG_LEVEL to a logging level, INFO if unset or unknown."""
    name = os.getenv("HITOMI_LOG_LEVEL", "").strip().upper()
    if not name:
        return DEFAULT_LEVEL
    level = logging.getLevelName(name)
    # getLevelName returns "Level X" for names it does not know
    return level if isinstance(level, int) else DEFAULT_LEVEL


def setup_logger(
    name: str = "hitomi_metadata",
    level: Optional[int] = None,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up and return the package logger.

    Args:
        name: Logger name
        level: Logging level (default: HITOMI_LOG_LEVEL, else INFO)
        log_file: Optional file path for logging

    Returns:
        Configured logger instance
    """
    if level is None:
        level = level_from_env()

    logger = logging.getLogger(name)

    # Called again with a new level (e.g. --verbose): only adjust the level
    if logger.handlers:
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    logger.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(level)
    stderr_handler.setFormatter(formatter)
    logger.addHandler(stderr_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


# Package logger, configured once at import
logger = setup_logger()


def get_module_logger(module_name: str) -> logging.Logger:
    """
    Get the child logger for one pipeline stage, e.g. "hitomi_metadata.pages".

    Child loggers propagate to the package logger, so they share its
    handlers and the stage name appears on every line.
    """
    return logging.getLogger(f"hitomi_metadata.{module_name}")
