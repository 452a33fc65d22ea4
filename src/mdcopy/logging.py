"""Centralized logging configuration using loguru.

This module provides the logging setup for mdcopy. Library modules log
through loguru's ``logger`` directly; only the CLI installs handlers.

Example:
    from mdcopy.logging import level_from_verbosity, setup_logging

    setup_logging(level=level_from_verbosity(verbose=2, quiet=False))

"""

import sys
from typing import Any

from loguru import logger

_VERBOSITY_LEVELS = ("WARNING", "INFO", "DEBUG", "TRACE")


def level_from_verbosity(verbose: int, quiet: bool = False) -> str:
    """Map repeated -v flags and -q onto a log level.

    Args:
        verbose: Number of -v flags given.
        quiet: Suppress everything except errors; wins over verbose.

    Returns:
        A loguru level name.

    """
    if quiet:
        return "ERROR"
    return _VERBOSITY_LEVELS[min(max(verbose, 0), len(_VERBOSITY_LEVELS) - 1)]


def setup_logging(
    level: str = "WARNING",
    json_output: bool = False,
    log_file: str | None = None,
) -> Any:
    """Configure loguru for the application.

    Should be called once at application startup.

    Args:
        level: Minimum log level to capture. One of: TRACE, DEBUG, INFO, WARNING, ERROR.
        json_output: If True, output logs in JSON format.
        log_file: Optional file path to write logs to. If None, logs only to stderr.

    Returns:
        The configured loguru logger instance.

    """
    # Remove default handler
    logger.remove()

    console_format = "<level>{level: <8}</level> | <level>{message}</level>"
    file_format = (
        "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
    )

    if json_output:
        logger.add(
            sys.stderr,
            format="{message}",
            serialize=True,
            level=level,
        )
    else:
        logger.add(
            sys.stderr,
            format=console_format,
            level=level,
            colorize=True,
        )

    if log_file:
        logger.add(
            log_file,
            format=file_format,
            level=level,
            rotation="10 MB",
            retention="7 days",
            compression="gz",
        )

    return logger
