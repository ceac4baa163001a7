"""Logging configuration for the options analytics engine.

Every module logs under the ``options_analytics`` namespace so one call to
``setup_logging`` controls the whole package. Log records go to stderr by
default, leaving stdout to the reports printed by ``output.console``.
"""

import logging
import sys
from typing import Optional, TextIO
from pathlib import Path

from .error_handling import ConfigurationError

ROOT_LOGGER_NAME = "options_analytics"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure the package logger.

    Calling it again replaces the handlers of the previous call.

    Args:
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL (case-insensitive)
        log_file: Optional path to an appended log file; parent directories are created
        log_format: Optional format string, defaults to DEFAULT_FORMAT
        stream: Console stream, sys.stderr when None

    Returns:
        The ``options_analytics`` logger

    Raises:
        ConfigurationError: If log_level is not a known level name

    Example:
        >>> logger = setup_logging(log_level="DEBUG", log_file="logs/analytics.log")
        >>> logger.info("Pricing %d positions", 12)
    """
    level_name = log_level.upper()
    if level_name not in LOG_LEVELS:
        raise ConfigurationError(
            f"Unknown log level {log_level!r} (expected one of {', '.join(LOG_LEVELS)})"
        )

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, level_name))

    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    formatter = logging.Formatter(log_format or DEFAULT_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    console_handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, mode='a')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the package namespace.

    Example:
        >>> get_logger("examples.analyze_portfolio").name
        'options_analytics.examples.analyze_portfolio'
    """
    if name:
        return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    return logging.getLogger(ROOT_LOGGER_NAME)
