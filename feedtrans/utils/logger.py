"""Logging utilities.

Library modules log through ``logging.getLogger(__name__)``. Front ends call
setup_logger() once; from then on those records, and the ones emitted by
anthropic and httpx, are rendered by loguru.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from loguru import logger as loguru_logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)

FILE_ROTATION = "10 MB"
FILE_RETENTION = "1 week"


class InterceptHandler(logging.Handler):
    """Hand stdlib logging records over to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk out of the logging package so {name}:{function} point at the caller
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        loguru_logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logger(
    name: str = "feedtrans",
    level: str = "INFO",
    log_file: Optional[str] = None
):
    """
    Configure loguru sinks and route stdlib logging into them.

    Args:
        name: Package logger whose level is set
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file, rotated at 10 MB

    Returns:
        The configured loguru logger
    """
    level = level.upper()
    loguru_logger.remove()
    loguru_logger.add(sys.stderr, level=level, format=LOG_FORMAT)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        loguru_logger.add(log_file, level=level, rotation=FILE_ROTATION, retention=FILE_RETENTION)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logging.getLogger(name).setLevel(getattr(logging, level, logging.INFO))

    return loguru_logger


def get_logger(name: str = "feedtrans"):
    """Loguru logger tagged with a component name."""
    return loguru_logger.bind(component=name)
