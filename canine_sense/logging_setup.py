"""Loguru sink configuration for embedding applications."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from loguru import logger

if TYPE_CHECKING:
    from canine_sense.config import EngineConfig


CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{module}</cyan>:<cyan>{line}</cyan> | <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {module}:{line} | {message}"


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None):
    """
    Configure engine logging.

    Args:
        log_level: Console level (DEBUG shows per-evaluation detail)
        log_file: Optional file sink, rotated at 10 MB and kept 7 days
    """
    logger.remove()  # Remove default handler

    logger.add(
        sys.stderr,
        level=log_level.upper(),
        format=CONSOLE_FORMAT,
        colorize=True,
    )

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level="DEBUG",
            format=FILE_FORMAT,
            rotation="10 MB",
            retention="7 days",
        )


def setup_logging_from_config(config: EngineConfig):
    """Configure logging from an EngineConfig's logging section."""
    setup_logging(config.log_level, config.log_file)
