"""
utils/logger.py
───────────────
Loguru-based logger configured once and imported across the project.
Standard-library records from uvicorn / fastapi are routed into the same
sinks so the API and the engine share one log stream.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from loguru import logger

from config.settings import get_settings

_STDLIB_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi")


class _InterceptHandler(logging.Handler):
    """Forward stdlib logging records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # walk back to the frame that issued the logging call
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logger(level: str | None = None, log_file: Path | None = None) -> None:
    """
    (Re)configure the sinks. Arguments override the settings values;
    called once at import with the settings defaults.
    """
    settings = get_settings()
    level = (level or settings.log_level).upper()
    log_file = log_file or settings.log_file
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger.remove()  # remove default stderr handler

    # Console handler: colourful, human-readable
    logger.add(
        sys.stderr,
        level=level,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    # File handler: JSON for structured log analysis
    logger.add(
        str(log_file),
        level="DEBUG",
        rotation="10 MB",
        retention="14 days",
        serialize=True,
    )

    for name in _STDLIB_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [_InterceptHandler()]
        std_logger.propagate = False


setup_logger()

__all__ = ["logger", "setup_logger"]
