"""
Logger utility for consistent logging across modules
"""

import logging
import sys

from app.core.config import settings


class ColorFormatter(logging.Formatter):
    """Formatter with color support like uvicorn."""

    COLORS = {
        logging.DEBUG: "\033[36m",  # Cyan
        logging.INFO: "\033[32m",  # Green
        logging.WARNING: "\033[33m",  # Yellow
        logging.ERROR: "\033[31m",  # Red
        logging.CRITICAL: "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelno, "")
        # Pad levelname first, then apply color (so escape codes don't affect alignment)
        record.levelname = f"{color}{record.levelname + self.RESET + ':':<13}"
        return super().format(record)


def default_level() -> int:
    """Resolve LOG_LEVEL from settings, falling back to INFO for unknown names"""
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """
    Get a logger with uvicorn's handler for consistent formatting.

    Args:
        name: Logger name (typically __name__)
        level: Logging level (default: settings.LOG_LEVEL)

    Returns:
        Configured logger instance
    """
    if level is None:
        level = default_level()

    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(ColorFormatter("%(levelname)s [%(name)s:%(funcName)s] %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
