"""Centralized logging configuration for the photo pipeline."""

import os
import sys
import logging
from typing import Any, Optional


def setup_logger(
    name: str = "photo-pipeline",
    level: Optional[str] = None,
    format_type: str = "structured",
) -> logging.Logger:
    """
    Setup centralized logging with environment variable configuration.

    Args:
        name: Logger name (defaults to "photo-pipeline")
        level: Log level override (defaults to env var or INFO)
        format_type: Logging format ("structured" or "simple")

    Returns:
        Configured logger instance

    Environment Variables:
        LOG_LEVEL: Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        LOG_FORMAT: Set format type ("structured" or "simple")
    """
    logger = logging.getLogger(name)

    if level:
        log_level = getattr(logging, level.upper(), logging.INFO)
    else:
        env_level = os.getenv("LOG_LEVEL", "INFO").upper()
        log_level = getattr(logging, env_level, logging.INFO)

    logger.setLevel(log_level)

    # Avoid duplicate handlers
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)

        env_format = os.getenv("LOG_FORMAT", format_type).lower()

        if env_format == "structured":
            formatter = logging.Formatter(
                "%(asctime)s | %(name)s | %(levelname)-8s | "
                "%(filename)s:%(lineno)d | %(funcName)s() | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        else:
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )

        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.propagate = False
    return logger


def get_logger(name: str = "photo-pipeline") -> logging.Logger:
    """Get a logger instance with consistent configuration."""
    return setup_logger(name)


class ItemLogger:
    """
    Wraps a logger so every message carries the ``[item_id]`` prefix.

    Ingestion, relocation and deletion steps for one item can then be
    grepped out of interleaved concurrent output. Works with any object
    exposing ``debug``/``info``/``warning``/``error``.
    """

    def __init__(self, logger: Any, item_id: str):
        self.logger = logger
        self.item_id = item_id

    def _prefixed(self, message: str) -> str:
        return f"[{self.item_id}] {message}"

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.logger.debug(self._prefixed(message), *args, **kwargs)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.logger.info(self._prefixed(message), *args, **kwargs)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.logger.warning(self._prefixed(message), *args, **kwargs)

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.logger.error(self._prefixed(message), *args, **kwargs)
