"""Logging configuration."""

import logging
import sys

_NOISY_LOGGERS = ("httpx", "httpcore", "openai", "psycopg", "psycopg.pool")


def configure_logging(level: str = "INFO") -> None:
    """Configure root logger with a single stderr handler."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root_logger.addHandler(handler)
    root_logger.setLevel(level.upper())

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
