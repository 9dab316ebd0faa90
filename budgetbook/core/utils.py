"""Shared utility functions for the Budgetbook project."""

import logging
import uuid
from datetime import UTC, datetime
from pathlib import Path

import colorlog


def get_logger(name: str) -> logging.Logger:
    """Get a logger with a colorized format for the project.

    Dotted names (``budgetbook.api``) propagate to their top-level logger, which owns the handlers.
    """
    logger = logging.getLogger(name)
    top_level = name.split(".", 1)[0]
    if top_level != name:
        get_logger(top_level)
        return logger
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = colorlog.ColoredFormatter(
            "%(log_color)s%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.propagate = False
    return logger


def ensure_dir(path: str | Path) -> None:
    """Ensure a directory exists (like mkdir -p)."""
    Path(path).mkdir(parents=True, exist_ok=True)


def new_id() -> str:
    """Generate a new document identifier."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    """Get the current UTC time as an aware datetime."""
    return datetime.now(UTC)
