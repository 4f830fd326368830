"""Logging setup utilities for spuria.

Configures the ``spuria`` logger from the logging settings and renders
structured request records as ``key=value`` pairs.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

from spuria.config.settings import LoggingConfig

STDOUT = "stdout"


def setup_logging(config: LoggingConfig | None = None) -> logging.Handler:
    """Configure logging for the spuria application.

    Log records go to exactly one destination: stdout, or a file opened
    in append mode when ``config.file`` is a path.

    Args:
        config: Logging configuration. If None, uses defaults
                (INFO level, stdout output).

    Returns:
        The handler that was installed.
    """
    if config is None:
        config = LoggingConfig()

    root_logger = logging.getLogger("spuria")
    root_logger.setLevel(getattr(logging, config.level.upper(), logging.INFO))

    handler: logging.Handler
    if not config.file or config.file == STDOUT:
        handler = logging.StreamHandler(sys.stdout)
    else:
        handler = logging.FileHandler(config.file, mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter(config.format))

    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)
        existing.close()
    root_logger.addHandler(handler)

    root_logger.info("Logging initialized at %s level", config.level)
    return handler


def format_fields(**fields: Any) -> str:
    """Render fields as ``key=value`` pairs, quoting values when needed."""
    parts = []
    for key, value in fields.items():
        text = "" if value is None else str(value)
        if text == "" or any(c in text for c in ' ="\\') or not text.isprintable():
            text = json.dumps(text, ensure_ascii=False)
        parts.append(f"{key}={text}")
    return " ".join(parts)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Emit ``event`` with structured fields.

    The fields are rendered into the message and also attached to the
    record as ``record.fields`` for handlers that want them raw.
    """
    logger.log(level, "%s %s", event, format_fields(**fields), extra={"fields": fields})
