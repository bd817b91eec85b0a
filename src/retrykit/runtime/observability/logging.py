"""Logging setup for the retrykit namespace.

The engine logs through stdlib loggers (``retrykit.retry``) and never
prints. ``configure_logging`` attaches one handler to the ``retrykit``
logger with either a human-readable line format or JSON Lines for log
aggregation. Defaults come from LoggingSettings (RETRYKIT_LOG_*).

Quick Start:
    >>> from retrykit.runtime.observability import configure_logging
    >>> configure_logging()                         # settings-driven
    >>> configure_logging("json", level="DEBUG")    # explicit
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import TextIO

import orjson

from retrykit.foundation.config import LoggingSettings, get_settings

ROOT_LOGGER = "retrykit"

_TEXT_FMT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_TEXT_FMT_NO_TS = "[%(levelname)s] %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """JSON Lines output (Elasticsearch, Loki, Datadog, etc.)."""

    def __init__(self, *, include_timestamps: bool = True) -> None:
        super().__init__()
        self.include_timestamps = include_timestamps

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
        }
        if self.include_timestamps:
            entry["timestamp"] = datetime.fromtimestamp(record.created, UTC).isoformat()
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(entry, option=orjson.OPT_NON_STR_KEYS, default=str).decode()


def _formatter(fmt: str, include_timestamps: bool) -> logging.Formatter:
    match fmt:
        case "json": return JsonFormatter(include_timestamps=include_timestamps)
        case "text": return logging.Formatter(_TEXT_FMT if include_timestamps else _TEXT_FMT_NO_TS)
        case _: raise ValueError(f"Unknown format: {fmt}. Use 'text' or 'json'")


def configure_logging(
    format: str | None = None,  # noqa: A002 - shadows builtin but matches LoggingSettings
    level: str | None = None,
    *,
    stream: TextIO | None = None,
    settings: LoggingSettings | None = None,
) -> logging.Logger:
    """Configure the ``retrykit`` logger. Idempotent: replaces its own handler.

    Args:
        format: "text" or "json" (default from settings)
        level: Level name (default from settings)
        stream: Output stream, stderr by default
        settings: Explicit LoggingSettings instead of the cached global ones

    Returns:
        The configured ``retrykit`` logger
    """
    cfg = settings or get_settings().logging
    formatter = _formatter(format or cfg.format, cfg.include_timestamps)
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in [h for h in logger.handlers if getattr(h, "_retrykit", False)]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)
    handler._retrykit = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel((level or cfg.level).upper())
    return logger

