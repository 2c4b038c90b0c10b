"""Logging setup shared by the library and the ``sqlapm`` command.

Every logger lives under the ``sqlapm`` namespace. Structured payloads travel
on records as ``extra_fields`` and are merged into the JSON output of
:class:`StructuredFormatter`.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Any

from sqlapm._serialization import encode_json

__all__ = (
    "EVENTS_LOGGER_NAME",
    "LOG_FORMATS",
    "ROOT_LOGGER_NAME",
    "StructuredFormatter",
    "configure_logging",
    "get_logger",
    "log_with_context",
)

ROOT_LOGGER_NAME = "sqlapm"
EVENTS_LOGGER_NAME = f"{ROOT_LOGGER_NAME}.events"
LOG_FORMATS = ("structured", "simple")

_SIMPLE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class StructuredFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra_fields = getattr(record, "extra_fields", None)
        if extra_fields:
            entry.update(extra_fields)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return encode_json(entry)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``name`` as a child of the ``sqlapm`` logger.

    Args:
        name: Dotted suffix, or a name already under ``sqlapm``. ``None``
            returns the package logger itself.
    """
    if name is None or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    level: str = "INFO", format_style: str = "structured", stream: IO[str] | None = None
) -> logging.Handler:
    """Send ``sqlapm`` logs at ``level`` and above to ``stream``.

    Any handler installed by an earlier call is replaced. The package logger
    stops propagating so records are not emitted twice by an application's
    root configuration.

    Args:
        level: Level name, case-insensitive.
        format_style: ``"structured"`` for JSON lines, ``"simple"`` for text.
        stream: Defaults to ``sys.stderr``.

    Returns:
        The installed handler.
    """
    if format_style not in LOG_FORMATS:
        msg = f"Unknown log format {format_style!r}, expected one of: {', '.join(LOG_FORMATS)}"
        raise ValueError(msg)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(StructuredFormatter() if format_style == "structured" else logging.Formatter(_SIMPLE_FORMAT))

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for existing in [h for h in package_logger.handlers if getattr(h, "_sqlapm_handler", False)]:
        package_logger.removeHandler(existing)
    handler._sqlapm_handler = True  # type: ignore[attr-defined]
    package_logger.addHandler(handler)
    package_logger.setLevel(level.upper())
    package_logger.propagate = False

    log_with_context(package_logger, logging.DEBUG, "logging configured", level=level, format_style=format_style)
    return handler


def log_with_context(logger: logging.Logger, level: int, message: str, /, **extra_fields: Any) -> None:
    """Log ``message`` with ``extra_fields`` attached for structured output."""
    if not logger.isEnabledFor(level):
        return
    logger.log(level, message, extra={"extra_fields": extra_fields})
