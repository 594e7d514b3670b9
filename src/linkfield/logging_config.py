"""Logging setup for linkfield.

Environment variables:
- LOG_LEVEL: any standard level name (WARN is accepted). Default: INFO
- LOG_FORMAT: 'text' or 'json'. Default: text

Call ``configure_logging()`` once from an entry point (CLI, server). Library
modules only ever call ``logging.getLogger(__name__)``.

Tick records carry link statistics as ``extra`` fields (see ``TICK_FIELDS``).
The text formatter appends them as ``key=value`` pairs; the JSON formatter
groups them under ``"tick_stats"`` so link churn can be tracked from the log
stream alone.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import UTC, datetime
from typing import IO, Any

PACKAGE_LOGGER = "linkfield"

# Simulation fields a record may carry via ``extra``, in display order
TICK_FIELDS = (
    "tick",
    "particles",
    "triangles",
    "links",
    "new_links",
    "kept_links",
    "dropped_links",
)

# Attributes every LogRecord has; anything else on a record came from ``extra``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
}

LOG_FORMATS = ("text", "json")


def tick_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Simulation fields attached to ``record``, in ``TICK_FIELDS`` order."""
    return {name: record.__dict__[name] for name in TICK_FIELDS if name in record.__dict__}


def _other_extras(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRS and key not in TICK_FIELDS
    }


def _short_name(name: str) -> str:
    prefix = PACKAGE_LOGGER + "."
    return name[len(prefix) :] if name.startswith(prefix) else name


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for tick logs that get piped into tools."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        stats = tick_fields(record)
        if stats:
            payload["tick_stats"] = stats

        extra = _other_extras(record)
        if extra:
            payload["extra"] = extra

        if record.levelno >= logging.ERROR:
            payload["source"] = f"{record.pathname}:{record.lineno}"
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


class TextFormatter(logging.Formatter):
    """``HH:MM:SS.mmm LEVEL [logger] message key=value ...``

    Tick fields follow the message; errors get a ``(file:line)`` suffix.
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S.%f")[:-3]
        line = f"{timestamp} {record.levelname:<7} [{_short_name(record.name)}] {record.getMessage()}"

        stats = tick_fields(record)
        if stats:
            line += " " + " ".join(f"{key}={value}" for key, value in stats.items())

        if record.levelno >= logging.ERROR:
            line += f" ({record.filename}:{record.lineno})"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)

        return line


def get_log_level() -> int:
    """Level named by LOG_LEVEL, INFO when unset or unrecognised."""
    name = os.environ.get("LOG_LEVEL", "INFO").upper()
    if name == "WARN":
        name = "WARNING"
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def get_log_format() -> str:
    """Format named by LOG_FORMAT, 'text' when unset or unrecognised."""
    name = os.environ.get("LOG_FORMAT", "text").lower()
    return name if name in LOG_FORMATS else "text"


def configure_logging(
    level: int | None = None,
    format_type: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Install one handler on the ``linkfield`` logger.

    Repeated calls replace the handler. The uvicorn access log shares it so a
    served simulation writes a single stream.

    Args:
        level: Log level. If None, reads LOG_LEVEL.
        format_type: 'text' or 'json'. If None, reads LOG_FORMAT.
        stream: Destination; defaults to stderr so stdout stays free for
            ``linkfield run --json``.
    """
    if level is None:
        level = get_log_level()
    if format_type is None:
        format_type = get_log_format()

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(JSONFormatter() if format_type == "json" else TextFormatter())

    for name in (PACKAGE_LOGGER, "uvicorn.access"):
        target = logging.getLogger(name)
        target.handlers.clear()
        target.addHandler(handler)
        target.setLevel(level)
        target.propagate = False

    logging.getLogger(PACKAGE_LOGGER).debug(
        "Logging configured: level=%s, format=%s", logging.getLevelName(level), format_type
    )


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``linkfield`` namespace.

    Entry points run as ``__main__`` use this so their records still reach
    the package handler.
    """
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
