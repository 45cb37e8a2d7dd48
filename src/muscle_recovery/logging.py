"""Structured logging for the recovery engine.

The format comes from the ``--log-format`` CLI option or the
RECOVERY_LOG_FORMAT env var: "json" (default) or "text". Log calls attach
context through ``recovery_*`` extras, e.g. ``extra={"recovery_user_id": ...}``;
both formatters render them without the prefix.
"""

import json
import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, TextIO

LOG_FORMAT_ENV = "RECOVERY_LOG_FORMAT"
LOG_FORMATS = ("json", "text")
CONTEXT_PREFIX = "recovery_"


def recovery_context(record: logging.LogRecord) -> dict[str, Any]:
    """``recovery_*`` extras of a record, keyed without the prefix."""
    return {
        key[len(CONTEXT_PREFIX):]: value
        for key, value in record.__dict__.items()
        if key.startswith(CONTEXT_PREFIX)
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line; extras nested under ``context``."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = recovery_context(record)
        if context:
            log_entry["context"] = context

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = "".join(traceback.format_exception(*record.exc_info))

        return json.dumps(log_entry, default=str)


class TextFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = recovery_context(record)
        if not context:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in sorted(context.items()))
        # Keep context on the first line when a traceback follows.
        head, sep, tail = line.partition("\n")
        return f"{head} [{pairs}]{sep}{tail}"


def resolve_log_format(log_format: str | None = None) -> str:
    """Explicit value, else RECOVERY_LOG_FORMAT, else "json"."""
    value = (log_format or os.environ.get(LOG_FORMAT_ENV) or "json").strip().lower()
    if value not in LOG_FORMATS:
        raise ValueError(f"{LOG_FORMAT_ENV} must be one of {', '.join(LOG_FORMATS)}, got {value!r}")
    return value


def setup_logging(
    log_format: str | None = None,
    level: int = logging.INFO,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Replace the root logger's handlers with a single configured one."""
    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(level)
    if resolve_log_format(log_format) == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(TextFormatter())

    root.addHandler(handler)
    return handler
