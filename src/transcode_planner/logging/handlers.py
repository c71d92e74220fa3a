"""Log formatters that surface planning context.

Records logged while a file is planned carry ``evaluator`` and
``media_path`` as ``extra=`` fields. The text formatter appends them to the
line; the JSON formatter reports them, with any other extra fields, under
``context``.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord carries; anything else arrived through extra=.
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", None, None))
) | {"message", "asctime"}


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Return the extra fields attached to a record, skipping unset ones."""
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRS and not key.startswith("_") and value is not None
    }


class TextFormatter(logging.Formatter):
    """Human-readable lines, suffixed with ``[evaluator] path`` when known."""

    def __init__(self) -> None:
        super().__init__(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        suffix = [
            f"[{record.evaluator}]" if getattr(record, "evaluator", None) else "",
            str(record.media_path) if getattr(record, "media_path", None) else "",
        ]
        return " ".join(part for part in (line, *suffix) if part)


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line.

    Keys: ``timestamp`` (ISO-8601 UTC), ``level``, ``logger``, ``message``,
    plus ``context`` for extra fields and ``exception`` for tracebacks.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = record_context(record)
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)
