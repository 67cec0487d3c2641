"""Single-line JSON logging for notionlog.

Each record becomes one JSON object, so the output of a site build can be
grepped or shipped to a log pipeline without extra parsing::

    {"ts": "2026-10-19T08:00:00.000000+00:00", "level": "WARNING",
     "logger": "notionlog.client", "message": "Root page holds no collection",
     "op": "get_posts", "page_id": "7c1f..."}

Structured fields are passed with ``extra={"extra_fields": {...}}``.  Every
entry is run through :func:`notionlog.utils.redact.redact` before it is
written.  The clients register their integration token with
:func:`configure_redaction`, so a token that slips into a message or a field
never reaches the stream.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from notionlog.utils.redact import redact


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Guaranteed keys are ``ts`` (ISO-8601 UTC), ``level``, ``logger`` and
    ``message``.  Extra fields are merged at the top level; ``exception``
    is added when the record carries ``exc_info``.  The whole entry is
    redacted, with *token* scrubbed wherever it appears.
    """

    def __init__(self, token: str | None = None) -> None:
        super().__init__()
        self.token = token

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields: dict[str, Any] | None = getattr(record, "extra_fields", None)
        if extra_fields:
            log_entry.update(extra_fields)

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(redact(log_entry, self.token), default=str, ensure_ascii=False)


_configured_loggers: set[str] = set()


def get_logger(
    name: str = "notionlog",
    *,
    level: int | str = logging.INFO,
    stream: Any | None = None,
) -> logging.Logger:
    """Get or create a structured JSON logger.

    Only the top-level ``"notionlog"`` logger gets a handler; child loggers
    such as ``"notionlog.transport"`` propagate to it.  Repeated calls never
    add duplicate handlers.

    Parameters
    ----------
    name:
        Logger name.
    level:
        Minimum level, as an ``int`` or a case-insensitive name.  Applied to
        the top-level logger on first configuration.
    stream:
        Output stream for the handler.  Defaults to ``sys.stderr``.
    """
    root_name = name.split(".", 1)[0]
    root = logging.getLogger(root_name)

    if root_name not in _configured_loggers:
        root.setLevel(_resolve_level(level))
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        root.addHandler(handler)
        root.propagate = False
        _configured_loggers.add(root_name)

    return logging.getLogger(name)


def set_level(level: int | str, name: str = "notionlog") -> None:
    """Change the level of an already configured logger."""
    get_logger(name).setLevel(_resolve_level(level))


def configure_redaction(token: str | None, name: str = "notionlog") -> None:
    """Scrub *token* from every entry written by the *name* logger's handlers.

    Called by the clients with their integration token.  Tokens shorter
    than eight characters are not scrubbed.  The most recently configured
    token wins.
    """
    root = get_logger(name.split(".", 1)[0])
    for handler in root.handlers:
        if isinstance(handler.formatter, StructuredFormatter):
            handler.formatter.token = token if token and len(token) >= 8 else None


def _resolve_level(level: int | str) -> int:
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        return resolved
    return level
