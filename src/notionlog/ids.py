"""Notion id normalisation.

Notion accepts page ids with or without dashes, and people usually copy them
out of a share URL (``https://www.notion.so/My-Blog-0123456789abcdef...``).
The pipeline keys every lookup on the dashed lowercase form so that ids from
the configuration, from API responses and from URLs compare equal.
"""

from __future__ import annotations

import re

from notionlog.errors import NotionlogValidationError

_HEX = frozenset("0123456789abcdef")

# 32 hex digits (optionally dashed) at the end of a URL path or on their own.
_TRAILING_ID_RE = re.compile(
    r"([0-9a-f]{8}-?[0-9a-f]{4}-?[0-9a-f]{4}-?[0-9a-f]{4}-?[0-9a-f]{12})$",
    re.IGNORECASE,
)


def compact_id(value: str) -> str:
    """Return the 32-character form of *value*, without dashes."""
    return normalize_id(value).replace("-", "")


def normalize_id(value: str) -> str:
    """Return *value* as a dashed lowercase UUID.

    Accepts a bare 32-hex id, a dashed UUID, or a Notion URL whose path ends
    in one (query strings and fragments are ignored).

    Raises
    ------
    NotionlogValidationError
        If *value* is empty or does not contain a valid id.

    Examples
    --------
    >>> normalize_id("0123456789ABCDEF0123456789abcdef")
    '01234567-89ab-cdef-0123-456789abcdef'
    >>> normalize_id("https://www.notion.so/Blog-0123456789abcdef0123456789abcdef?v=1")
    '01234567-89ab-cdef-0123-456789abcdef'
    """
    if not value or not value.strip():
        raise NotionlogValidationError(
            message="Notion page id is empty",
            context={"value": value},
        )
    candidate = value.strip().split("?", 1)[0].split("#", 1)[0].rstrip("/")
    match = _TRAILING_ID_RE.search(candidate)
    if match is None:
        raise NotionlogValidationError(
            message=f"Not a Notion id: {value!r}",
            context={"value": value},
        )
    clean = match.group(1).replace("-", "").lower()
    if len(clean) != 32 or not set(clean) <= _HEX:
        raise NotionlogValidationError(
            message=f"Not a Notion id: {value!r}",
            context={"value": value},
        )
    return f"{clean[:8]}-{clean[8:12]}-{clean[12:16]}-{clean[16:20]}-{clean[20:]}"


def try_normalize_id(value: str | None) -> str | None:
    """Like :func:`normalize_id` but returns ``None`` instead of raising."""
    if not value:
        return None
    try:
        return normalize_id(value)
    except NotionlogValidationError:
        return None
