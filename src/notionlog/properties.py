"""Convert Notion property values into plain Python values.

A database row arrives as ``{"properties": {name: {"type": ..., <type>: ...}}}``.
:func:`read_property` turns one of those values into something a template
can use directly, and :func:`get_page_properties` builds the property bag
for a whole row, keyed by the column names of the collection schema.

Conversion table
----------------

=====================  ==============================================
Notion type            Python value
=====================  ==============================================
title, rich_text       ``str`` (concatenated plain text)
select, status         ``list[str]`` with zero or one name
multi_select           ``list[str]``
date                   :class:`DateRange` or ``None``
people                 ``list[Author]``
created_by, ...        :class:`Author`
files                  URL of the first file or ``None``
relation               ``list[str]`` of dashed ids
formula, rollup        the computed value, converted recursively
unique_id              ``"PREFIX-7"`` or ``"7"``
=====================  ==============================================
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from notionlog.ids import try_normalize_id
from notionlog.models import Author, DateRange


def plain_text(rich_text: list[dict] | None) -> str:
    """Concatenate the plain text of a rich-text array."""
    parts: list[str] = []
    for segment in rich_text or []:
        text = segment.get("plain_text")
        if text is None:
            kind = segment.get("type", "text")
            if kind == "equation":
                text = segment.get("equation", {}).get("expression", "")
            else:
                text = segment.get(kind, {}).get("content", "")
        parts.append(text)
    return "".join(parts)


def read_date(value: Mapping[str, Any] | None) -> DateRange | None:
    if not value or not value.get("start"):
        return None
    return DateRange(
        start_date=value["start"],
        end_date=value.get("end"),
        time_zone=value.get("time_zone"),
    )


def read_user(value: Mapping[str, Any] | None) -> Author | None:
    if not value or not value.get("id"):
        return None
    return Author(
        id=value["id"],
        name=value.get("name") or "",
        profile_photo=value.get("avatar_url"),
    )


def file_url(value: Mapping[str, Any]) -> str | None:
    """URL of a file object, whether Notion-hosted or external."""
    kind = value.get("type")
    if kind in ("file", "external"):
        return value.get(kind, {}).get("url")
    return None


def _select(value: Mapping[str, Any] | None) -> list[str]:
    if not value or not value.get("name"):
        return []
    return [value["name"]]


def _files(value: list[dict]) -> str | None:
    for item in value or []:
        url = file_url(item)
        if url:
            return url
    return None


def _unique_id(value: Mapping[str, Any] | None) -> str | None:
    if not value or value.get("number") is None:
        return None
    prefix = value.get("prefix")
    return f"{prefix}-{value['number']}" if prefix else str(value["number"])


def _formula(value: Mapping[str, Any] | None) -> Any:
    if not value:
        return None
    kind = value.get("type")
    if kind == "date":
        return read_date(value.get("date"))
    return value.get(kind)


def _rollup(value: Mapping[str, Any] | None) -> Any:
    if not value:
        return None
    kind = value.get("type")
    if kind == "number":
        return value.get("number")
    if kind == "date":
        return read_date(value.get("date"))
    if kind == "array":
        return [read_property(item) for item in value.get("array", [])]
    return None


_READERS: dict[str, Callable[[Any], Any]] = {
    "title": plain_text,
    "rich_text": plain_text,
    "number": lambda v: v,
    "checkbox": bool,
    "url": lambda v: v,
    "email": lambda v: v,
    "phone_number": lambda v: v,
    "select": _select,
    "status": _select,
    "multi_select": lambda v: [o["name"] for o in v or [] if o.get("name")],
    "date": read_date,
    "people": lambda v: [a for a in (read_user(u) for u in v or []) if a is not None],
    "files": _files,
    "relation": lambda v: [
        i for i in (try_normalize_id(r.get("id")) for r in v or []) if i is not None
    ],
    "formula": _formula,
    "rollup": _rollup,
    "created_time": lambda v: v,
    "last_edited_time": lambda v: v,
    "created_by": read_user,
    "last_edited_by": read_user,
    "unique_id": _unique_id,
}

SUPPORTED_TYPES: frozenset[str] = frozenset(_READERS)


def read_property(value: Mapping[str, Any], schema_type: str | None = None) -> Any:
    """Convert one property value; see the module table.

    The value's own ``type`` wins; *schema_type* is the fallback for values
    that arrive without one.  Unknown types read as ``None``.
    """
    kind = value.get("type") or schema_type
    reader = _READERS.get(kind) if kind else None
    if reader is None:
        return None
    return reader(value.get(kind))


def get_page_properties(
    page_id: str,
    pages: Mapping[str, dict],
    schema: Mapping[str, dict],
) -> dict[str, Any] | None:
    """Build the property bag of *page_id*.

    Parameters
    ----------
    page_id:
        Dashed page id, as used for keys in *pages*.
    pages:
        Page objects keyed by dashed id.
    schema:
        The ``properties`` object of the collection(s) the page belongs to,
        keyed by column name.

    Returns
    -------
    dict or None
        Column name to converted value, plus ``"id"``.  ``None`` when
        *page_id* is not in *pages*.
    """
    page = pages.get(page_id)
    if page is None:
        return None

    properties: dict[str, Any] = {"id": page_id}
    for name, value in (page.get("properties") or {}).items():
        column = schema.get(name) or {}
        key = column.get("name") or name
        properties[key] = read_property(value, column.get("type"))
    return properties
