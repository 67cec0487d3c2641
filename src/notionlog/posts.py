"""Turn property bags into posts, then order and filter them for display.

Column names are matched case-insensitively, so a database with ``Title``,
``Slug`` and ``Date`` columns works as well as one with ``title``, ``slug``
and ``date``.  When no column is called *title*, the database's title column
(whatever its name) is used.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, timedelta, timezone
from typing import Any

from notionlog.models import Author, DateRange, FeedEntry, Post
from notionlog.properties import get_page_properties, plain_text
from notionlog.utils.dates import EPOCH, parse_datetime

_FULL_WIDTH_COLUMNS = ("fullwidth", "full_width")


def _as_list(value: Any) -> list[str]:
    if value is None or value == "":
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v is not None and v != ""]
    return [str(value)]


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)


def _authors(value: Any) -> list[Author]:
    if isinstance(value, Author):
        return [value]
    if isinstance(value, list):
        return [a for a in value if isinstance(a, Author)]
    return []


def _title_column(page: Mapping[str, Any]) -> str:
    for value in (page.get("properties") or {}).values():
        if value.get("type") == "title":
            return plain_text(value.get("title"))
    return ""


def build_post(
    page_id: str,
    pages: Mapping[str, dict],
    schema: Mapping[str, dict],
) -> Post | None:
    """Build the :class:`Post` for *page_id*, or ``None`` if it is unknown."""
    bag = get_page_properties(page_id, pages, schema)
    if bag is None:
        return None
    page = pages[page_id]
    lookup = {key.lower(): value for key, value in bag.items()}

    date = lookup.get("date")
    thumbnail = lookup.get("thumbnail")

    return Post(
        id=page_id,
        title=_as_text(lookup.get("title")) or _title_column(page),
        slug=_as_text(lookup.get("slug")),
        date=date if isinstance(date, DateRange) else None,
        type=_as_list(lookup.get("type")),
        status=_as_list(lookup.get("status")),
        tags=_as_list(lookup.get("tags")),
        category=_as_list(lookup.get("category")),
        summary=_as_text(lookup.get("summary")),
        author=_authors(lookup.get("author")),
        thumbnail=thumbnail if isinstance(thumbnail, str) and thumbnail else None,
        created_time=parse_datetime(page.get("created_time")) or EPOCH,
        full_width=any(lookup.get(name) is True for name in _FULL_WIDTH_COLUMNS),
        properties=bag,
    )


def sort_posts(posts: Iterable[Post]) -> list[Post]:
    """Newest first, by date or, for undated posts, by creation time.

    Posts with equal keys keep their input order.
    """
    return sorted(posts, key=lambda post: post.sort_key, reverse=True)


def filter_posts(
    posts: Iterable[Post],
    accept_status: Sequence[str] = ("Public",),
    post_types: Sequence[str] = ("Post",),
    now: datetime | None = None,
) -> list[Post]:
    """Keep the posts that may be published.

    A post is dropped when it has no title or slug, when it is dated after
    the start of tomorrow (UTC), when its first status is not in
    *accept_status*, or when its first type is not in *post_types*.  An
    empty *accept_status* or *post_types* disables that check.
    """
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    cutoff = datetime.combine(
        current.astimezone(timezone.utc).date() + timedelta(days=1),
        datetime.min.time(),
        tzinfo=timezone.utc,
    )

    kept: list[Post] = []
    for post in posts:
        if not post.title or not post.slug:
            continue
        if post.sort_key > cutoff:
            continue
        if accept_status and (not post.status or post.status[0] not in accept_status):
            continue
        if post_types and (not post.type or post.type[0] not in post_types):
            continue
        kept.append(post)
    return kept


def to_feed(posts: Iterable[Post]) -> list[FeedEntry]:
    return [FeedEntry(id=post.id, title=post.title, date=post.date) for post in posts]
