"""Data models for notionlog.

All types are plain dataclasses.  :class:`Post` is the record handed to the
site build; :meth:`Post.to_dict` produces the JSON shape the build consumes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from notionlog.utils.dates import EPOCH, parse_datetime, to_iso


@dataclass(frozen=True)
class DateRange:
    """Value of a Notion ``date`` property.

    Attributes
    ----------
    start_date:
        Start as sent by Notion (``2024-03-01`` or a full timestamp).
    end_date:
        End of a range, if the property holds one.
    time_zone:
        IANA zone name when the property was entered with one.
    """

    start_date: str
    end_date: str | None = None
    time_zone: str | None = None

    @property
    def start(self) -> datetime | None:
        return parse_datetime(self.start_date, self.time_zone)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"start_date": self.start_date}
        if self.end_date is not None:
            out["end_date"] = self.end_date
        if self.time_zone is not None:
            out["time_zone"] = self.time_zone
        return out


@dataclass(frozen=True)
class Author:
    """A member of a ``people`` property."""

    id: str
    name: str = ""
    profile_photo: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "profile_photo": self.profile_photo}


def _jsonable(value: Any) -> Any:
    if isinstance(value, (DateRange, Author)):
        return value.to_dict()
    if isinstance(value, list):
        return [_jsonable(item) for item in value]
    return value


@dataclass
class Post:
    """A blog post normalised from one Notion database row.

    Attributes
    ----------
    id:
        Dashed page id.
    title, slug:
        Both are required for a post to be published.
    date:
        Publication date; ``None`` when the column is empty.
    type, status, tags, category:
        Option names.  Single selects are normalised to one-element lists.
    summary:
        Plain-text summary.
    author:
        People listed in the author column.
    thumbnail:
        URL of the first file in the thumbnail column.
    created_time:
        Page creation time (UTC); the epoch when Notion did not send one.
    full_width:
        Whether the page is meant to render at full width.
    properties:
        The full property bag, including columns not modelled above.
    """

    id: str
    title: str = ""
    slug: str = ""
    date: DateRange | None = None
    type: list[str] = field(default_factory=list)
    status: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    category: list[str] = field(default_factory=list)
    summary: str = ""
    author: list[Author] = field(default_factory=list)
    thumbnail: str | None = None
    created_time: datetime = EPOCH
    full_width: bool = False
    properties: dict[str, Any] = field(default_factory=dict)

    @property
    def sort_key(self) -> datetime:
        """The date the post is ordered by: its date, else its creation time."""
        if self.date is not None:
            start = self.date.start
            if start is not None:
                return start
        return self.created_time

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the JSON-ready shape used by the site build."""
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "date": self.date.to_dict() if self.date else None,
            "type": list(self.type),
            "status": list(self.status),
            "tags": list(self.tags),
            "category": list(self.category),
            "summary": self.summary,
            "author": [a.to_dict() for a in self.author],
            "thumbnail": self.thumbnail,
            "createdTime": to_iso(self.created_time),
            "fullWidth": self.full_width,
            "properties": {key: _jsonable(value) for key, value in self.properties.items()},
        }


@dataclass(frozen=True)
class FeedEntry:
    """The minimal record the index page keeps for each post."""

    id: str
    title: str
    date: DateRange | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "date": self.date.to_dict() if self.date else None,
        }
