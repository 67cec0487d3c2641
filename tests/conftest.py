"""Shared fixtures for the notionlog test suite."""

from __future__ import annotations

from typing import Any

import pytest

from notionlog.config import NotionlogConfig

ROOT_ID = "0b1c2d3e-4f50-4617-8293-a4b5c6d7e8f9"
DATABASE_ID = "d0d0d0d0-0000-4000-8000-000000000001"


class NotionFactory:
    """Builders for Notion API objects in the shapes the API returns them."""

    root_id = ROOT_ID
    database_id = DATABASE_ID

    # -- property values ------------------------------------------------

    @staticmethod
    def rich(text: str) -> list[dict[str, Any]]:
        return [{"type": "text", "text": {"content": text}, "plain_text": text}]

    def title(self, text: str) -> dict[str, Any]:
        return {"id": "title", "type": "title", "title": self.rich(text)}

    def text(self, text: str) -> dict[str, Any]:
        return {"id": "txt", "type": "rich_text", "rich_text": self.rich(text)}

    @staticmethod
    def select(name: str | None) -> dict[str, Any]:
        return {"id": "sel", "type": "select", "select": {"name": name} if name else None}

    @staticmethod
    def multi_select(*names: str) -> dict[str, Any]:
        return {"id": "ms", "type": "multi_select", "multi_select": [{"name": n} for n in names]}

    @staticmethod
    def date(start: str | None, end: str | None = None) -> dict[str, Any]:
        value = {"start": start, "end": end, "time_zone": None} if start else None
        return {"id": "dt", "type": "date", "date": value}

    @staticmethod
    def people(*users: dict[str, Any]) -> dict[str, Any]:
        return {"id": "ppl", "type": "people", "people": list(users)}

    @staticmethod
    def files(url: str) -> dict[str, Any]:
        return {
            "id": "fl",
            "type": "files",
            "files": [{"name": "cover.png", "type": "external", "external": {"url": url}}],
        }

    @staticmethod
    def checkbox(value: bool) -> dict[str, Any]:
        return {"id": "cb", "type": "checkbox", "checkbox": value}

    # -- objects --------------------------------------------------------

    def post_row(
        self,
        page_id: str,
        title: str,
        slug: str | None = None,
        date: str | None = None,
        status: str = "Public",
        type: str = "Post",
        created_time: str = "2024-01-01T00:00:00.000Z",
        **extra: dict[str, Any],
    ) -> dict[str, Any]:
        properties: dict[str, Any] = {
            "title": self.title(title),
            "slug": self.text(slug if slug is not None else title.lower().replace(" ", "-")),
            "date": self.date(date),
            "status": self.select(status),
            "type": self.select(type),
        }
        properties.update(extra)
        return {
            "object": "page",
            "id": page_id,
            "created_time": created_time,
            "archived": False,
            "properties": properties,
        }

    def database(self, database_id: str = DATABASE_ID, **columns: str) -> dict[str, Any]:
        schema = {
            "title": {"id": "title", "name": "title", "type": "title"},
            "slug": {"id": "s", "name": "slug", "type": "rich_text"},
            "date": {"id": "d", "name": "date", "type": "date"},
            "status": {"id": "st", "name": "status", "type": "select"},
            "type": {"id": "t", "name": "type", "type": "select"},
        }
        for name, kind in columns.items():
            schema[name] = {"id": name[:3], "name": name, "type": kind}
        return {"object": "database", "id": database_id, "properties": schema}

    @staticmethod
    def block(block_id: str, type: str, has_children: bool = False) -> dict[str, Any]:
        return {
            "object": "block",
            "id": block_id,
            "type": type,
            "has_children": has_children,
            "archived": False,
            type: {},
        }


@pytest.fixture
def notion() -> NotionFactory:
    return NotionFactory()


@pytest.fixture
def config() -> NotionlogConfig:
    """Fast, deterministic configuration with a dummy token."""
    return NotionlogConfig(
        token="test-token-1234",
        page_id=ROOT_ID,
        retry_base_delay=0.0,
        retry_max_delay=0.0,
    )


class RecordingMetrics:
    """MetricsHook that keeps every data point for assertions."""

    def __init__(self) -> None:
        self.counters: list[tuple[str, int, dict[str, str] | None]] = []
        self.timings: list[tuple[str, float, dict[str, str] | None]] = []
        self.gauges: list[tuple[str, float, dict[str, str] | None]] = []

    def increment(self, name: str, value: int = 1, tags: dict[str, str] | None = None) -> None:
        self.counters.append((name, value, tags))

    def timing(self, name: str, ms: float, tags: dict[str, str] | None = None) -> None:
        self.timings.append((name, ms, tags))

    def gauge(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        self.gauges.append((name, value, tags))

    def names(self) -> list[str]:
        return [name for name, _, _ in self.counters]


@pytest.fixture
def metrics() -> RecordingMetrics:
    return RecordingMetrics()
