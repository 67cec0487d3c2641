"""Tests for the I/O-free pipeline steps in notionlog/pipeline.py."""

from __future__ import annotations

import pytest

from notionlog.discovery import Discovery
from notionlog.errors import NotionlogNotFoundError, NotionlogSchemaError
from notionlog.models import Author, Post
from notionlog.pipeline import (
    apply_users,
    assemble,
    report_failure,
    report_success,
    require_collection,
    unnamed_author_ids,
)

ROOT = "0b1c2d3e-4f50-4617-8293-a4b5c6d7e8f9"
P1 = "10000000-0000-4000-8000-000000000001"
P2 = "20000000-0000-4000-8000-000000000002"


class TestRequireCollection:
    def test_no_database(self):
        with pytest.raises(NotionlogSchemaError) as excinfo:
            require_collection(Discovery(root_id=ROOT))
        assert excinfo.value.context == {"page_id": ROOT}

    def test_empty_schema(self, notion):
        d = Discovery(root_id=ROOT)
        d.add_database({"object": "database", "id": notion.database_id, "properties": {}})
        with pytest.raises(NotionlogSchemaError, match="no schema"):
            require_collection(d)

    def test_ok(self, notion):
        d = Discovery(root_id=ROOT)
        d.add_database(notion.database())
        require_collection(d)


class TestAssemble:
    def test_skips_unfetched_and_sorts(self, notion):
        d = Discovery(root_id=ROOT)
        d.add_database(notion.database())
        d.add_rows([notion.post_row(P1, "Old", date="2024-01-01")])
        d.add_page(P2)
        pages = dict(d.pages)
        assert [p.id for p in assemble(d, pages)] == [P1]

        pages[P2] = notion.post_row(P2, "New", date="2024-06-01")
        assert [p.id for p in assemble(d, pages)] == [P2, P1]


class TestAuthors:
    def test_unnamed_ids_listed_once(self):
        posts = [
            Post(id="a", author=[Author(id="u1"), Author(id="u2", name="Bo")]),
            Post(id="b", author=[Author(id="u1")]),
        ]
        assert unnamed_author_ids(posts) == ["u1"]

    def test_apply_users(self):
        posts = [Post(id="a", author=[Author(id="u1"), Author(id="u2", name="Bo")])]
        apply_users(posts, {"u1": {"object": "user", "id": "u1", "name": "Ada"}})
        assert posts[0].author == [Author(id="u1", name="Ada"), Author(id="u2", name="Bo")]


class TestReporting:
    def test_failure_code_from_error(self, metrics):
        report_failure(NotionlogNotFoundError(message="gone"), ROOT, metrics)
        assert metrics.counters == [
            ("notionlog.pipeline_failures_total", 1, {"code": "NOT_FOUND"}),
        ]

    def test_failure_code_from_other_exception(self, metrics):
        report_failure(KeyError("x"), ROOT, metrics)
        assert metrics.counters[0][2] == {"code": "KeyError"}

    def test_success_gauge(self, metrics):
        report_success([Post(id="a")], ROOT, metrics)
        assert metrics.gauges == [("notionlog.posts_fetched", 1, None)]
