"""Tests for the ``notionlog`` command line."""

from __future__ import annotations

import json

import pytest

from notionlog import cli
from notionlog.models import DateRange, Post

ROOT_ID = "0b1c2d3e-4f50-4617-8293-a4b5c6d7e8f9"


class FakeClient:
    """Stands in for NotionlogClient; records the config it was given."""

    instances: list["FakeClient"] = []

    def __init__(self, *, config):
        self.config = config
        self.closed = False
        FakeClient.instances.append(self)

    def get_posts(self):
        return [
            Post(id="b", title="Public", slug="public", date=DateRange("2024-02-01"),
                 status=["Public"], type=["Post"]),
            Post(id="a", title="Draft", slug="draft", date=DateRange("2024-01-01"),
                 status=["Draft"], type=["Post"]),
        ]

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("NOTION_TOKEN", "secret_abcdefgh1234")
    monkeypatch.setenv("NOTION_PAGE_ID", ROOT_ID)
    monkeypatch.setattr(cli, "NotionlogClient", FakeClient)
    FakeClient.instances = []


class TestMain:
    def test_missing_token(self, monkeypatch, capsys):
        monkeypatch.delenv("NOTION_TOKEN", raising=False)
        monkeypatch.setenv("NOTION_PAGE_ID", ROOT_ID)
        assert cli.main([]) == 1
        assert "NOTION_TOKEN" in capsys.readouterr().err

    def test_missing_page_id(self, monkeypatch, capsys):
        monkeypatch.setenv("NOTION_TOKEN", "t")
        monkeypatch.delenv("NOTION_PAGE_ID", raising=False)
        assert cli.main([]) == 1
        assert "--page-id" in capsys.readouterr().err

    def test_all_posts_to_stdout(self, env, capsys):
        assert cli.main([]) == 0
        records = json.loads(capsys.readouterr().out)
        assert [r["id"] for r in records] == ["b", "a"]
        assert records[0]["createdTime"] == "1970-01-01T00:00:00.000Z"
        assert FakeClient.instances[0].closed

    def test_feed(self, env, capsys):
        assert cli.main(["--feed"]) == 0
        assert json.loads(capsys.readouterr().out) == [
            {"id": "b", "title": "Public", "date": {"start_date": "2024-02-01"}},
        ]

    def test_published(self, env, capsys):
        assert cli.main(["--published"]) == 0
        records = json.loads(capsys.readouterr().out)
        assert [r["slug"] for r in records] == ["public"]

    def test_page_id_flag_wins(self, env):
        other = "ffffffff-0000-4000-8000-00000000000f"
        cli.main(["--page-id", other])
        assert FakeClient.instances[0].config.page_id == other

    def test_writes_file(self, env, tmp_path):
        target = tmp_path / "data" / "posts.json"
        assert cli.main(["-o", str(target)]) == 0
        assert len(json.loads(target.read_text(encoding="utf-8"))) == 2

    def test_unknown_log_level_is_a_usage_error(self, env, capsys):
        with pytest.raises(SystemExit) as excinfo:
            cli.main(["--log-level", "LOUD"])
        assert excinfo.value.code == 2
        assert "invalid choice" in capsys.readouterr().err

    def test_log_level_is_case_insensitive(self, env):
        assert cli.main(["--log-level", "error"]) == 0

    def test_feed_and_published_are_exclusive(self, env):
        with pytest.raises(SystemExit):
            cli.main(["--feed", "--published"])
