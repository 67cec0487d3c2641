"""End-to-end tests: the real transport and endpoint wrappers against
``httpx.MockTransport`` routes that answer like the Notion API."""

from __future__ import annotations

import json

import httpx

from notionlog.async_client import AsyncNotionlogClient
from notionlog.client import NotionlogClient
from notionlog.config import NotionlogConfig

ROOT_ID = "0b1c2d3e-4f50-4617-8293-a4b5c6d7e8f9"
P1 = "10000000-0000-4000-8000-000000000001"
P2 = "20000000-0000-4000-8000-000000000002"


class FakeNotion:
    """Route handler for a full-page database root with two rows split over
    two result pages."""

    def __init__(self, notion, flaky: int = 0) -> None:
        self.notion = notion
        self.flaky = flaky
        self.calls: list[tuple[str, str]] = []
        self.query_bodies: list[dict] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/v1")
        self.calls.append((request.method, path))
        assert request.headers["Authorization"] == "Bearer test-token-1234"
        assert request.headers["Notion-Version"] == "2022-06-28"

        if self.flaky:
            self.flaky -= 1
            return httpx.Response(502, json={"object": "error", "message": "bad gateway"})

        if path == f"/blocks/{ROOT_ID}":
            return httpx.Response(200, json={"object": "block", "id": ROOT_ID, "type": "child_database"})
        if path == f"/databases/{ROOT_ID}":
            return httpx.Response(200, json=self.notion.database(ROOT_ID))
        if path == f"/databases/{ROOT_ID}/query":
            body = json.loads(request.content)
            self.query_bodies.append(body)
            if "start_cursor" not in body:
                return httpx.Response(200, json={
                    "results": [self.notion.post_row(P1, "First", date="2024-01-01")],
                    "has_more": True,
                    "next_cursor": "cursor-2",
                })
            return httpx.Response(200, json={
                "results": [self.notion.post_row(P2, "Second", date="2024-02-01")],
                "has_more": False,
                "next_cursor": None,
            })
        return httpx.Response(404, json={"object": "error", "code": "object_not_found"})


def _config(**overrides) -> NotionlogConfig:
    return NotionlogConfig(
        token="test-token-1234",
        page_id=ROOT_ID,
        retry_base_delay=0.0,
        retry_max_delay=0.0,
        **overrides,
    )


def _sync_client(config: NotionlogConfig, handler: FakeNotion) -> NotionlogClient:
    client = NotionlogClient(config=config)
    headers = client._transport._client.headers
    client._transport._client.close()
    client._transport._client = httpx.Client(
        transport=httpx.MockTransport(handler),
        base_url=config.base_url,
        headers=headers,
    )
    return client


class TestSyncPipeline:
    def test_fetches_every_result_page(self, notion):
        handler = FakeNotion(notion)
        with _sync_client(_config(), handler) as client:
            posts = client.get_posts()

        assert [p.title for p in posts] == ["Second", "First"]
        assert handler.query_bodies == [
            {"page_size": 100},
            {"page_size": 100, "start_cursor": "cursor-2"},
        ]

    def test_transient_error_is_retried(self, notion, metrics):
        handler = FakeNotion(notion, flaky=1)
        with _sync_client(_config(metrics=metrics), handler) as client:
            posts = client.get_posts()

        assert len(posts) == 2
        assert handler.calls[0] == handler.calls[1] == ("GET", f"/blocks/{ROOT_ID}")
        assert metrics.names().count("notionlog.retries_total") == 1

    def test_retries_exhausted_yields_no_posts(self, notion, metrics):
        handler = FakeNotion(notion, flaky=10)
        with _sync_client(_config(metrics=metrics), handler) as client:
            assert client.get_posts() == []

        assert len(handler.calls) == 3
        assert ("notionlog.pipeline_failures_total", 1, {"code": "RETRY_EXHAUSTED"}) in metrics.counters

    def test_unknown_root(self, notion):
        handler = FakeNotion(notion)
        with _sync_client(_config(), handler) as client:
            assert client.get_posts("ffffffff-0000-4000-8000-00000000000f") == []


class TestAsyncPipeline:
    async def test_fetches_every_result_page(self, notion):
        handler = FakeNotion(notion, flaky=1)
        config = _config()
        client = AsyncNotionlogClient(config=config)
        headers = client._transport._client.headers
        await client._transport._client.aclose()
        client._transport._client = httpx.AsyncClient(
            transport=httpx.MockTransport(handler),
            base_url=config.base_url,
            headers=headers,
        )
        async with client:
            posts = await client.get_posts()

        assert [p.title for p in posts] == ["Second", "First"]
