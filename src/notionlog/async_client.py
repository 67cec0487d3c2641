"""Asynchronous notionlog client.

:class:`AsyncNotionlogClient` mirrors :class:`NotionlogClient`; every I/O
method is a coroutine.  Requests are still issued one at a time.

Usage::

    import asyncio
    from notionlog import AsyncNotionlogClient, NotionlogConfig

    async def main():
        async with AsyncNotionlogClient(config=NotionlogConfig.from_env()) as client:
            posts = await client.get_posts()

    asyncio.run(main())
"""

from __future__ import annotations

from typing import Any

from notionlog.config import NotionlogConfig
from notionlog.discovery import Discovery, is_collection, split_children
from notionlog.errors import NotionlogError, NotionlogNotFoundError, NotionlogValidationError
from notionlog.ids import normalize_id
from notionlog.models import FeedEntry, Post
from notionlog.notion_api.blocks import AsyncBlockAPI
from notionlog.notion_api.databases import AsyncDatabaseAPI
from notionlog.notion_api.pages import AsyncPageAPI
from notionlog.notion_api.transport import AsyncNotionTransport
from notionlog.notion_api.users import AsyncUserAPI
from notionlog.observability import NoopMetricsHook, configure_redaction, get_logger
from notionlog.pipeline import (
    apply_users,
    assemble,
    report_failure,
    report_success,
    require_collection,
    unnamed_author_ids,
)
from notionlog.posts import filter_posts, to_feed

log = get_logger("notionlog.async_client")


class AsyncNotionlogClient:
    """Asynchronous twin of :class:`NotionlogClient`."""

    def __init__(
        self,
        token: str = "",
        *,
        config: NotionlogConfig | None = None,
        **kwargs: Any,
    ) -> None:
        self._config = config if config is not None else NotionlogConfig(token=token, **kwargs)
        self._metrics = (
            self._config.metrics if self._config.metrics is not None else NoopMetricsHook()
        )
        configure_redaction(self._config.token)
        self._transport = AsyncNotionTransport(self._config)
        self._pages = AsyncPageAPI(self._transport)
        self._blocks = AsyncBlockAPI(self._transport)
        self._databases = AsyncDatabaseAPI(self._transport)
        self._users = AsyncUserAPI(self._transport)

    @property
    def config(self) -> NotionlogConfig:
        return self._config

    async def get_posts(self, page_id: str | None = None) -> list[Post]:
        """See :meth:`NotionlogClient.get_posts`."""
        target = page_id or self._config.page_id
        try:
            root_id = normalize_id(target)
            root = await self.fetch_root(root_id)
            discovery = await self.discover_page_ids(root_id, root)
            require_collection(discovery)
            pages = await self.fetch_pages(discovery.page_ids, discovery.pages)
            posts = assemble(discovery, pages)
            if self._config.resolve_people:
                await self._resolve_authors(posts)
        except Exception as exc:
            report_failure(exc, target, self._metrics)
            return []
        report_success(posts, target, self._metrics)
        return posts

    async def get_feed(self, page_id: str | None = None) -> list[FeedEntry]:
        """See :meth:`NotionlogClient.get_feed`."""
        posts = filter_posts(
            await self.get_posts(page_id),
            accept_status=self._config.accept_status,
            post_types=self._config.post_types,
        )
        return to_feed(posts)

    async def fetch_root(self, page_id: str) -> dict[str, Any]:
        """See :meth:`NotionlogClient.fetch_root`."""
        block = await self._blocks.retrieve(page_id)
        if block.get("type") == "child_database":
            return await self._databases.retrieve(page_id)
        return block

    async def discover_page_ids(
        self,
        root_id: str,
        root: dict[str, Any] | None = None,
    ) -> Discovery:
        """See :meth:`NotionlogClient.discover_page_ids`."""
        root_id = normalize_id(root_id)
        if root is None:
            root = await self.fetch_root(root_id)
        discovery = Discovery(root_id=root_id)
        if is_collection(root):
            await self._collect_database(root, discovery)
        else:
            await self._walk(root_id, 0, discovery)
        log.debug(
            "Discovered pages",
            extra={"extra_fields": {
                "op": "discover", "page_id": root_id,
                "pages": len(discovery.page_ids), "databases": len(discovery.databases),
            }},
        )
        return discovery

    async def fetch_pages(
        self,
        page_ids: list[str],
        known: dict[str, dict[str, Any]] | None = None,
    ) -> dict[str, dict[str, Any]]:
        """See :meth:`NotionlogClient.fetch_pages`."""
        pages = dict(known or {})
        for page_id in page_ids:
            if page_id in pages:
                continue
            try:
                pages[page_id] = await self._pages.retrieve(page_id)
            except NotionlogNotFoundError:
                log.warning(
                    "Page vanished, skipping",
                    extra={"extra_fields": {"op": "fetch_pages", "page_id": page_id}},
                )
        return pages

    async def _collect_database(self, database: dict[str, Any], discovery: Discovery) -> None:
        if discovery.add_database(database):
            discovery.add_rows(await self._databases.query(database["id"]))

    async def _walk(self, block_id: str, depth: int, discovery: Discovery) -> None:
        scan = split_children(await self._blocks.get_children(block_id))

        for database_id in scan.databases:
            try:
                database = await self._databases.retrieve(database_id)
            except (NotionlogNotFoundError, NotionlogValidationError) as exc:
                log.warning(
                    "Skipping unreadable inline database",
                    extra={"extra_fields": {
                        "op": "discover", "database_id": database_id, "error": exc.message,
                    }},
                )
                continue
            await self._collect_database(database, discovery)

        descend = depth < self._config.max_depth
        for page_id in scan.pages:
            if discovery.add_page(page_id) and descend:
                await self._walk(page_id, depth + 1, discovery)
        if descend:
            for container_id in scan.containers:
                await self._walk(container_id, depth + 1, discovery)

    async def _resolve_authors(self, posts: list[Post]) -> None:
        users: dict[str, dict[str, Any]] = {}
        for user_id in unnamed_author_ids(posts):
            try:
                users[user_id] = await self._users.retrieve(user_id)
            except NotionlogError as exc:
                log.debug(
                    "Could not resolve user",
                    extra={"extra_fields": {"op": "resolve_people", "user_id": user_id,
                                            "error": exc.message}},
                )
        apply_users(posts, users)

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> AsyncNotionlogClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
