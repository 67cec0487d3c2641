"""Synchronous notionlog client.

Usage::

    from notionlog import NotionlogClient, NotionlogConfig

    with NotionlogClient(config=NotionlogConfig.from_env()) as client:
        for post in client.get_posts():
            print(post.date, post.title)
"""

from __future__ import annotations

from typing import Any

from notionlog.config import NotionlogConfig
from notionlog.discovery import Discovery, is_collection, split_children
from notionlog.errors import NotionlogError, NotionlogNotFoundError, NotionlogValidationError
from notionlog.ids import normalize_id
from notionlog.models import FeedEntry, Post
from notionlog.notion_api.blocks import BlockAPI
from notionlog.notion_api.databases import DatabaseAPI
from notionlog.notion_api.pages import PageAPI
from notionlog.notion_api.transport import NotionTransport
from notionlog.notion_api.users import UserAPI
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

log = get_logger("notionlog.client")


class NotionlogClient:
    """Fetch blog posts from a Notion page.

    Parameters
    ----------
    token:
        Notion integration token.  Ignored when *config* is given.
    config:
        A ready :class:`NotionlogConfig`.
    **kwargs:
        Forwarded to :class:`NotionlogConfig` when *config* is not given.
    """

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
        self._transport = NotionTransport(self._config)
        self._pages = PageAPI(self._transport)
        self._blocks = BlockAPI(self._transport)
        self._databases = DatabaseAPI(self._transport)
        self._users = UserAPI(self._transport)

    @property
    def config(self) -> NotionlogConfig:
        return self._config

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def get_posts(self, page_id: str | None = None) -> list[Post]:
        """Fetch, normalise and sort every post below *page_id*.

        *page_id* defaults to ``config.page_id``.  Never raises: any failure
        is logged and an empty list is returned.
        """
        target = page_id or self._config.page_id
        try:
            root_id = normalize_id(target)
            root = self.fetch_root(root_id)
            discovery = self.discover_page_ids(root_id, root)
            require_collection(discovery)
            pages = self.fetch_pages(discovery.page_ids, discovery.pages)
            posts = assemble(discovery, pages)
            if self._config.resolve_people:
                self._resolve_authors(posts)
        except Exception as exc:
            report_failure(exc, target, self._metrics)
            return []
        report_success(posts, target, self._metrics)
        return posts

    def get_feed(self, page_id: str | None = None) -> list[FeedEntry]:
        """The publishable posts, reduced to id, title and date."""
        posts = filter_posts(
            self.get_posts(page_id),
            accept_status=self._config.accept_status,
            post_types=self._config.post_types,
        )
        return to_feed(posts)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def fetch_root(self, page_id: str) -> dict[str, Any]:
        """Retrieve the root object.

        Returns the database object when the root is a full-page database,
        and the block object of the page otherwise.
        """
        block = self._blocks.retrieve(page_id)
        if block.get("type") == "child_database":
            return self._databases.retrieve(page_id)
        return block

    def discover_page_ids(self, root_id: str, root: dict[str, Any] | None = None) -> Discovery:
        """Find every page that belongs to the blog below *root_id*.

        A database root is queried.  A page root is walked block by block
        down to ``config.max_depth``, collecting child pages and the rows
        of every inline database on the way.
        """
        root_id = normalize_id(root_id)
        if root is None:
            root = self.fetch_root(root_id)
        discovery = Discovery(root_id=root_id)
        if is_collection(root):
            self._collect_database(root, discovery)
        else:
            self._walk(root_id, 0, discovery)
        log.debug(
            "Discovered pages",
            extra={"extra_fields": {
                "op": "discover", "page_id": root_id,
                "pages": len(discovery.page_ids), "databases": len(discovery.databases),
            }},
        )
        return discovery

    def fetch_pages(
        self,
        page_ids: list[str],
        known: dict[str, dict[str, Any]] | None = None,
    ) -> dict[str, dict[str, Any]]:
        """Page objects for *page_ids*, keyed by id.

        Objects already in *known* are reused.  Pages that no longer exist
        are left out.
        """
        pages = dict(known or {})
        for page_id in page_ids:
            if page_id in pages:
                continue
            try:
                pages[page_id] = self._pages.retrieve(page_id)
            except NotionlogNotFoundError:
                log.warning(
                    "Page vanished, skipping",
                    extra={"extra_fields": {"op": "fetch_pages", "page_id": page_id}},
                )
        return pages

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _collect_database(self, database: dict[str, Any], discovery: Discovery) -> None:
        if discovery.add_database(database):
            discovery.add_rows(self._databases.query(database["id"]))

    def _walk(self, block_id: str, depth: int, discovery: Discovery) -> None:
        scan = split_children(self._blocks.get_children(block_id))

        for database_id in scan.databases:
            try:
                database = self._databases.retrieve(database_id)
            except (NotionlogNotFoundError, NotionlogValidationError) as exc:
                # Linked databases and unshared sources cannot be read.
                log.warning(
                    "Skipping unreadable inline database",
                    extra={"extra_fields": {
                        "op": "discover", "database_id": database_id, "error": exc.message,
                    }},
                )
                continue
            self._collect_database(database, discovery)

        descend = depth < self._config.max_depth
        for page_id in scan.pages:
            if discovery.add_page(page_id) and descend:
                self._walk(page_id, depth + 1, discovery)
        if descend:
            for container_id in scan.containers:
                self._walk(container_id, depth + 1, discovery)

    def _resolve_authors(self, posts: list[Post]) -> None:
        users: dict[str, dict[str, Any]] = {}
        for user_id in unnamed_author_ids(posts):
            try:
                users[user_id] = self._users.retrieve(user_id)
            except NotionlogError as exc:
                log.debug(
                    "Could not resolve user",
                    extra={"extra_fields": {"op": "resolve_people", "user_id": user_id,
                                            "error": exc.message}},
                )
        apply_users(posts, users)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> NotionlogClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
