"""Steps of ``get_posts`` that do no I/O.

Shared by :class:`NotionlogClient` and :class:`AsyncNotionlogClient` so
the two only differ in how they talk to Notion.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from notionlog.discovery import Discovery
from notionlog.errors import ErrorCode, NotionlogError, NotionlogSchemaError
from notionlog.models import Author, Post
from notionlog.observability import get_logger
from notionlog.posts import build_post, sort_posts
from notionlog.properties import read_user

log = get_logger("notionlog.pipeline")


def require_collection(discovery: Discovery) -> None:
    """Raise :class:`NotionlogSchemaError` unless a collection with a schema
    was found below the root."""
    if not discovery.databases:
        raise NotionlogSchemaError(
            message="Root page holds no collection",
            context={"page_id": discovery.root_id},
        )
    if not discovery.schema:
        raise NotionlogSchemaError(
            message="Collection has no schema",
            context={"page_id": discovery.root_id, "databases": list(discovery.databases)},
        )


def assemble(discovery: Discovery, pages: Mapping[str, dict]) -> list[Post]:
    """Map every discovered page to a :class:`Post` and sort newest first.

    Ids whose page object could not be fetched are skipped.
    """
    posts: list[Post] = []
    for page_id in discovery.page_ids:
        post = build_post(page_id, pages, discovery.schema)
        if post is not None:
            posts.append(post)
    return sort_posts(posts)


def unnamed_author_ids(posts: list[Post]) -> list[str]:
    """Ids of authors that arrived without a name, each listed once."""
    seen: list[str] = []
    for post in posts:
        for author in post.author:
            if not author.name and author.id not in seen:
                seen.append(author.id)
    return seen


def apply_users(posts: list[Post], users: Mapping[str, dict[str, Any]]) -> None:
    """Replace unnamed authors with the looked-up user objects, in place."""
    resolved: dict[str, Author] = {}
    for user_id, user in users.items():
        author = read_user(user)
        if author is not None:
            resolved[user_id] = author
    for post in posts:
        post.author = [resolved.get(a.id, a) if not a.name else a for a in post.author]


def report_failure(exc: Exception, page_id: str, metrics: Any) -> None:
    """Log a pipeline failure and count it."""
    code = ErrorCode(exc.code).value if isinstance(exc, NotionlogError) else type(exc).__name__
    metrics.increment("notionlog.pipeline_failures_total", tags={"code": code})
    fields = {"op": "get_posts", "page_id": page_id, "code": code}
    if isinstance(exc, NotionlogSchemaError):
        log.warning(exc.message, extra={"extra_fields": fields})
    else:
        log.error("Fetching posts failed", exc_info=exc, extra={"extra_fields": fields})


def report_success(posts: list[Post], page_id: str, metrics: Any) -> None:
    metrics.gauge("notionlog.posts_fetched", len(posts))
    log.info(
        "Fetched posts",
        extra={"extra_fields": {"op": "get_posts", "page_id": page_id, "posts": len(posts)}},
    )
