"""notionlog -- a Notion-backed blog's content-fetch pipeline.

Given a root Notion page, discover the pages below it, read their typed
properties, normalise them into :class:`Post` records and sort them newest
first, ready for a static-site build.

Public re-exports
-----------------

* **Clients:** :class:`NotionlogClient`, :class:`AsyncNotionlogClient`
* **Configuration:** :class:`NotionlogConfig`
* **Errors:** every :class:`NotionlogError` subclass and :class:`ErrorCode`
* **Models:** :class:`Post`, :class:`DateRange`, :class:`Author`,
  :class:`FeedEntry`
* **Pipeline helpers:** :func:`filter_posts`, :func:`sort_posts`,
  :func:`to_feed`, :func:`normalize_id`

Usage::

    from notionlog import NotionlogClient, NotionlogConfig

    with NotionlogClient(config=NotionlogConfig.from_env()) as client:
        posts = client.get_posts()
"""

from __future__ import annotations

__version__ = "0.3.0"

# ── Clients ────────────────────────────────────────────────────────────
from notionlog.async_client import AsyncNotionlogClient
from notionlog.client import NotionlogClient

# ── Configuration ───────────────────────────────────────────────────────
from notionlog.config import NotionlogConfig

# ── Errors ──────────────────────────────────────────────────────────────
from notionlog.errors import (
    ErrorCode,
    NotionlogAuthError,
    NotionlogError,
    NotionlogNetworkError,
    NotionlogNotFoundError,
    NotionlogPermissionError,
    NotionlogRetryExhaustedError,
    NotionlogSchemaError,
    NotionlogServerError,
    NotionlogValidationError,
)
from notionlog.ids import normalize_id

# ── Models ──────────────────────────────────────────────────────────────
from notionlog.models import Author, DateRange, FeedEntry, Post
from notionlog.posts import filter_posts, sort_posts, to_feed

__all__ = [
    "__version__",
    # Clients
    "NotionlogClient",
    "AsyncNotionlogClient",
    # Configuration
    "NotionlogConfig",
    # Errors
    "NotionlogError",
    "ErrorCode",
    "NotionlogValidationError",
    "NotionlogAuthError",
    "NotionlogPermissionError",
    "NotionlogNotFoundError",
    "NotionlogRetryExhaustedError",
    "NotionlogNetworkError",
    "NotionlogServerError",
    "NotionlogSchemaError",
    # Models
    "Post",
    "DateRange",
    "Author",
    "FeedEntry",
    # Pipeline helpers
    "filter_posts",
    "sort_posts",
    "to_feed",
    "normalize_id",
]
