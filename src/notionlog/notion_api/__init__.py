"""notionlog.notion_api -- Notion API transport and endpoint wrappers.

* :mod:`.retries` -- retry decision and backoff.
* :mod:`.transport` -- HTTP transport with auth and retries.
* :mod:`.pages`, :mod:`.blocks`, :mod:`.databases`, :mod:`.users` --
  read-only endpoint wrappers.
"""

from __future__ import annotations

from .blocks import AsyncBlockAPI, BlockAPI
from .databases import AsyncDatabaseAPI, DatabaseAPI
from .pages import AsyncPageAPI, PageAPI
from .retries import compute_backoff, should_retry
from .transport import AsyncNotionTransport, NotionTransport
from .users import AsyncUserAPI, UserAPI

__all__ = [
    "AsyncBlockAPI",
    "AsyncDatabaseAPI",
    "AsyncNotionTransport",
    "AsyncPageAPI",
    "AsyncUserAPI",
    "BlockAPI",
    "DatabaseAPI",
    "NotionTransport",
    "PageAPI",
    "UserAPI",
    "compute_backoff",
    "should_retry",
]
