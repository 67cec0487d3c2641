"""Database API wrappers.

A blog's posts live in a Notion database.  :meth:`DatabaseAPI.retrieve`
returns its schema (the ``properties`` object, keyed by column name) and
:meth:`DatabaseAPI.query` returns every row, following pagination.

Rows are never filtered server-side: status and type filtering happens
after normalisation, in :func:`notionlog.posts.filter_posts`.
"""

from __future__ import annotations

from typing import Any

from .transport import AsyncNotionTransport, NotionTransport


class DatabaseAPI:
    """Synchronous wrapper for the Notion Databases API."""

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def retrieve(self, database_id: str) -> dict[str, Any]:
        """Retrieve a database object, schema included."""
        return self._transport.request("GET", f"/databases/{database_id}")

    def query(self, database_id: str) -> list[dict[str, Any]]:
        """Return every row (page object) of a database.

        Issues as many ``POST /databases/{database_id}/query`` requests as
        the result set needs.
        """
        return list(
            self._transport.paginate(
                f"/databases/{database_id}/query",
                method="POST",
                json={},
            )
        )


class AsyncDatabaseAPI:
    """Asynchronous wrapper for the Notion Databases API."""

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def retrieve(self, database_id: str) -> dict[str, Any]:
        """See :meth:`DatabaseAPI.retrieve`."""
        return await self._transport.request("GET", f"/databases/{database_id}")

    async def query(self, database_id: str) -> list[dict[str, Any]]:
        """See :meth:`DatabaseAPI.query`."""
        return [
            row
            async for row in self._transport.paginate(
                f"/databases/{database_id}/query",
                method="POST",
                json={},
            )
        ]
