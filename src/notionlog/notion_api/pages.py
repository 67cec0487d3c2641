"""Page API wrappers.

:class:`PageAPI` (sync) and :class:`AsyncPageAPI` (async) are thin wrappers
around ``GET /pages/{id}``.  All HTTP concerns live in the transport.
"""

from __future__ import annotations

from typing import Any

from .transport import AsyncNotionTransport, NotionTransport


class PageAPI:
    """Synchronous wrapper for the Notion Pages API."""

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def retrieve(self, page_id: str) -> dict[str, Any]:
        """Retrieve a page object, properties included.

        Parameters
        ----------
        page_id:
            The page id, with or without dashes.
        """
        return self._transport.request("GET", f"/pages/{page_id}")


class AsyncPageAPI:
    """Asynchronous wrapper for the Notion Pages API."""

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def retrieve(self, page_id: str) -> dict[str, Any]:
        """See :meth:`PageAPI.retrieve`."""
        return await self._transport.request("GET", f"/pages/{page_id}")
