"""Block API wrappers.

:class:`BlockAPI` and :class:`AsyncBlockAPI` wrap the read side of the
``/blocks`` endpoints.  :meth:`BlockAPI.get_children` follows pagination so
callers always get the complete listing.
"""

from __future__ import annotations

from typing import Any

from .transport import AsyncNotionTransport, NotionTransport


class BlockAPI:
    """Synchronous wrapper for the Notion Blocks API."""

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def retrieve(self, block_id: str) -> dict[str, Any]:
        """Retrieve a single block.

        A page id is also a block id; the result then has
        ``type == "child_page"``.
        """
        return self._transport.request("GET", f"/blocks/{block_id}")

    def get_children(self, block_id: str) -> list[dict[str, Any]]:
        """Retrieve all children of a block or page, in order.

        Issues as many ``GET /blocks/{block_id}/children`` requests as the
        listing needs.
        """
        return list(self._transport.paginate(f"/blocks/{block_id}/children", method="GET"))


class AsyncBlockAPI:
    """Asynchronous wrapper for the Notion Blocks API."""

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def retrieve(self, block_id: str) -> dict[str, Any]:
        """See :meth:`BlockAPI.retrieve`."""
        return await self._transport.request("GET", f"/blocks/{block_id}")

    async def get_children(self, block_id: str) -> list[dict[str, Any]]:
        """See :meth:`BlockAPI.get_children`."""
        return [
            item
            async for item in self._transport.paginate(
                f"/blocks/{block_id}/children",
                method="GET",
            )
        ]
