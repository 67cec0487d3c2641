"""User API wrappers.

``people`` values in a database row only carry the user's name and avatar
when the integration has the user-information capability.  The clients use
:meth:`UserAPI.retrieve` to fill in members that arrive with an id only.
"""

from __future__ import annotations

from typing import Any

from .transport import AsyncNotionTransport, NotionTransport


class UserAPI:
    """Synchronous wrapper for the Notion Users API."""

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def retrieve(self, user_id: str) -> dict[str, Any]:
        return self._transport.request("GET", f"/users/{user_id}")


class AsyncUserAPI:
    """Asynchronous wrapper for the Notion Users API."""

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def retrieve(self, user_id: str) -> dict[str, Any]:
        return await self._transport.request("GET", f"/users/{user_id}")
