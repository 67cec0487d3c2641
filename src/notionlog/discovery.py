"""Bookkeeping for descendant page discovery.

The clients do the I/O (retrieve the root, list block children, query
databases); this module holds the pure parts they share:

* classifying the root object,
* pulling row ids out of a database query,
* partitioning a block listing into child pages, inline databases and
  containers worth descending into,
* accumulating ids (each reported once, in discovery order), page objects
  and the merged collection schema in a :class:`Discovery`.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from notionlog.ids import try_normalize_id

COLLECTION_OBJECTS = frozenset({"database"})


def is_collection(obj: dict[str, Any] | None) -> bool:
    """True for objects that hold rows (a full-page or inline database)."""
    return bool(obj) and obj.get("object") in COLLECTION_OBJECTS


def _is_live(obj: dict[str, Any]) -> bool:
    return not obj.get("archived") and not obj.get("in_trash")


def page_ids_from_results(results: Iterable[dict[str, Any]]) -> list[str]:
    """Dashed ids of the live page rows in a database query response."""
    ids: list[str] = []
    for row in results:
        if row.get("object") != "page" or not _is_live(row):
            continue
        page_id = try_normalize_id(row.get("id"))
        if page_id is not None:
            ids.append(page_id)
    return ids


@dataclass
class ChildScan:
    """One level of a block listing, partitioned."""

    pages: list[str] = field(default_factory=list)
    databases: list[str] = field(default_factory=list)
    containers: list[str] = field(default_factory=list)


def split_children(blocks: Iterable[dict[str, Any]]) -> ChildScan:
    """Partition *blocks* into child pages, inline databases and containers.

    Containers are any other blocks with children (toggles, columns, synced
    blocks) that may hold further pages or databases.
    """
    scan = ChildScan()
    for block in blocks:
        if not _is_live(block):
            continue
        block_id = try_normalize_id(block.get("id"))
        if block_id is None:
            continue
        kind = block.get("type")
        if kind == "child_page":
            scan.pages.append(block_id)
        elif kind == "child_database":
            scan.databases.append(block_id)
        elif block.get("has_children"):
            scan.containers.append(block_id)
    return scan


@dataclass
class Discovery:
    """Everything learned while walking the root.

    Attributes
    ----------
    root_id:
        Dashed id of the root page or database.
    page_ids:
        Discovered page ids, unique, in discovery order.
    pages:
        Page objects already returned by database queries, keyed by id.
    schema:
        Column definitions of every visited database, merged by name.
    databases:
        Ids of the visited databases.
    """

    root_id: str
    page_ids: list[str] = field(default_factory=list)
    pages: dict[str, dict[str, Any]] = field(default_factory=dict)
    schema: dict[str, dict[str, Any]] = field(default_factory=dict)
    databases: list[str] = field(default_factory=list)

    def add_page(self, page_id: str) -> bool:
        """Record *page_id*; return ``False`` if it was already known."""
        if page_id in self.page_ids or page_id == self.root_id:
            return False
        self.page_ids.append(page_id)
        return True

    def add_database(self, database: dict[str, Any]) -> bool:
        """Record a database and merge its schema.

        Returns ``False`` if it was already visited.
        """
        database_id = try_normalize_id(database.get("id"))
        if database_id is None or database_id in self.databases:
            return False
        self.databases.append(database_id)
        for name, column in (database.get("properties") or {}).items():
            self.schema.setdefault(name, column)
        return True

    def add_rows(self, rows: list[dict[str, Any]]) -> None:
        """Record the page rows of a database query."""
        by_id = {try_normalize_id(row.get("id")): row for row in rows}
        for page_id in page_ids_from_results(rows):
            self.add_page(page_id)
            self.pages[page_id] = by_id[page_id]

    @property
    def missing(self) -> list[str]:
        """Ids whose page object still has to be fetched."""
        return [page_id for page_id in self.page_ids if page_id not in self.pages]
