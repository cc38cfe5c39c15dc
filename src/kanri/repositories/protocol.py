"""Repository protocol for position storage backends."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import aiosqlite

from ..models.scope import ScopeKind


@dataclass(frozen=True)
class ItemLocation:
    """Where an ordered item currently lives."""

    item_id: str
    scope_id: str
    owner_id: str
    position: int


class PositionStoreProtocol(Protocol):
    """Interface for persisting item positions within parent scopes.

    Every method runs on a connection the caller has already placed inside
    a transaction. Implementations hold no locks of their own and must not
    commit.
    """

    async def list_ordered(
        self, conn: aiosqlite.Connection, kind: ScopeKind, scope_id: str
    ) -> list[str]:
        """Item ids of a scope ordered by (position, created_at)."""
        ...

    async def set_position(
        self, conn: aiosqlite.Connection, kind: ScopeKind, item_id: str, position: int
    ) -> None:
        """Overwrite one item's position and bump its modification time."""
        ...

    async def set_parent(
        self, conn: aiosqlite.Connection, kind: ScopeKind, item_id: str, scope_id: str
    ) -> None:
        """Reassign an item to another parent scope."""
        ...

    async def locate(
        self, conn: aiosqlite.Connection, kind: ScopeKind, item_id: str
    ) -> ItemLocation | None:
        """Stored parent, owner and position of an item, or None if missing."""
        ...

    async def scope_owner(
        self, conn: aiosqlite.Connection, kind: ScopeKind, scope_id: str
    ) -> str | None:
        """Owner id of a parent scope, or None if the scope does not exist."""
        ...
