"""SQLite-backed position store."""

from __future__ import annotations

import aiosqlite

from ..models.scope import ScopeKind
from ..utils import now_iso
from .protocol import ItemLocation


class PositionStore:
    """
    Reads and writes the ``position`` and parent columns of ordered items.

    This is the only code that touches ordering columns directly. Table and
    column names come from ``ScopeKind`` constants; ids are always bound.
    """

    async def list_ordered(
        self, conn: aiosqlite.Connection, kind: ScopeKind, scope_id: str
    ) -> list[str]:
        """Item ids of a scope ordered by (position, created_at)."""
        sql = (
            f"SELECT id FROM {kind.table} WHERE {kind.parent_key} = ? "
            "ORDER BY position ASC, created_at ASC, id ASC"
        )
        async with conn.execute(sql, (scope_id,)) as cursor:
            return [row["id"] for row in await cursor.fetchall()]

    async def set_position(
        self, conn: aiosqlite.Connection, kind: ScopeKind, item_id: str, position: int
    ) -> None:
        """Overwrite one item's position and bump its modification time."""
        await conn.execute(
            f"UPDATE {kind.table} SET position = ?, updated_at = ? WHERE id = ?",
            (position, now_iso(), item_id),
        )

    async def set_parent(
        self, conn: aiosqlite.Connection, kind: ScopeKind, item_id: str, scope_id: str
    ) -> None:
        """Reassign an item to another parent scope."""
        await conn.execute(
            f"UPDATE {kind.table} SET {kind.parent_key} = ?, updated_at = ? WHERE id = ?",
            (scope_id, now_iso(), item_id),
        )

    async def locate(
        self, conn: aiosqlite.Connection, kind: ScopeKind, item_id: str
    ) -> ItemLocation | None:
        """Stored parent, owner and position of an item, or None if missing."""
        sql = (
            f"SELECT {kind.parent_key} AS scope_id, {kind.owner_key} AS owner_id, position "
            f"FROM {kind.table} WHERE id = ?"
        )
        async with conn.execute(sql, (item_id,)) as cursor:
            row = await cursor.fetchone()
        if row is None:
            return None
        return ItemLocation(
            item_id=item_id,
            scope_id=row["scope_id"],
            owner_id=row["owner_id"],
            position=int(row["position"]),
        )

    async def scope_owner(
        self, conn: aiosqlite.Connection, kind: ScopeKind, scope_id: str
    ) -> str | None:
        """Owner id of a parent scope, or None if the scope does not exist."""
        sql = f"SELECT {kind.parent_owner_key} AS owner_id FROM {kind.parent_table} WHERE id = ?"
        async with conn.execute(sql, (scope_id,)) as cursor:
            row = await cursor.fetchone()
        return None if row is None else row["owner_id"]
