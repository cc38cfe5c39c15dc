"""Dense ordering of items within parent scopes, and moves between scopes."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import aiosqlite

from ..errors import ScopeMismatch
from ..models.scope import ScopeKind
from ..repositories import PositionStore, PositionStoreProtocol
from .scope_validator import ScopeValidator

logger = logging.getLogger(__name__)


def clamp_index(index: int, upper: int) -> int:
    """Constrain ``index`` into ``[0, upper]``."""
    return max(0, min(index, upper))


def insert_at(ids: list[str], item_id: str, index: int) -> list[str]:
    """Return a copy of ``ids`` with ``item_id`` inserted at the clamped index."""
    ordered = list(ids)
    ordered.insert(clamp_index(index, len(ordered)), item_id)
    return ordered


def reorder(ids: list[str], item_id: str, index: int) -> list[str]:
    """Move ``item_id`` within ``ids`` to ``index``, clamped to the reduced length.

    >>> reorder(["a", "b", "c"], "b", 0)
    ['b', 'a', 'c']
    >>> reorder(["a", "b", "c"], "a", 999)
    ['b', 'c', 'a']
    """
    if item_id not in ids:
        raise ValueError(f"{item_id} is not in the sequence")
    return insert_at([i for i in ids if i != item_id], item_id, index)


@dataclass(frozen=True)
class MoveResult:
    """Outcome of a move: final index and the committed orderings."""

    item_id: str
    source_scope_id: str
    dest_scope_id: str
    index: int
    source_order: list[str]
    dest_order: list[str]

    @property
    def cross_scope(self) -> bool:
        return self.source_scope_id != self.dest_scope_id


class OrderingService:
    """
    Keeps positions dense (``0..n-1``) within every scope.

    All methods take a connection that is already inside the caller's
    transaction, so a failure at any step rolls back every position written
    before it.
    """

    def __init__(
        self,
        store: PositionStoreProtocol | None = None,
        validator: ScopeValidator | None = None,
    ) -> None:
        self.store = store or PositionStore()
        self.validator = validator or ScopeValidator(self.store)

    async def apply_order(
        self, conn: aiosqlite.Connection, kind: ScopeKind, ids: list[str]
    ) -> None:
        """Persist ``ids`` as positions ``0..len(ids)-1``."""
        for index, item_id in enumerate(ids):
            await self.store.set_position(conn, kind, item_id, index)

    async def renumber(
        self, conn: aiosqlite.Connection, kind: ScopeKind, scope_id: str
    ) -> list[str]:
        """Rewrite a scope's positions densely, keeping the stored order."""
        ids = await self.store.list_ordered(conn, kind, scope_id)
        await self.apply_order(conn, kind, ids)
        logger.debug("Renumbered %s scope %s (%d items)", kind.name, scope_id, len(ids))
        return ids

    async def next_position(
        self, conn: aiosqlite.Connection, kind: ScopeKind, scope_id: str
    ) -> int:
        """Append position for a new item; the provisional value before ``insert``."""
        return len(await self.store.list_ordered(conn, kind, scope_id))

    async def insert(
        self,
        conn: aiosqlite.Connection,
        kind: ScopeKind,
        scope_id: str,
        item_id: str,
        index: int | None = None,
    ) -> int:
        """
        Place a freshly inserted row at ``index`` within its scope.

        The row must already exist under ``scope_id`` (any provisional
        position). ``None`` appends; other values are clamped to
        ``[0, count]``. Returns the final index.
        """
        others = [i for i in await self.store.list_ordered(conn, kind, scope_id) if i != item_id]
        target = len(others) if index is None else clamp_index(index, len(others))
        ordered = insert_at(others, item_id, target)
        await self.apply_order(conn, kind, ordered)
        logger.debug("Inserted %s %s into %s at %d", kind.name, item_id, scope_id, target)
        return target

    async def remove(
        self,
        conn: aiosqlite.Connection,
        kind: ScopeKind,
        item_id: str,
        scope_id: str,
    ) -> list[str]:
        """Delete an item from ``scope_id`` and close the gap it leaves."""
        await self.validator.assert_belongs(conn, kind, item_id, scope_id)
        await conn.execute(f"DELETE FROM {kind.table} WHERE id = ?", (item_id,))
        remaining = await self.renumber(conn, kind, scope_id)
        logger.debug("Removed %s %s from %s", kind.name, item_id, scope_id)
        return remaining

    async def move(
        self,
        conn: aiosqlite.Connection,
        kind: ScopeKind,
        item_id: str,
        source_scope_id: str,
        dest_scope_id: str,
        target_index: int,
    ) -> MoveResult:
        """
        Relocate an item within its scope or into another scope.

        Same scope: the item is taken out and reinserted, with the index
        clamped to the reduced length. Across scopes: the source closes its
        gap, the item is reparented and inserted into the destination with
        the index clamped to the destination length.

        Raises:
            NotFoundError: Item or destination scope does not exist.
            OwnershipViolation: Item is not stored under ``source_scope_id``.
            ScopeMismatch: Destination has a different owner than the source.
        """
        location = await self.validator.assert_belongs(conn, kind, item_id, source_scope_id)

        if dest_scope_id != source_scope_id:
            dest_owner = await self.validator.scope_owner(conn, kind, dest_scope_id)
            if dest_owner != location.owner_id:
                raise ScopeMismatch(
                    f"Cannot move {kind.name} {item_id} from {source_scope_id} "
                    f"to {dest_scope_id}: different owners"
                )

        source_ids = await self.store.list_ordered(conn, kind, source_scope_id)
        if item_id not in source_ids:
            raise RuntimeError(f"{kind.label} {item_id} missing from ordering of {source_scope_id}")

        if dest_scope_id == source_scope_id:
            index = clamp_index(target_index, len(source_ids) - 1)
            ordered = reorder(source_ids, item_id, index)
            await self.apply_order(conn, kind, ordered)
            logger.debug(
                "Reordered %s %s in %s: %d -> %d",
                kind.name,
                item_id,
                source_scope_id,
                location.position,
                index,
            )
            return MoveResult(item_id, source_scope_id, dest_scope_id, index, ordered, ordered)

        source_ids.remove(item_id)
        await self.apply_order(conn, kind, source_ids)

        dest_ids = await self.store.list_ordered(conn, kind, dest_scope_id)
        index = clamp_index(target_index, len(dest_ids))
        dest_order = insert_at(dest_ids, item_id, index)
        await self.store.set_parent(conn, kind, item_id, dest_scope_id)
        await self.apply_order(conn, kind, dest_order)
        logger.debug(
            "Moved %s %s: %s -> %s at %d",
            kind.name,
            item_id,
            source_scope_id,
            dest_scope_id,
            index,
        )
        return MoveResult(item_id, source_scope_id, dest_scope_id, index, source_ids, dest_order)
