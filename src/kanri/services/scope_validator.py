"""Membership checks run before ordered items are edited or moved."""

from __future__ import annotations

import logging

import aiosqlite

from ..errors import NotFoundError, OwnershipViolation
from ..models.scope import ScopeKind
from ..repositories import ItemLocation, PositionStoreProtocol

logger = logging.getLogger(__name__)


class ScopeValidator:
    """
    Rejects requests whose ids disagree with what is stored.

    The GUI sends the parent ids it believes are current; a stale or
    tampered request must fail before any row is touched. This is a
    consistency guard for a single local user, not an access-control layer.
    """

    def __init__(self, store: PositionStoreProtocol) -> None:
        self.store = store

    async def locate(
        self, conn: aiosqlite.Connection, kind: ScopeKind, item_id: str
    ) -> ItemLocation:
        """Load an item's location or raise ``NotFoundError``."""
        location = await self.store.locate(conn, kind, item_id)
        if location is None:
            raise NotFoundError(f"{kind.label} not found: {item_id}")
        return location

    async def assert_belongs(
        self,
        conn: aiosqlite.Connection,
        kind: ScopeKind,
        child_id: str,
        expected_parent_id: str,
    ) -> ItemLocation:
        """Fail unless ``child_id`` is stored under ``expected_parent_id``."""
        location = await self.locate(conn, kind, child_id)
        if location.scope_id != expected_parent_id:
            logger.debug(
                "Parent mismatch for %s %s: stored=%s supplied=%s",
                kind.name,
                child_id,
                location.scope_id,
                expected_parent_id,
            )
            raise OwnershipViolation(
                f"{kind.label} {child_id} does not belong to {expected_parent_id}"
            )
        return location

    async def assert_owner(
        self,
        conn: aiosqlite.Connection,
        kind: ScopeKind,
        child_id: str,
        expected_owner_id: str,
    ) -> ItemLocation:
        """Fail unless ``child_id`` belongs to board ``expected_owner_id``."""
        location = await self.locate(conn, kind, child_id)
        if location.owner_id != expected_owner_id:
            raise OwnershipViolation(
                f"{kind.label} {child_id} does not belong to board {expected_owner_id}"
            )
        return location

    async def scope_owner(
        self, conn: aiosqlite.Connection, kind: ScopeKind, scope_id: str
    ) -> str:
        """Owner of a parent scope, or ``NotFoundError`` if it does not exist."""
        owner_id = await self.store.scope_owner(conn, kind, scope_id)
        if owner_id is None:
            raise NotFoundError(f"Parent of {kind.name} not found: {scope_id}")
        return owner_id

    async def assert_scope_in_owner(
        self,
        conn: aiosqlite.Connection,
        kind: ScopeKind,
        scope_id: str,
        owner_id: str,
    ) -> None:
        """Fail unless the parent scope exists and belongs to ``owner_id``."""
        stored_owner = await self.scope_owner(conn, kind, scope_id)
        if stored_owner != owner_id:
            raise OwnershipViolation(f"{scope_id} does not belong to board {owner_id}")
