"""Service for card checklists."""

from __future__ import annotations

import logging
from typing import Any

from ..models import SUBTASKS, Subtask
from ..repositories import RecordRepository
from ..storage import Database, UpdateBuilder
from ..utils import new_id, now_iso
from .ordering import OrderingService
from .validation import UNSET, is_set, require_text

logger = logging.getLogger(__name__)


class SubtaskService:
    """Checklist items, ordered within their card."""

    def __init__(
        self,
        db: Database,
        records: RecordRepository | None = None,
        ordering: OrderingService | None = None,
    ) -> None:
        self.db = db
        self.records = records or RecordRepository()
        self.ordering = ordering or OrderingService()

    async def list_subtasks(self, card_id: str) -> list[Subtask]:
        async with self.db.connection() as conn:
            return await self.records.find(
                conn,
                Subtask,
                "card_id = ?",
                (card_id,),
                order_by="position ASC, created_at ASC, id ASC",
            )

    async def create_subtask(
        self,
        board_id: str,
        card_id: str,
        title: str,
        position: int | None = None,
        subtask_id: str | None = None,
    ) -> Subtask:
        """Add a subtask to a card; ``position=None`` appends."""
        subtask_id = subtask_id or new_id()
        now = now_iso()
        values = {
            "id": subtask_id,
            "board_id": board_id,
            "card_id": card_id,
            "title": require_text(title, "Subtask title"),
            "is_completed": False,
            "created_at": now,
            "updated_at": now,
        }
        async with self.db.transaction() as conn:
            await self.ordering.validator.assert_scope_in_owner(conn, SUBTASKS, card_id, board_id)
            values["position"] = await self.ordering.next_position(conn, SUBTASKS, card_id)
            await self.records.insert(conn, Subtask, values)
            index = await self.ordering.insert(conn, SUBTASKS, card_id, subtask_id, position)
            subtask = await self.records.require(conn, Subtask, subtask_id)
        logger.info("Subtask created: %s on card %s at %d", subtask_id, card_id, index)
        return subtask

    async def update_subtask(
        self,
        subtask_id: str,
        board_id: str,
        card_id: str,
        *,
        title: Any = UNSET,
        is_completed: Any = UNSET,
        target_position: Any = UNSET,
    ) -> Subtask:
        """
        Edit a subtask and optionally reposition it within its card.

        ``target_position`` is clamped like any other move target.
        """
        builder = UpdateBuilder(Subtask.TABLE)
        if is_set(title):
            builder.set("title", require_text(title, "Subtask title"))
        if is_set(is_completed):
            builder.set("is_completed", bool(is_completed))

        async with self.db.transaction() as conn:
            await self.ordering.validator.assert_owner(conn, SUBTASKS, subtask_id, board_id)
            await self.ordering.validator.assert_belongs(conn, SUBTASKS, subtask_id, card_id)
            if builder.has_changes:
                await self.records.update(conn, builder, id=subtask_id)
            if is_set(target_position) and target_position is not None:
                await self.ordering.move(
                    conn, SUBTASKS, subtask_id, card_id, card_id, int(target_position)
                )
            subtask = await self.records.require(conn, Subtask, subtask_id)
        logger.info("Subtask updated: %s", subtask_id)
        return subtask

    async def delete_subtask(self, subtask_id: str, board_id: str, card_id: str) -> None:
        async with self.db.transaction() as conn:
            await self.ordering.validator.assert_owner(conn, SUBTASKS, subtask_id, board_id)
            await self.ordering.remove(conn, SUBTASKS, subtask_id, card_id)
        logger.info("Subtask deleted: %s from card %s", subtask_id, card_id)

    async def move_subtask(
        self,
        board_id: str,
        subtask_id: str,
        from_card_id: str,
        to_card_id: str,
        target_index: int,
    ) -> Subtask:
        """Reorder a subtask or move it to another card on the same board."""
        async with self.db.transaction() as conn:
            await self.ordering.validator.assert_owner(conn, SUBTASKS, subtask_id, board_id)
            result = await self.ordering.move(
                conn, SUBTASKS, subtask_id, from_card_id, to_card_id, target_index
            )
            subtask = await self.records.require(conn, Subtask, subtask_id)
        logger.info(
            "Subtask moved: %s (%s -> %s) at %d",
            subtask_id,
            from_card_id,
            to_card_id,
            result.index,
        )
        return subtask
