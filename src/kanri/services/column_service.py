"""Service for board columns."""

from __future__ import annotations

import logging
from typing import Any

from ..errors import ValidationError
from ..models import COLUMNS, Column
from ..repositories import RecordRepository
from ..storage import Database, UpdateBuilder
from ..utils import new_id, now_iso
from .card_service import reminder_card_ids
from .ordering import OrderingService
from .reminder_service import ReminderScheduler
from .validation import (
    UNSET,
    is_set,
    normalize_color,
    normalize_column_icon,
    require_text,
    validate_wip_limit,
)

logger = logging.getLogger(__name__)


class ColumnService:
    """Create, edit, delete and reorder the columns of a board."""

    def __init__(
        self,
        db: Database,
        records: RecordRepository | None = None,
        ordering: OrderingService | None = None,
        reminders: ReminderScheduler | None = None,
    ) -> None:
        self.db = db
        self.records = records or RecordRepository()
        self.ordering = ordering or OrderingService()
        self.reminders = reminders

    async def list_columns(self, board_id: str) -> list[Column]:
        """Columns of a board in display order."""
        async with self.db.connection() as conn:
            return await self.records.find(
                conn,
                Column,
                "board_id = ?",
                (board_id,),
                order_by="position ASC, created_at ASC, id ASC",
            )

    async def get_column(self, column_id: str) -> Column | None:
        async with self.db.connection() as conn:
            return await self.records.get(conn, Column, column_id)

    async def create_column(
        self,
        board_id: str,
        title: str,
        position: int | None = None,
        color: str | None = None,
        icon: str | None = None,
        is_enabled: bool = True,
        wip_limit: int | None = None,
        column_id: str | None = None,
    ) -> Column:
        """
        Add a column to a board.

        ``position=None`` appends; other values are clamped to
        ``[0, column count]`` and later columns shift right.
        """
        column_id = column_id or new_id()
        now = now_iso()
        values = {
            "id": column_id,
            "board_id": board_id,
            "title": require_text(title, "Column title"),
            "color": normalize_color(color, "Column color"),
            "icon": normalize_column_icon(icon),
            "is_enabled": is_enabled,
            "wip_limit": validate_wip_limit(wip_limit),
            "created_at": now,
            "updated_at": now,
        }
        async with self.db.transaction() as conn:
            # Raises NotFoundError for an unknown board.
            await self.ordering.validator.scope_owner(conn, COLUMNS, board_id)
            values["position"] = await self.ordering.next_position(conn, COLUMNS, board_id)
            await self.records.insert(conn, Column, values)
            index = await self.ordering.insert(conn, COLUMNS, board_id, column_id, position)
            column = await self.records.require(conn, Column, column_id)
        logger.info("Column created: %s on board %s at %d", column_id, board_id, index)
        return column

    async def update_column(
        self,
        column_id: str,
        board_id: str,
        *,
        title: Any = UNSET,
        color: Any = UNSET,
        icon: Any = UNSET,
        is_enabled: Any = UNSET,
        wip_limit: Any = UNSET,
    ) -> Column:
        """
        Change column attributes; only supplied arguments are written.

        Passing ``None`` for ``color``, ``icon`` or ``wip_limit`` clears it.
        """
        builder = UpdateBuilder(Column.TABLE)
        if is_set(title):
            builder.set("title", require_text(title, "Column title"))
        if is_set(color):
            builder.set("color", normalize_color(color, "Column color"))
        if is_set(icon):
            builder.set("icon", normalize_column_icon(icon))
        if is_set(is_enabled):
            builder.set("is_enabled", bool(is_enabled))
        if is_set(wip_limit):
            builder.set("wip_limit", validate_wip_limit(wip_limit))

        async with self.db.transaction() as conn:
            await self.ordering.validator.assert_belongs(conn, COLUMNS, column_id, board_id)
            if builder.has_changes:
                await self.records.update(conn, builder, id=column_id)
            column = await self.records.require(conn, Column, column_id)
        if builder.has_changes:
            logger.info("Column updated: %s (%s)", column_id, ", ".join(builder.columns))
        return column

    async def delete_column(self, column_id: str, board_id: str) -> None:
        """Delete an empty column and close the gap in the board's ordering.

        Refused while the column still holds unarchived cards. Archived
        cards are removed with it and their reminders cancelled.
        """
        async with self.db.transaction() as conn:
            await self.ordering.validator.assert_belongs(conn, COLUMNS, column_id, board_id)
            async with conn.execute(
                "SELECT COUNT(*) AS n FROM kanban_cards "
                "WHERE column_id = ? AND archived_at IS NULL",
                (column_id,),
            ) as cursor:
                row = await cursor.fetchone()
            live_cards = int(row["n"]) if row else 0
            if live_cards:
                raise ValidationError(
                    f"Column {column_id} still has {live_cards} card(s); move or delete them first"
                )
            reminded = await reminder_card_ids(conn, "column_id", column_id)
            await self.ordering.remove(conn, COLUMNS, column_id, board_id)
        if self.reminders is not None:
            self.reminders.cancel_many(reminded)
        logger.info("Column deleted: %s from board %s", column_id, board_id)

    async def move_column(self, board_id: str, column_id: str, target_index: int) -> Column:
        """Reorder a column within its board."""
        async with self.db.transaction() as conn:
            result = await self.ordering.move(
                conn, COLUMNS, column_id, board_id, board_id, target_index
            )
            column = await self.records.require(conn, Column, column_id)
        logger.info("Column moved: %s on board %s -> %d", column_id, board_id, result.index)
        return column

