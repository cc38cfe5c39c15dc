"""Service for board tags."""

from __future__ import annotations

import logging
from typing import Any

import aiosqlite

from ..errors import NotFoundError
from ..models import Tag
from ..repositories import RecordRepository
from ..storage import Database, UpdateBuilder
from ..utils import new_id, now_iso
from .validation import MAX_LABEL_LENGTH, UNSET, is_set, normalize_color, require_text

logger = logging.getLogger(__name__)


class TagService:
    """Board-scoped labels."""

    def __init__(self, db: Database, records: RecordRepository | None = None) -> None:
        self.db = db
        self.records = records or RecordRepository()

    async def list_tags(self, board_id: str) -> list[Tag]:
        """Tags of a board sorted by label, ignoring case."""
        async with self.db.connection() as conn:
            return await self.records.find(
                conn, Tag, "board_id = ?", (board_id,), order_by="label COLLATE NOCASE ASC, id ASC"
            )

    async def create_tag(
        self,
        board_id: str,
        label: str,
        color: str | None = None,
        tag_id: str | None = None,
    ) -> Tag:
        tag_id = tag_id or new_id()
        now = now_iso()
        values = {
            "id": tag_id,
            "board_id": board_id,
            "label": require_text(label, "Tag label", MAX_LABEL_LENGTH),
            "color": normalize_color(color, "Tag color"),
            "created_at": now,
            "updated_at": now,
        }
        async with self.db.transaction() as conn:
            if not await self.records.exists(conn, "kanban_boards", id=board_id):
                raise NotFoundError(f"Board not found: {board_id}")
            await self.records.insert(conn, Tag, values)
            tag = await self.records.require(conn, Tag, tag_id)
        logger.info("Tag created: %s (%s) on board %s", tag_id, tag.label, board_id)
        return tag

    async def update_tag(
        self,
        tag_id: str,
        board_id: str,
        *,
        label: Any = UNSET,
        color: Any = UNSET,
    ) -> Tag:
        """Rename or recolour a tag; ``color=None`` clears the colour."""
        builder = UpdateBuilder(Tag.TABLE)
        if is_set(label):
            builder.set("label", require_text(label, "Tag label", MAX_LABEL_LENGTH))
        if is_set(color):
            builder.set("color", normalize_color(color, "Tag color"))

        async with self.db.transaction() as conn:
            await self._require(conn, tag_id, board_id)
            if builder.has_changes:
                await self.records.update(conn, builder, id=tag_id, board_id=board_id)
            tag = await self.records.require(conn, Tag, tag_id)
        if builder.has_changes:
            logger.info("Tag updated: %s (%s)", tag_id, ", ".join(builder.columns))
        return tag

    async def delete_tag(self, tag_id: str, board_id: str) -> None:
        """Delete a tag; card links go with it."""
        async with self.db.transaction() as conn:
            deleted = await self.records.delete(conn, Tag.TABLE, id=tag_id, board_id=board_id)
        if not deleted:
            raise NotFoundError(f"Tag not found on board {board_id}: {tag_id}")
        logger.info("Tag deleted: %s", tag_id)

    async def _require(self, conn: aiosqlite.Connection, tag_id: str, board_id: str) -> None:
        if not await self.records.exists(conn, Tag.TABLE, id=tag_id, board_id=board_id):
            raise NotFoundError(f"Tag not found on board {board_id}: {tag_id}")
