"""Service for board notes."""

from __future__ import annotations

import json
import logging
from typing import Any

from ..errors import NotFoundError
from ..models import Note
from ..repositories import RecordRepository
from ..storage import Database, UpdateBuilder
from ..utils import new_id, now_iso
from .validation import UNSET, is_set, require_text

logger = logging.getLogger(__name__)


class NoteService:
    """Free-form notes kept alongside a board."""

    def __init__(self, db: Database, records: RecordRepository | None = None) -> None:
        self.db = db
        self.records = records or RecordRepository()

    async def list_notes(self, board_id: str) -> list[Note]:
        """Unarchived notes, pinned first, most recently edited first."""
        async with self.db.connection() as conn:
            return await self.records.find(
                conn,
                Note,
                "board_id = ? AND archived_at IS NULL",
                (board_id,),
                order_by="pinned DESC, updated_at DESC, id ASC",
            )

    async def create_note(
        self,
        board_id: str,
        title: str,
        content: str = "",
        note_id: str | None = None,
    ) -> Note:
        note_id = note_id or new_id()
        now = now_iso()
        values = {
            "id": note_id,
            "board_id": board_id,
            "title": require_text(title, "Note title"),
            "content": content or "",
            "created_at": now,
            "updated_at": now,
        }
        async with self.db.transaction() as conn:
            if not await self.records.exists(conn, "kanban_boards", id=board_id):
                raise NotFoundError(f"Board not found: {board_id}")
            await self.records.insert(conn, Note, values)
            note = await self.records.require(conn, Note, note_id)
        logger.info("Note created: %s on board %s", note_id, board_id)
        return note

    async def update_note(
        self,
        note_id: str,
        board_id: str,
        *,
        title: Any = UNSET,
        content: Any = UNSET,
        pinned: Any = UNSET,
        tags: Any = UNSET,
    ) -> Note:
        """Edit a note; only supplied arguments are written."""
        builder = UpdateBuilder(Note.TABLE)
        if is_set(title):
            builder.set("title", require_text(title, "Note title"))
        if is_set(content):
            builder.set("content", content or "")
        if is_set(pinned):
            builder.set("pinned", bool(pinned))
        if is_set(tags):
            builder.set("tags", json.dumps(list(tags or [])))

        async with self.db.transaction() as conn:
            if builder.has_changes:
                updated = await self.records.update(conn, builder, id=note_id, board_id=board_id)
            else:
                updated = await self.records.exists(conn, Note.TABLE, id=note_id, board_id=board_id)
            if not updated:
                raise NotFoundError(f"Note not found on board {board_id}: {note_id}")
            note = await self.records.require(conn, Note, note_id)
        if builder.has_changes:
            logger.info("Note updated: %s (%s)", note_id, ", ".join(builder.columns))
        return note

    async def archive_note(self, note_id: str, board_id: str) -> Note:
        """Hide a note from ``list_notes`` without deleting it."""
        builder = UpdateBuilder(Note.TABLE).set("archived_at", now_iso())
        async with self.db.transaction() as conn:
            if not await self.records.update(conn, builder, id=note_id, board_id=board_id):
                raise NotFoundError(f"Note not found on board {board_id}: {note_id}")
            note = await self.records.require(conn, Note, note_id)
        logger.info("Note archived: %s", note_id)
        return note

    async def delete_note(self, note_id: str, board_id: str) -> None:
        async with self.db.transaction() as conn:
            deleted = await self.records.delete(conn, Note.TABLE, id=note_id, board_id=board_id)
        if not deleted:
            raise NotFoundError(f"Note not found on board {board_id}: {note_id}")
        logger.info("Note deleted: %s", note_id)
