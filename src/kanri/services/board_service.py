"""Service for board management and full board loading."""

from __future__ import annotations

import logging

import aiosqlite

from ..errors import NotFoundError
from ..models import DEFAULT_WORKSPACE_ID, Board, BoardView, Card, Column, Workspace
from ..repositories import RecordRepository
from ..storage import Database, UpdateBuilder
from ..utils import new_id, now_iso
from .card_service import attach_relations, reminder_card_ids
from .reminder_service import ReminderScheduler
from .validation import normalize_board_icon, normalize_color, optional_text, require_text

logger = logging.getLogger(__name__)


class BoardService:
    """Service for board management."""

    def __init__(
        self,
        db: Database,
        records: RecordRepository | None = None,
        reminders: ReminderScheduler | None = None,
    ) -> None:
        self.db = db
        self.records = records or RecordRepository()
        self.reminders = reminders

    async def list_boards(self, workspace_id: str | None = None) -> list[Board]:
        """All boards, oldest first, optionally limited to one workspace."""
        where, params = ("workspace_id = ?", (workspace_id,)) if workspace_id else ("", ())
        async with self.db.connection() as conn:
            return await self.records.find(
                conn, Board, where, params, order_by="created_at ASC, rowid ASC"
            )

    async def get_board(self, board_id: str) -> Board | None:
        """Get a board by ID."""
        async with self.db.connection() as conn:
            return await self.records.get(conn, Board, board_id)

    async def create_board(
        self,
        title: str,
        description: str | None = None,
        icon: str | None = None,
        emoji: str | None = None,
        color: str | None = None,
        board_id: str | None = None,
        workspace_id: str = DEFAULT_WORKSPACE_ID,
    ) -> Board:
        """
        Create an empty board in a workspace.

        Blank description, emoji and colour are stored as NULL; a missing
        icon falls back to the default board icon.

        Raises:
            NotFoundError: The workspace does not exist.
        """
        board_id = board_id or new_id()
        now = now_iso()
        values = {
            "id": board_id,
            "workspace_id": workspace_id,
            "title": require_text(title, "Board title"),
            "description": optional_text(description),
            "icon": normalize_board_icon(icon),
            "emoji": optional_text(emoji),
            "color": normalize_color(color, "Board color"),
            "created_at": now,
            "updated_at": now,
        }
        async with self.db.transaction() as conn:
            await self._require_workspace(conn, workspace_id)
            await self.records.insert(conn, Board, values)
            board = await self.records.require(conn, Board, board_id)
        logger.info("Board created: %s (%s)", board.id, board.title)
        return board

    async def rename_board(
        self, board_id: str, title: str, description: str | None = None
    ) -> Board:
        """Set a board's title and description (blank description clears it)."""
        builder = UpdateBuilder(Board.TABLE)
        builder.set("title", require_text(title, "Board title"))
        builder.set("description", optional_text(description))
        return await self._update(board_id, builder)

    async def update_board_icon(self, board_id: str, icon: str | None) -> Board:
        """Change a board's icon; blank restores the default."""
        builder = UpdateBuilder(Board.TABLE).set("icon", normalize_board_icon(icon))
        return await self._update(board_id, builder)

    async def delete_board(self, board_id: str) -> None:
        """
        Delete a board with everything it owns.

        Columns, cards, subtasks, tags and notes go with it through
        ``ON DELETE CASCADE``. Pending reminders of its cards are cancelled
        once the delete is committed.
        """
        async with self.db.transaction() as conn:
            reminded = await reminder_card_ids(conn, "board_id", board_id)
            deleted = await self.records.delete(conn, Board.TABLE, id=board_id)
        if not deleted:
            raise NotFoundError(f"Board not found: {board_id}")
        if self.reminders is not None:
            self.reminders.cancel_many(reminded)
        logger.info("Board deleted: %s", board_id)

    async def update_board_workspace(self, board_id: str, workspace_id: str) -> Board:
        """
        Move a board into another workspace.

        Raises:
            ValidationError: ``workspace_id`` is blank.
            NotFoundError: Board or workspace does not exist.
        """
        workspace_id = require_text(workspace_id, "Workspace")
        builder = UpdateBuilder(Board.TABLE).set("workspace_id", workspace_id)
        async with self.db.transaction() as conn:
            await self._require_workspace(conn, workspace_id)
            if not await self.records.update(conn, builder, id=board_id):
                raise NotFoundError(f"Board not found: {board_id}")
            board = await self.records.require(conn, Board, board_id)
        logger.info("Board %s moved to workspace %s", board_id, workspace_id)
        return board

    async def load_board(self, board_id: str) -> BoardView:
        """Load the full board with cards grouped by column."""
        async with self.db.connection() as conn:
            board = await self.records.get(conn, Board, board_id)
            if board is None:
                raise NotFoundError(f"Board not found: {board_id}")
            columns = await self.records.find(
                conn,
                Column,
                "board_id = ?",
                (board_id,),
                order_by="position ASC, created_at ASC, id ASC",
            )
            cards = await self.records.find(
                conn,
                Card,
                "board_id = ?",
                (board_id,),
                order_by="position ASC, created_at ASC, id ASC",
            )
            cards = await attach_relations(conn, self.records, cards)

        grouped: dict[str, list[Card]] = {column.id: [] for column in columns}
        for card in cards:
            grouped.setdefault(card.column_id, []).append(card)

        logger.debug(
            "Loaded board %s: %d columns, %d cards", board_id, len(columns), len(cards)
        )
        return BoardView(board=board, columns=columns, cards=grouped)

    async def _require_workspace(self, conn: aiosqlite.Connection, workspace_id: str) -> None:
        if not await self.records.exists(conn, Workspace.TABLE, id=workspace_id):
            raise NotFoundError(f"Workspace not found: {workspace_id}")

    async def _update(self, board_id: str, builder: UpdateBuilder) -> Board:
        async with self.db.transaction() as conn:
            if not await self.records.update(conn, builder, id=board_id):
                raise NotFoundError(f"Board not found: {board_id}")
            board = await self.records.require(conn, Board, board_id)
        logger.info("Board updated: %s (%s)", board_id, ", ".join(builder.columns))
        return board
