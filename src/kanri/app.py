"""kanri application container."""

from __future__ import annotations

import logging
from types import TracebackType

from .config import Settings
from .repositories import PositionStore, RecordRepository
from .services import (
    BoardService,
    CardService,
    ColumnService,
    NoteService,
    OrderingService,
    ReminderScheduler,
    SubtaskService,
    TagService,
    WorkspaceService,
)
from .services.reminder_service import Notifier
from .storage import Database

logger = logging.getLogger(__name__)


class Kanri:
    """
    Wires the database and services together.

    Usage:
        async with Kanri(settings) as app:
            board = await app.board_service.create_board("Roadmap")

    The container owns the reminder scheduler: pending reminders are
    cancelled and pooled connections closed on exit.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.db = Database(
            self.settings.db_path,
            pool_size=self.settings.pool_size,
            busy_timeout=self.settings.busy_timeout,
        )
        self.reminders = ReminderScheduler(notifier)
        self._init_services()

    def _init_services(self) -> None:
        """Initialize repositories and services."""
        self.records = RecordRepository()
        self.ordering = OrderingService(PositionStore())

        self.board_service = BoardService(self.db, self.records, self.reminders)
        self.column_service = ColumnService(self.db, self.records, self.ordering, self.reminders)
        self.card_service = CardService(self.db, self.records, self.ordering, self.reminders)
        self.subtask_service = SubtaskService(self.db, self.records, self.ordering)
        self.tag_service = TagService(self.db, self.records)
        self.note_service = NoteService(self.db, self.records)
        self.workspace_service = WorkspaceService(self.db, self.records)

    async def open(self) -> None:
        await self.db.open()
        logger.info("kanri ready (db=%s, pool=%d)", self.settings.db_path, self.settings.pool_size)

    async def close(self) -> None:
        await self.reminders.cancel_all()
        await self.db.close()

    async def __aenter__(self) -> Kanri:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()
