"""Service layer for business logic."""

from .board_service import BoardService
from .card_service import CardService
from .column_service import ColumnService
from .note_service import NoteService
from .ordering import MoveResult, OrderingService, clamp_index, insert_at, reorder
from .reminder_service import ReminderScheduler
from .scope_validator import ScopeValidator
from .subtask_service import SubtaskService
from .tag_service import TagService
from .validation import UNSET
from .workspace_service import WorkspaceService

__all__ = [
    "UNSET",
    "BoardService",
    "CardService",
    "ColumnService",
    "MoveResult",
    "NoteService",
    "OrderingService",
    "ReminderScheduler",
    "ScopeValidator",
    "SubtaskService",
    "TagService",
    "WorkspaceService",
    "clamp_index",
    "insert_at",
    "reorder",
]
