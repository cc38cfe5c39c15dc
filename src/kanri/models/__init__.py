"""Data models."""

from .board import (
    ALLOWED_BOARD_ICONS,
    ALLOWED_COLUMN_ICONS,
    DEFAULT_BOARD_ICON,
    DEFAULT_COLUMN_ICON,
    Board,
    BoardView,
    Column,
)
from .card import DEFAULT_PRIORITY, PRIORITIES, Card, Subtask, Tag
from .note import Note
from .record import Record
from .scope import CARDS, COLUMNS, SUBTASKS, ScopeKind
from .workspace import (
    DEFAULT_WORKSPACE_COLOR,
    DEFAULT_WORKSPACE_ID,
    DEFAULT_WORKSPACE_NAME,
    Workspace,
)

__all__ = [
    "ALLOWED_BOARD_ICONS",
    "ALLOWED_COLUMN_ICONS",
    "CARDS",
    "COLUMNS",
    "DEFAULT_BOARD_ICON",
    "DEFAULT_COLUMN_ICON",
    "DEFAULT_PRIORITY",
    "DEFAULT_WORKSPACE_COLOR",
    "DEFAULT_WORKSPACE_ID",
    "DEFAULT_WORKSPACE_NAME",
    "PRIORITIES",
    "SUBTASKS",
    "Board",
    "BoardView",
    "Card",
    "Column",
    "Note",
    "Record",
    "ScopeKind",
    "Subtask",
    "Tag",
    "Workspace",
]
