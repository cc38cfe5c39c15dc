"""Board and column models."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from .card import Card
from .record import Record
from .workspace import DEFAULT_WORKSPACE_ID

DEFAULT_BOARD_ICON = "Folder"
ALLOWED_BOARD_ICONS = (
    "Folder",
    "LayoutDashboard",
    "Layers",
    "Briefcase",
    "ClipboardList",
    "CalendarDays",
    "BarChart3",
    "Target",
    "Users",
    "MessagesSquare",
    "LifeBuoy",
    "Lightbulb",
    "Rocket",
    "Package",
    "Palette",
    "PenTool",
)

DEFAULT_COLUMN_ICON = "Circle"
ALLOWED_COLUMN_ICONS = (
    "Circle",
    "Play",
    "CheckCircle",
    "Loader",
    "AlarmClock",
    "Bolt",
    "Sparkles",
    "Target",
    "CalendarCheck",
    "ClipboardList",
    "Lightbulb",
    "Flag",
    "Timer",
    "Ship",
    "Kanban",
    "TrendingUp",
    "Zap",
    "Rocket",
    "BadgeCheck",
)


class Board(Record):
    """A kanban board; owns columns, cards, tags and notes."""

    TABLE = "kanban_boards"

    id: str
    workspace_id: str = DEFAULT_WORKSPACE_ID
    title: str
    description: str | None = None
    icon: str = DEFAULT_BOARD_ICON
    emoji: str | None = None
    color: str | None = None
    created_at: str
    updated_at: str
    archived_at: str | None = None

    @field_validator("icon", mode="before")
    @classmethod
    def default_icon(cls, v: Any) -> Any:
        """Blank icons read back as the default."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_BOARD_ICON
        return v

    @field_validator("workspace_id", mode="before")
    @classmethod
    def default_workspace(cls, v: Any) -> Any:
        """Unassigned boards belong to the default workspace."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_WORKSPACE_ID
        return v


class Column(Record):
    """A board column; ordered within its board."""

    TABLE = "kanban_columns"

    id: str
    board_id: str
    title: str
    position: int
    color: str | None = None
    icon: str = DEFAULT_COLUMN_ICON
    is_enabled: bool = True
    wip_limit: int | None = None
    created_at: str
    updated_at: str
    archived_at: str | None = None

    @field_validator("icon", mode="before")
    @classmethod
    def default_icon(cls, v: Any) -> Any:
        """Blank icons read back as the default."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_COLUMN_ICON
        return v

    @field_validator("is_enabled", mode="before")
    @classmethod
    def default_enabled(cls, v: Any) -> Any:
        """Legacy rows with NULL are enabled."""
        return True if v is None else v


class BoardView(Record):
    """Full board state with cards grouped by column, in display order."""

    board: Board
    columns: list[Column] = Field(default_factory=list)
    cards: dict[str, list[Card]] = Field(default_factory=dict)

    def get_column(self, column_id: str) -> list[Card]:
        """Get cards for a specific column."""
        return self.cards.get(column_id, [])

    def card_ids(self, column_id: str) -> list[str]:
        """Ordered card ids of one column."""
        return [card.id for card in self.get_column(column_id)]
