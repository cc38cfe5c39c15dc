"""Card, subtask and tag models."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from .record import Record

PRIORITIES = ("none", "low", "medium", "high")
DEFAULT_PRIORITY = "medium"


class Tag(Record):
    """A board-scoped label that can be attached to cards."""

    TABLE = "kanban_tags"

    id: str
    board_id: str
    label: str
    color: str | None = None
    created_at: str
    updated_at: str


class Subtask(Record):
    """A checklist item; ordered within its card."""

    TABLE = "kanban_subtasks"

    id: str
    board_id: str
    card_id: str
    title: str
    is_completed: bool = False
    position: int
    created_at: str
    updated_at: str


class Card(Record):
    """A kanban card; ordered within its column."""

    TABLE = "kanban_cards"
    RELATIONS = frozenset({"subtasks", "tags"})

    id: str
    board_id: str
    column_id: str
    title: str
    description: str | None = None
    position: int
    priority: str = DEFAULT_PRIORITY
    due_date: str | None = None
    remind_at: str | None = None
    created_at: str
    updated_at: str
    archived_at: str | None = None

    subtasks: list[Subtask] = Field(default_factory=list)
    tags: list[Tag] = Field(default_factory=list)

    @field_validator("priority", mode="before")
    @classmethod
    def default_priority(cls, v: Any) -> Any:
        """Missing priority reads back as the default."""
        return DEFAULT_PRIORITY if v is None else v
