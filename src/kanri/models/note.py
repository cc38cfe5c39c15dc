"""Board note model."""

from __future__ import annotations

import json
from typing import Any

from pydantic import Field, field_validator

from .record import Record


class Note(Record):
    """A free-form note attached to a board."""

    TABLE = "notes"

    id: str
    board_id: str
    title: str
    content: str = ""
    pinned: bool = False
    tags: list[str] = Field(default_factory=list)
    created_at: str
    updated_at: str
    archived_at: str | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def parse_tags(cls, v: Any) -> Any:
        """Tags are stored as a JSON array; unreadable values become empty."""
        if v is None:
            return []
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
            except json.JSONDecodeError:
                return []
            if isinstance(parsed, list) and all(isinstance(t, str) for t in parsed):
                return parsed
            return []
        return v
