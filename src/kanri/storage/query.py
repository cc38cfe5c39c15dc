"""Parameterized SQL helpers."""

from __future__ import annotations

from typing import Any

from ..utils import now_iso


class UpdateBuilder:
    """
    Build an ``UPDATE`` that touches only the fields a caller supplied.

    Column names come from code, never from request data; every value is a
    bound parameter. ``updated_at`` is always refreshed.

    Example:
        builder = UpdateBuilder("kanban_cards")
        builder.set("title", "Write docs")
        builder.set("due_date", None)
        sql, params = builder.build(id=card_id)
        # UPDATE kanban_cards SET updated_at = ?, title = ?, due_date = ? WHERE id = ?
    """

    def __init__(self, table: str, touch: bool = True) -> None:
        self.table = table
        self._assignments: list[tuple[str, Any]] = []
        self._touch = touch

    def set(self, column: str, value: Any) -> UpdateBuilder:
        """Queue ``column = value``. Setting a column twice keeps the last value."""
        self._assignments = [(c, v) for c, v in self._assignments if c != column]
        self._assignments.append((column, value))
        return self

    @property
    def has_changes(self) -> bool:
        """True when at least one field was supplied."""
        return bool(self._assignments)

    @property
    def columns(self) -> list[str]:
        """Columns queued for update, in insertion order."""
        return [column for column, _ in self._assignments]

    def build(self, **where: Any) -> tuple[str, list[Any]]:
        """Render the statement; ``where`` keys are ANDed equality checks."""
        if not where:
            raise ValueError("UPDATE without a WHERE clause is not allowed")
        assignments = list(self._assignments)
        if self._touch:
            assignments.insert(0, ("updated_at", now_iso()))
        if not assignments:
            raise ValueError("Nothing to update")

        set_clause = ", ".join(f"{column} = ?" for column, _ in assignments)
        where_clause = " AND ".join(f"{column} = ?" for column in where)
        params = [value for _, value in assignments] + list(where.values())
        return f"UPDATE {self.table} SET {set_clause} WHERE {where_clause}", params
