"""Workspace model."""

from __future__ import annotations

from .record import Record

DEFAULT_WORKSPACE_ID = "workspace-default"
DEFAULT_WORKSPACE_NAME = "Default Workspace"
DEFAULT_WORKSPACE_COLOR = "#6366F1"


class Workspace(Record):
    """A named group of boards. Every board belongs to exactly one."""

    TABLE = "workspaces"

    id: str
    name: str
    color: str | None = None
    created_at: str
    updated_at: str
    archived_at: str | None = None

    @property
    def is_default(self) -> bool:
        return self.id == DEFAULT_WORKSPACE_ID
