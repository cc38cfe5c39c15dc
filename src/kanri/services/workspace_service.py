"""Service for workspaces, the top-level grouping of boards."""

from __future__ import annotations

import logging
from typing import Any

from ..errors import NotFoundError, ValidationError
from ..models import DEFAULT_WORKSPACE_ID, Board, Workspace
from ..repositories import RecordRepository
from ..storage import Database, UpdateBuilder
from ..utils import new_id, now_iso
from .validation import UNSET, is_set, normalize_color, require_text

logger = logging.getLogger(__name__)


class WorkspaceService:
    """
    Create, rename and remove workspaces.

    The default workspace always exists and cannot be deleted; a workspace
    that still holds boards cannot be deleted either.
    """

    def __init__(self, db: Database, records: RecordRepository | None = None) -> None:
        self.db = db
        self.records = records or RecordRepository()

    async def list_workspaces(self) -> list[Workspace]:
        """All workspaces, oldest first."""
        async with self.db.connection() as conn:
            return await self.records.find(
                conn, Workspace, order_by="created_at ASC, rowid ASC"
            )

    async def get_workspace(self, workspace_id: str) -> Workspace | None:
        async with self.db.connection() as conn:
            return await self.records.get(conn, Workspace, workspace_id)

    async def create_workspace(
        self,
        name: str,
        color: str | None = None,
        workspace_id: str | None = None,
    ) -> Workspace:
        workspace_id = (workspace_id or "").strip() or new_id()
        now = now_iso()
        values = {
            "id": workspace_id,
            "name": require_text(name, "Workspace name"),
            "color": normalize_color(color, "Workspace color"),
            "created_at": now,
            "updated_at": now,
        }
        async with self.db.transaction() as conn:
            await self.records.insert(conn, Workspace, values)
            workspace = await self.records.require(conn, Workspace, workspace_id)
        logger.info("Workspace created: %s (%s)", workspace_id, workspace.name)
        return workspace

    async def update_workspace(
        self,
        workspace_id: str,
        *,
        name: Any = UNSET,
        color: Any = UNSET,
    ) -> Workspace:
        """Rename or recolour a workspace; ``color=None`` clears the colour."""
        builder = UpdateBuilder(Workspace.TABLE)
        if is_set(name):
            builder.set("name", require_text(name, "Workspace name"))
        if is_set(color):
            builder.set("color", normalize_color(color, "Workspace color"))

        async with self.db.transaction() as conn:
            if not await self.records.exists(conn, Workspace.TABLE, id=workspace_id):
                raise NotFoundError(f"Workspace not found: {workspace_id}")
            if builder.has_changes:
                await self.records.update(conn, builder, id=workspace_id)
            workspace = await self.records.require(conn, Workspace, workspace_id)
        if builder.has_changes:
            logger.info("Workspace updated: %s (%s)", workspace_id, ", ".join(builder.columns))
        return workspace

    async def delete_workspace(self, workspace_id: str) -> None:
        """
        Delete an empty workspace.

        Raises:
            ValidationError: It is the default workspace or still has boards.
            NotFoundError: No such workspace.
        """
        if workspace_id == DEFAULT_WORKSPACE_ID:
            raise ValidationError("The default workspace cannot be deleted")
        async with self.db.transaction() as conn:
            if await self.records.exists(conn, Board.TABLE, workspace_id=workspace_id):
                raise ValidationError(
                    f"Workspace {workspace_id} still has boards; move or delete them first"
                )
            deleted = await self.records.delete(conn, Workspace.TABLE, id=workspace_id)
        if not deleted:
            raise NotFoundError(f"Workspace not found: {workspace_id}")
        logger.info("Workspace deleted: %s", workspace_id)
