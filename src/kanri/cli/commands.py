"""Subcommand implementations for the kanri CLI."""

from __future__ import annotations

import argparse
import asyncio
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path

import yaml

from ..app import Kanri
from ..config import Settings
from ..errors import KanriError
from .output import card_line, column_line, detail, error, header, info, success

logger = logging.getLogger(__name__)

CONFIG_HEADER = """\
# kanri configuration
#
# db_path: SQLite database file (created on first use)
# pool_size: Maximum pooled connections (1-32)
# busy_timeout: Seconds to wait for a write lock before failing
#
# Every key can also be set through a KANRI_<KEY> environment variable;
# values in this file take precedence over the environment.

"""

Command = Callable[[Kanri, argparse.Namespace], Awaitable[int]]


def generate_config_yaml(settings: Settings) -> str:
    """Render ``settings`` as a commented YAML config file."""
    data = settings.model_dump(mode="json", include={"db_path", "pool_size", "busy_timeout"})
    return CONFIG_HEADER + yaml.safe_dump(data, default_flow_style=False, sort_keys=False)


async def cmd_init(app: Kanri, args: argparse.Namespace) -> int:
    success(f"Database ready: {app.settings.db_path}")
    config_path: Path | None = args.config
    if config_path is None:
        return 0
    if config_path.exists():
        info(f"Config exists: {config_path}")
        return 0
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(generate_config_yaml(app.settings))
    success(f"Generated config: {config_path}")
    return 0


async def cmd_boards(app: Kanri, args: argparse.Namespace) -> int:
    boards = await app.board_service.list_boards(args.workspace)
    if not boards:
        info("No boards yet")
        return 0
    for board in boards:
        print(f"{board.id}  {board.title}")
    return 0


async def cmd_workspaces(app: Kanri, args: argparse.Namespace) -> int:
    for workspace in await app.workspace_service.list_workspaces():
        default = " (default)" if workspace.is_default else ""
        print(f"{workspace.id}  {workspace.name}{default}")
    return 0


async def cmd_create_workspace(app: Kanri, args: argparse.Namespace) -> int:
    workspace = await app.workspace_service.create_workspace(args.name, color=args.color)
    success(f"Created workspace {workspace.name}: {workspace.id}")
    return 0


async def cmd_show(app: Kanri, args: argparse.Namespace) -> int:
    view = await app.board_service.load_board(args.board_id)
    header(view.board.title)
    for column in view.columns:
        cards = view.get_column(column.id)
        print(column_line(column, len(cards)))
        for card in cards:
            detail(card_line(card))
    return 0


async def cmd_create_board(app: Kanri, args: argparse.Namespace) -> int:
    board = await app.board_service.create_board(
        args.title, description=args.description, workspace_id=args.workspace
    )
    success(f"Created board {board.title}: {board.id}")
    return 0


async def cmd_add_column(app: Kanri, args: argparse.Namespace) -> int:
    column = await app.column_service.create_column(
        args.board_id, args.title, position=args.position
    )
    success(f"Added column {column.title} at {column.position}: {column.id}")
    return 0


async def cmd_add_card(app: Kanri, args: argparse.Namespace) -> int:
    card = await app.card_service.create_card(
        args.board_id,
        args.column_id,
        args.title,
        position=args.position,
        priority=args.priority,
    )
    success(f"Added card {card.title} at {card.position}: {card.id}")
    return 0


async def cmd_move_column(app: Kanri, args: argparse.Namespace) -> int:
    column = await app.column_service.move_column(args.board_id, args.column_id, args.index)
    success(f"Moved column {column.title} to {column.position}")
    return 0


async def cmd_move_card(app: Kanri, args: argparse.Namespace) -> int:
    card = await app.card_service.move_card(
        args.board_id, args.card_id, args.from_column, args.to_column, args.index
    )
    success(f"Moved card {card.title} to {card.position} in {card.column_id}")
    return 0


COMMANDS: dict[str, Command] = {
    "init": cmd_init,
    "boards": cmd_boards,
    "workspaces": cmd_workspaces,
    "create-workspace": cmd_create_workspace,
    "show": cmd_show,
    "create-board": cmd_create_board,
    "add-column": cmd_add_column,
    "add-card": cmd_add_card,
    "move-column": cmd_move_column,
    "move-card": cmd_move_card,
}


async def _run(settings: Settings, args: argparse.Namespace) -> int:
    async with Kanri(settings) as app:
        return await COMMANDS[args.command](app, args)


def run_command(settings: Settings, args: argparse.Namespace) -> int:
    """
    Run one subcommand against the configured database.

    Returns:
        Exit code (0 = success, 1 = command failed)
    """
    try:
        return asyncio.run(_run(settings, args))
    except KanriError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        error(str(exc))
        return 1
