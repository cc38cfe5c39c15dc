"""CLI entry point for kanri."""

import argparse
from pathlib import Path

from . import __version__
from .config import Settings
from .errors import ConfigError
from .logging import setup_logging
from .models import DEFAULT_WORKSPACE_ID


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="kanri",
        description="Kanban boards, cards and notes in a local SQLite database",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Path to the SQLite database (default: ~/.local/share/kanri/kanri.db)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a YAML config file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (-v for INFO, -vv for DEBUG)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Path to write logs to file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    sub = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    sub.add_parser("init", help="Create the database (and the config file if --config is given)")
    boards = sub.add_parser("boards", help="List boards")
    boards.add_argument("--workspace", default=None, help="Only boards of this workspace")

    sub.add_parser("workspaces", help="List workspaces")

    create_workspace = sub.add_parser("create-workspace", help="Create a workspace")
    create_workspace.add_argument("name")
    create_workspace.add_argument("--color", default=None, help="Hex colour such as #6366F1")

    show = sub.add_parser("show", help="Print a board with its columns and cards")
    show.add_argument("board_id")

    create_board = sub.add_parser("create-board", help="Create a board")
    create_board.add_argument("title")
    create_board.add_argument("--description", default=None)
    create_board.add_argument("--workspace", default=DEFAULT_WORKSPACE_ID)

    add_column = sub.add_parser("add-column", help="Add a column to a board")
    add_column.add_argument("board_id")
    add_column.add_argument("title")
    add_column.add_argument("--position", type=int, default=None)

    add_card = sub.add_parser("add-card", help="Add a card to a column")
    add_card.add_argument("board_id")
    add_card.add_argument("column_id")
    add_card.add_argument("title")
    add_card.add_argument("--position", type=int, default=None)
    add_card.add_argument(
        "--priority", choices=("none", "low", "medium", "high"), default="medium"
    )

    move_column = sub.add_parser("move-column", help="Move a column to another index")
    move_column.add_argument("board_id")
    move_column.add_argument("column_id")
    move_column.add_argument("index", type=int)

    move_card = sub.add_parser("move-card", help="Move a card within or between columns")
    move_card.add_argument("board_id")
    move_card.add_argument("card_id")
    move_card.add_argument("from_column")
    move_card.add_argument("to_column")
    move_card.add_argument("index", type=int)

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    return build_parser().parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)

    from .cli.output import error

    try:
        settings = Settings.from_file(
            args.config,
            db_path=args.db,
            verbose=args.verbose or None,
            log_file=args.log_file,
        )
    except ConfigError as exc:
        error(str(exc))
        raise SystemExit(1) from exc

    # Setup logging based on verbosity
    setup_logging(settings.verbose, settings.log_file, settings.db_path)

    from .cli.commands import run_command

    raise SystemExit(run_command(settings, args))


if __name__ == "__main__":
    main()
