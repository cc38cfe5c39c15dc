"""Tests for the command line interface."""

import asyncio
from pathlib import Path

import pytest
import yaml

from kanri.__main__ import main, parse_args
from kanri.app import Kanri
from kanri.cli.commands import generate_config_yaml
from kanri.cli.output import card_line, column_line, error, info, success
from kanri.config import Settings
from kanri.models import Card, Column


def run(argv: list[str]) -> int:
    """Run main() and return its exit code."""
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


async def _seed(db_path: Path) -> tuple[str, str, str, str]:
    async with Kanri(Settings(db_path=db_path)) as app:
        board = await app.board_service.create_board("Roadmap")
        todo = await app.column_service.create_column(board.id, "Todo")
        done = await app.column_service.create_column(board.id, "Done")
        card = await app.card_service.create_card(board.id, todo.id, "Ship it")
        return board.id, todo.id, done.id, card.id


class TestParseArgs:
    """Tests for argument parsing."""

    def test_move_card_arguments(self):
        args = parse_args(["move-card", "b", "c", "from", "to", "-1"])

        assert args.command == "move-card"
        assert args.index == -1
        assert args.to_column == "to"

    def test_command_required(self):
        with pytest.raises(SystemExit):
            parse_args([])


class TestCommands:
    """End-to-end runs against a temporary database."""

    def test_init_writes_config(self, tmp_path: Path, capsys):
        db_path = tmp_path / "kanri.db"
        config = tmp_path / "conf" / "kanri.yml"

        assert run(["--db", str(db_path), "--config", str(config), "init"]) == 0

        assert db_path.exists()
        data = yaml.safe_load(config.read_text())
        assert data["db_path"] == str(db_path)
        assert "Generated config" in capsys.readouterr().out

    def test_create_and_list_boards(self, tmp_path: Path, capsys):
        db_path = str(tmp_path / "kanri.db")

        assert run(["--db", db_path, "create-board", "Roadmap"]) == 0
        assert run(["--db", db_path, "boards"]) == 0

        assert "Roadmap" in capsys.readouterr().out

    def test_workspaces(self, tmp_path: Path, capsys):
        """Boards can be created in and listed by workspace."""
        db_path = str(tmp_path / "kanri.db")

        assert run(["--db", db_path, "create-workspace", "Work", "--color", "#112233"]) == 0
        assert run(["--db", db_path, "workspaces"]) == 0
        out = capsys.readouterr().out
        assert "Default Workspace (default)" in out
        workspace_id = out.split("Created workspace Work: ")[1].split()[0]

        assert run(["--db", db_path, "create-board", "Sprint", "--workspace", workspace_id]) == 0
        assert run(["--db", db_path, "create-board", "Home"]) == 0
        capsys.readouterr()
        assert run(["--db", db_path, "boards", "--workspace", workspace_id]) == 0

        out = capsys.readouterr().out
        assert "Sprint" in out
        assert "Home" not in out

    def test_create_board_in_missing_workspace_exits_1(self, tmp_path: Path, capsys):
        code = run(["--db", str(tmp_path / "kanri.db"), "create-board", "X", "--workspace", "nope"])

        assert code == 1
        assert "Workspace not found" in capsys.readouterr().err

    def test_show_and_move(self, tmp_path: Path, capsys):
        db_path = tmp_path / "kanri.db"
        board_id, todo_id, done_id, card_id = asyncio.run(_seed(db_path))

        assert run(["--db", str(db_path), "move-card", board_id, card_id, todo_id, done_id, "0"]) == 0
        assert run(["--db", str(db_path), "show", board_id]) == 0

        out = capsys.readouterr().out
        assert "Moved card Ship it to 0" in out
        assert out.index("Done") < out.index("Ship it", out.index("Done"))

    def test_domain_error_exits_1(self, tmp_path: Path, capsys):
        """Command failures print the error and exit 1."""
        code = run(["--db", str(tmp_path / "kanri.db"), "show", "missing"])

        assert code == 1
        assert "Board not found" in capsys.readouterr().err

    def test_bad_config_exits_1(self, tmp_path: Path, capsys):
        config = tmp_path / "kanri.yml"
        config.write_text("- not a mapping\n")

        assert run(["--config", str(config), "boards"]) == 1
        assert "must contain a mapping" in capsys.readouterr().err


class TestGenerateConfigYaml:
    """Tests for the generated config file."""

    def test_round_trips_through_settings(self, tmp_path: Path):
        settings = Settings(db_path=tmp_path / "x.db", pool_size=2)
        config = tmp_path / "kanri.yml"
        config.write_text(generate_config_yaml(settings))

        loaded = Settings.from_file(config)

        assert loaded.db_path == tmp_path / "x.db"
        assert loaded.pool_size == 2

    def test_includes_header(self):
        assert generate_config_yaml(Settings()).startswith("# kanri configuration")


class TestOutputHelpers:
    """Tests for CLI output helpers."""

    def test_success(self, capsys):
        success("Test message")
        assert "Test message" in capsys.readouterr().out

    def test_info(self, capsys):
        info("Info message")
        assert "Info message" in capsys.readouterr().out

    def test_error_goes_to_stderr(self, capsys):
        error("Error message")
        captured = capsys.readouterr()

        assert "Error message" in captured.err
        assert captured.out == ""

    def test_column_line_shows_wip_limit(self):
        column = Column(
            id="col",
            board_id="b",
            title="Doing",
            position=1,
            wip_limit=2,
            is_enabled=False,
            created_at="t",
            updated_at="t",
        )

        line = column_line(column, 3)

        assert line == "[1] Doing (disabled) (3/2)  col"

    def test_card_line(self):
        card = Card(
            id="c1",
            board_id="b",
            column_id="col",
            title="Ship it",
            position=0,
            priority="high",
            due_date="2026-01-01",
            created_at="t",
            updated_at="t",
        )

        assert card_line(card) == "0. Ship it [high] due 2026-01-01  c1"
