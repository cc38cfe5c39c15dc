"""Tests for Settings loading."""

from pathlib import Path

import pytest

from kanri.config import Settings
from kanri.errors import ConfigError


class TestSettings:
    """Tests for defaults, environment and config files."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("KANRI_DB_PATH", raising=False)
        settings = Settings()

        assert settings.db_path.name == "kanri.db"
        assert settings.pool_size == 5
        assert settings.busy_timeout == 5.0
        assert settings.verbose == 0

    def test_environment(self, monkeypatch, tmp_path: Path):
        """KANRI_* variables are read."""
        monkeypatch.setenv("KANRI_DB_PATH", str(tmp_path / "env.db"))
        monkeypatch.setenv("KANRI_POOL_SIZE", "2")

        settings = Settings()

        assert settings.db_path == tmp_path / "env.db"
        assert settings.pool_size == 2

    def test_from_file(self, tmp_path: Path):
        config = tmp_path / "kanri.yml"
        config.write_text("db_path: /tmp/file.db\npool_size: 3\n")

        settings = Settings.from_file(config)

        assert settings.db_path == Path("/tmp/file.db")
        assert settings.pool_size == 3

    def test_overrides_beat_file(self, tmp_path: Path):
        """Explicit values win over the file; None overrides are ignored."""
        config = tmp_path / "kanri.yml"
        config.write_text("db_path: /tmp/file.db\npool_size: 3\n")

        settings = Settings.from_file(config, db_path=tmp_path / "cli.db", pool_size=None)

        assert settings.db_path == tmp_path / "cli.db"
        assert settings.pool_size == 3

    def test_file_beats_environment(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("KANRI_POOL_SIZE", "2")
        config = tmp_path / "kanri.yml"
        config.write_text("pool_size: 4\n")

        assert Settings.from_file(config).pool_size == 4

    def test_missing_and_empty_files(self, tmp_path: Path):
        """Missing or empty files give the defaults."""
        empty = tmp_path / "empty.yml"
        empty.write_text("")

        assert Settings.from_file(tmp_path / "missing.yml").pool_size == 5
        assert Settings.from_file(empty).pool_size == 5
        assert Settings.from_file(None).pool_size == 5

    @pytest.mark.parametrize(
        "content",
        ["invalid: yaml: syntax:", "- just\n- a list\n", "pool_size: 0\n"],
    )
    def test_invalid_files(self, tmp_path: Path, content: str):
        """Bad YAML, non-mappings and out-of-range values raise ConfigError."""
        config = tmp_path / "kanri.yml"
        config.write_text(content)

        with pytest.raises(ConfigError):
            Settings.from_file(config)
