"""Tests for logging setup."""

import logging
from pathlib import Path

import pytest

from kanri.logging import setup_logging


@pytest.fixture
def kanri_logger():
    """The kanri namespace logger, restored after the test."""
    logger = logging.getLogger("kanri")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    for handler in logger.handlers[len(handlers):]:
        handler.close()
    logger.handlers = handlers
    logger.setLevel(level)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_silent_by_default(self, kanri_logger):
        """verbose=0 without a file adds no handlers."""
        before = len(kanri_logger.handlers)

        setup_logging(0, None)

        assert len(kanri_logger.handlers) == before

    def test_debug_to_file(self, kanri_logger, tmp_path: Path):
        """-vv with a log file writes DEBUG records and the banner."""
        log_file = tmp_path / "logs" / "kanri.log"

        setup_logging(2, log_file)
        logging.getLogger("kanri.services.ordering").debug("Renumbered %s", "scope")
        for handler in kanri_logger.handlers:
            handler.flush()

        assert kanri_logger.level == logging.DEBUG
        content = log_file.read_text()
        assert "kanri starting" in content
        assert "level=DEBUG" in content
        assert "Renumbered scope" in content

    def test_file_only_uses_info(self, kanri_logger, tmp_path: Path):
        log_file = tmp_path / "kanri.log"

        setup_logging(0, log_file)

        assert kanri_logger.level == logging.INFO
        assert log_file.exists()

    def test_banner_names_database(self, kanri_logger, tmp_path: Path):
        log_file = tmp_path / "kanri.log"

        setup_logging(1, log_file, tmp_path / "board.db")
        for handler in kanri_logger.handlers:
            handler.flush()

        assert "board.db" in log_file.read_text()

    def test_repeat_call_replaces_handlers(self, kanri_logger, tmp_path: Path):
        """A second setup does not duplicate output."""
        before = len(kanri_logger.handlers)

        setup_logging(1, tmp_path / "a.log")
        setup_logging(1, tmp_path / "b.log")

        assert len(kanri_logger.handlers) == before + 2

    def test_quiets_aiosqlite(self, kanri_logger, tmp_path: Path):
        aiosqlite_logger = logging.getLogger("aiosqlite")
        level = aiosqlite_logger.level
        try:
            setup_logging(2, tmp_path / "kanri.log")
            assert aiosqlite_logger.level == logging.WARNING
        finally:
            aiosqlite_logger.setLevel(level)
