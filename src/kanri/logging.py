"""Logging configuration for kanri."""

import logging
import sys
from datetime import UTC, datetime
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# aiosqlite logs every proxied call at DEBUG.
_NOISY_LOGGERS = ("aiosqlite",)


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.set_name("kanri")
    return handler


def setup_logging(
    verbose: int = 0,
    log_file: Path | None = None,
    db_path: Path | None = None,
) -> logging.Logger:
    """Attach handlers to the ``kanri`` logger.

    Args:
        verbose: 0 logs nothing to stderr, 1 logs INFO, 2 or more logs DEBUG
        log_file: Optional file that receives the same records
        db_path: Database named in the startup banner

    Calling this again replaces the handlers added by the previous call.
    """
    logger = logging.getLogger("kanri")
    for existing in [h for h in logger.handlers if h.get_name() == "kanri"]:
        logger.removeHandler(existing)
        existing.close()

    if verbose == 0 and log_file is None:
        return logger

    level = logging.DEBUG if verbose >= 2 else logging.INFO
    logger.setLevel(level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if verbose > 0:
        logger.addHandler(_handler(logging.StreamHandler(sys.stderr), level))
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.addHandler(_handler(logging.FileHandler(log_file), level))

    started = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S UTC")
    logger.info("-" * 60)
    logger.info(
        "kanri starting | %s | level=%s | db=%s",
        started,
        logging.getLevelName(level),
        db_path or "-",
    )
    return logger
