"""Application settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

from ..errors import ConfigError


def _default_db_path() -> Path:
    return Path.home() / ".local" / "share" / "kanri" / "kanri.db"


class Settings(BaseSettings):
    """Application settings."""

    db_path: Path = Field(
        default_factory=_default_db_path,
        description="Path to the SQLite database file",
    )

    pool_size: int = Field(
        default=5,
        ge=1,
        le=32,
        description="Maximum number of pooled database connections",
    )

    busy_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Seconds to wait for a database lock before failing",
    )

    verbose: int = Field(
        default=0,
        description="Verbosity level (0=off, 1=INFO, 2+=DEBUG)",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional path to write logs to file",
    )

    model_config = {
        "env_prefix": "KANRI_",
    }

    @classmethod
    def from_file(cls, config_file: Path | None, **overrides: Any) -> Settings:
        """Build settings from a YAML file, with explicit overrides on top.

        Environment variables still apply to keys the file and the
        overrides leave unset. A missing file is treated as empty.

        Raises:
            ConfigError: If the file is not valid YAML, not a mapping, or
                holds values that fail validation.
        """
        values: dict[str, Any] = {}
        if config_file is not None and config_file.exists():
            try:
                data = yaml.safe_load(config_file.read_text())
            except yaml.YAMLError as exc:
                raise ConfigError(f"Invalid YAML in {config_file}: {exc}") from exc
            if data is None:
                data = {}
            if not isinstance(data, dict):
                raise ConfigError(f"{config_file} must contain a mapping of settings")
            values.update(data)
        values.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigError(f"Invalid settings: {exc}") from exc
