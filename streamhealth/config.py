# File: streamhealth/config.py
"""Centralized configuration helpers for the stream health analyzer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.logging import RichHandler

from streamhealth.errors import ConfigError

LOG_FORMAT = "%(name)s: %(message)s"


class AnalyzerSettings(BaseSettings):
    """Tunable windows and thresholds used while scoring a session."""

    warmup_seconds: int = Field(default=30, ge=0, description="Seconds after APP.STARTUP excluded from scoring")
    dedup_seconds: int = Field(default=5, ge=0, description="Minimum spacing between kept records of a category")
    good_score: float = 90.0
    marginal_score: float = 25.0
    low_bitrate_limit: int = 500_000
    mid_bitrate_limit: int = 1_100_000
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="STREAMHEALTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the settings into a dictionary for logging and reports."""
        return self.model_dump()


def _read_profile(path: Path) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Unable to read scoring profile {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Scoring profile {path} must contain a mapping, got {type(data).__name__}.")
    return data


def load_settings(path: Optional[Path | str] = None) -> AnalyzerSettings:
    """
    Build analyzer settings from defaults, the environment and an optional YAML profile.

    Values in the profile take precedence over environment variables.
    """
    overrides: Dict[str, Any] = {}
    if path is not None:
        overrides = _read_profile(Path(path))
    try:
        return AnalyzerSettings(**overrides)
    except ValidationError as exc:
        raise ConfigError(f"Invalid scoring profile {path}: {exc}") from exc


def configure_logging(level: str | int = "WARNING") -> None:
    """Route log records to the console through rich. Only the CLI calls this."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ConfigError(f"Unknown log level: {level}")
        level = resolved

    root = logging.getLogger()
    root.setLevel(level)
    if not any(isinstance(handler, RichHandler) for handler in root.handlers):
        handler = RichHandler(show_path=False, rich_tracebacks=False)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
