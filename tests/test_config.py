from __future__ import annotations

import logging
from pathlib import Path

import pytest

from streamhealth.config import AnalyzerSettings, configure_logging, load_settings
from streamhealth.errors import ConfigError


def test_default_settings() -> None:
    settings = AnalyzerSettings()

    assert settings.warmup_seconds == 30
    assert settings.dedup_seconds == 5
    assert settings.good_score == 90.0
    assert settings.marginal_score == 25.0
    assert settings.low_bitrate_limit == 500_000
    assert settings.mid_bitrate_limit == 1_100_000


def test_environment_overrides_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STREAMHEALTH_WARMUP_SECONDS", "10")

    assert load_settings().warmup_seconds == 10


def test_yaml_profile_overrides_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STREAMHEALTH_WARMUP_SECONDS", "10")
    profile = tmp_path / "profile.yaml"
    profile.write_text("warmup_seconds: 45\ngood_score: 95\n", encoding="utf-8")

    settings = load_settings(profile)

    assert settings.warmup_seconds == 45
    assert settings.good_score == 95.0
    assert settings.dedup_seconds == 5


def test_empty_yaml_profile_uses_defaults(tmp_path: Path) -> None:
    profile = tmp_path / "empty.yaml"
    profile.write_text("", encoding="utf-8")

    assert load_settings(profile).to_dict() == AnalyzerSettings().to_dict()


def test_non_mapping_profile_is_rejected(tmp_path: Path) -> None:
    profile = tmp_path / "list.yaml"
    profile.write_text("- 1\n- 2\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_settings(profile)


def test_invalid_profile_value_is_rejected(tmp_path: Path) -> None:
    profile = tmp_path / "bad.yaml"
    profile.write_text("warmup_seconds: -1\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_settings(profile)


def test_missing_profile_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_settings(tmp_path / "missing.yaml")


def test_configure_logging_sets_root_level() -> None:
    root = logging.getLogger()
    previous = root.level
    try:
        configure_logging("debug")
        assert root.level == logging.DEBUG
    finally:
        root.setLevel(previous)


def test_configure_logging_rejects_unknown_level() -> None:
    with pytest.raises(ConfigError):
        configure_logging("LOUD")
