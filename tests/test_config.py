"""Tests for settings and YAML config loading."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from lazyskills.config import (
    DEFAULT_BRIDGE_COMMAND,
    Settings,
    _substitute_env_vars,
    generate_default_config,
    load_config,
)
from lazyskills.factory import create_bridge_flag

ENV_KEYS = [
    "SKILLS_DIR",
    "CACHE_DURATION",
    "LAZY_BRIDGE_ENABLED",
    "LAZY_BRIDGE_COMMAND",
    "LAZY_BRIDGE_ARGS",
    "LAZY_BRIDGE_CACHE_DURATION",
    "LAZY_BRIDGE_CALL_TIMEOUT",
    "LOG_LEVEL",
    "LOG_FORMAT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


class TestSettings:
    def test_defaults(self, tmp_path: Path):
        settings = load_config(tmp_path / "missing.yaml")

        assert settings.skills_dir == Path.home() / ".skills"
        assert settings.cache_duration == 5000
        assert settings.lazy_bridge_enabled is None
        assert settings.lazy_bridge_command == DEFAULT_BRIDGE_COMMAND
        assert settings.lazy_bridge_cache_duration == 300000
        assert settings.lazy_bridge_call_timeout is None

    def test_environment(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.setenv("SKILLS_DIR", str(tmp_path))
        monkeypatch.setenv("CACHE_DURATION", "0")
        monkeypatch.setenv("LAZY_BRIDGE_ENABLED", "false")
        monkeypatch.setenv("LAZY_BRIDGE_COMMAND", "/opt/lazy-mcp/run.sh")
        monkeypatch.setenv("LAZY_BRIDGE_CACHE_DURATION", "60000")

        settings = Settings()

        assert settings.skills_dir == tmp_path
        assert settings.cache_duration == 0
        assert settings.lazy_bridge_enabled is False
        assert settings.lazy_bridge_command == "/opt/lazy-mcp/run.sh"
        assert settings.lazy_bridge_cache_duration == 60000

    def test_negative_duration_rejected(self):
        with pytest.raises(ValidationError):
            Settings(cache_duration=-1)

    def test_bad_log_format_rejected(self):
        with pytest.raises(ValidationError):
            Settings(log_format="xml")

    def test_home_is_expanded(self):
        assert Settings(skills_dir="~/my-skills").skills_dir == Path.home() / "my-skills"


class TestLoadConfig:
    def test_yaml_with_substitution(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.setenv("MY_SKILLS", str(tmp_path / "s"))
        config = tmp_path / "config.yaml"
        config.write_text(
            "skills_dir: ${MY_SKILLS}\n"
            "cache_duration: 250\n"
            "lazy_bridge_command: ${UNSET_VAR:-/usr/local/bin/lazy-mcp}\n"
            "lazy_bridge_args: ['--config', 'hierarchy.json']\n"
            "lazy_bridge_call_timeout: 30\n"
        )

        settings = load_config(config)

        assert settings.skills_dir == tmp_path / "s"
        assert settings.cache_duration == 250
        assert settings.lazy_bridge_command == "/usr/local/bin/lazy-mcp"
        assert settings.lazy_bridge_args == ["--config", "hierarchy.json"]
        assert settings.lazy_bridge_call_timeout == 30

    def test_file_overrides_environment(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.setenv("CACHE_DURATION", "1")
        monkeypatch.setenv("LAZY_BRIDGE_CACHE_DURATION", "2")
        config = tmp_path / "config.yaml"
        config.write_text("cache_duration: 10\n")

        settings = load_config(config)

        assert settings.cache_duration == 10
        assert settings.lazy_bridge_cache_duration == 2

    def test_unresolved_variable_means_unset(self, tmp_path: Path):
        config = tmp_path / "config.yaml"
        config.write_text("lazy_bridge_command: ${NOT_SET_ANYWHERE}\n")

        assert load_config(config).lazy_bridge_command == DEFAULT_BRIDGE_COMMAND

    def test_empty_file(self, tmp_path: Path):
        config = tmp_path / "config.yaml"
        config.write_text("")
        assert load_config(config).cache_duration == 5000

    def test_non_mapping_file(self, tmp_path: Path):
        config = tmp_path / "config.yaml"
        config.write_text("- just\n- a list\n")
        with pytest.raises(ValueError, match="mapping"):
            load_config(config)

    def test_default_config_round_trips(self, tmp_path: Path):
        config = tmp_path / "config.yaml"
        config.write_text(generate_default_config())

        raw = yaml.safe_load(config.read_text())
        settings = load_config(config)

        assert "lazy_bridge_enabled" not in raw
        assert settings.skills_dir == Path.home() / ".skills"
        assert settings.lazy_bridge_command == DEFAULT_BRIDGE_COMMAND

    def test_substitute_nested(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("A", "1")
        assert _substitute_env_vars({"x": ["${A}", "${B:-2}"], "y": 3}) == {"x": ["1", "2"], "y": 3}


class TestBridgeFlagFromSettings:
    def test_override_from_settings(self, tmp_path: Path):
        flag = create_bridge_flag(Settings(lazy_bridge_enabled=True, lazy_bridge_command=str(tmp_path / "x")))
        assert flag() is True

    def test_environment_beats_settings(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        flag = create_bridge_flag(Settings(lazy_bridge_enabled=True, lazy_bridge_command=str(tmp_path / "x")))
        monkeypatch.setenv("LAZY_BRIDGE_ENABLED", "false")
        assert flag() is False

    @pytest.mark.parametrize("value, expected", [
        ("true", True),
        ("YES", True),
        ("on", True),
        ("false", False),
        ("maybe", False),
        ("enabled", False),
        ("", None),
    ])
    def test_any_environment_value_is_accepted(
        self, monkeypatch: pytest.MonkeyPatch, value: str, expected: bool | None
    ):
        monkeypatch.setenv("LAZY_BRIDGE_ENABLED", value)
        assert Settings().lazy_bridge_enabled is expected

    def test_unusual_value_disables_without_crashing(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        command = tmp_path / "run-lazy-mcp.sh"
        command.write_text("#!/bin/sh\n")
        monkeypatch.setenv("LAZY_BRIDGE_ENABLED", "enabled")

        flag = create_bridge_flag(Settings(lazy_bridge_command=str(command)))

        assert flag() is False
