"""Configuration management for lazyskills."""

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from lazyskills.bridge.flag import parse_flag_value

DEFAULT_BRIDGE_COMMAND = "../lazy-mcp/run-lazy-mcp.sh"


def _substitute_env_vars(value: Any) -> Any:
    """Recursively substitute environment variables in config values.

    Supports ${VAR_NAME} and ${VAR_NAME:-default} syntax.
    """
    if isinstance(value, str):
        pattern = r'\$\{([^}:]+)(?::-([^}]*))?\}'

        def replacer(match: re.Match) -> str:
            var_name = match.group(1)
            default = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default)

        return re.sub(pattern, replacer, value)
    elif isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_substitute_env_vars(v) for v in value]
    return value


class Settings(BaseSettings):
    """Main lazyskills configuration.

    Every field can be set from the environment under its upper-cased name
    (``SKILLS_DIR``, ``CACHE_DURATION``, ...). Durations are milliseconds
    except the bridge call timeout, which is seconds.
    """

    model_config = SettingsConfigDict(case_sensitive=False, extra="ignore")

    skills_dir: Path = Field(default_factory=lambda: Path.home() / ".skills")
    cache_duration: int = 5000

    lazy_bridge_enabled: bool | None = None  # None = auto-detect
    lazy_bridge_command: str = DEFAULT_BRIDGE_COMMAND
    lazy_bridge_args: list[str] = Field(default_factory=list)
    lazy_bridge_cache_duration: int = 300000
    lazy_bridge_call_timeout: float | None = None

    log_level: str = "INFO"
    log_format: str = "text"

    @field_validator("skills_dir")
    @classmethod
    def _expand_home(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("lazy_bridge_enabled", mode="before")
    @classmethod
    def _parse_enabled(cls, value: Any) -> Any:
        # same reading as the live LAZY_BRIDGE_ENABLED check
        if isinstance(value, str):
            return parse_flag_value(value) if value.strip() else None
        return value

    @field_validator("cache_duration", "lazy_bridge_cache_duration")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("cache durations must be >= 0 milliseconds")
        return value

    @field_validator("lazy_bridge_call_timeout")
    @classmethod
    def _positive_timeout(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("lazy_bridge_call_timeout must be > 0 seconds")
        return value

    @field_validator("log_format")
    @classmethod
    def _known_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return value


def load_config(config_path: str | Path = "config.yaml") -> Settings:
    """Load configuration from YAML file with environment variable substitution.

    Values in the file take precedence over the environment; anything the
    file leaves out falls back to environment variables and then defaults.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Loaded and validated Settings object.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        return Settings()

    with open(config_path) as f:
        raw_config = yaml.safe_load(f)

    if raw_config is None:
        return Settings()

    if not isinstance(raw_config, dict):
        raise ValueError(f"{config_path} must contain a YAML mapping")

    config_data = _substitute_env_vars(raw_config)

    # An unresolved ${VAR} substitutes to "", which should mean "not set"
    config_data = {k: v for k, v in config_data.items() if v != ""}

    return Settings(**config_data)


def generate_default_config() -> str:
    """Return the default configuration file contents."""
    return """\
# lazyskills configuration
# Environment variables can be substituted with ${VAR_NAME} or ${VAR_NAME:-default}

# Directory holding one folder per skill, each with a SKILL.md
skills_dir: "${SKILLS_DIR:-~/.skills}"

# Skill cache lifetime in milliseconds (0 = re-read on every request)
cache_duration: 5000

# lazy-mcp bridge
# lazy_bridge_enabled: true    # leave unset to enable when the command exists;
#                              # LAZY_BRIDGE_ENABLED in the environment always wins
lazy_bridge_command: "${LAZY_BRIDGE_COMMAND:-../lazy-mcp/run-lazy-mcp.sh}"
lazy_bridge_args: []
lazy_bridge_cache_duration: 300000
# lazy_bridge_call_timeout: 60  # seconds; unset = wait forever

log_level: "INFO"
log_format: "text"   # or "json"
"""
