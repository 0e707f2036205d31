"""
Configuration loading and path resolution.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigError

ENV_HISTORY_FILE = "FUZZYD_HISTORY_FILE"
APP_DIR_NAME = "fuzzyd"
CONFIG_FILE_NAME = "config.toml"
HISTORY_FILE_NAME = "fuzzyd.history"

DEFAULT_CONFIG_TOML = """\
debug = false

[ui]
prompt = "#"
highlight_color = "green"
limit = 10

[history]
enabled = true
file = "~/.local/share/fuzzyd/fuzzyd.history"

[systemd_run]
parameters = [
    "--quiet",
    "--user",
    "--property=EnvironmentFile=-$HOME/.config/sway/env",
    "--slice",
    "app.slice"
]
"""


class UIConfig(BaseModel):
    """Presentation settings for the interactive prompt."""

    prompt: str = Field(default="#", description="Prompt shown before the query")
    highlight_color: str = Field(default="green", description="Rich style for the selected row")
    limit: int = Field(default=10, ge=1, description="Number of ranked rows to show")


class HistoryConfig(BaseModel):
    """Usage history settings."""

    enabled: bool = Field(default=True, description="Whether launches are counted")
    file: str | None = Field(default=None, description="History file location")


class SystemdRunConfig(BaseModel):
    """Extra arguments passed to systemd-run."""

    parameters: list[str] = Field(default_factory=list)


class Config(BaseModel):
    """Top-level fuzzyd configuration."""

    debug: bool = False
    ui: UIConfig = Field(default_factory=UIConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    systemd_run: SystemdRunConfig = Field(default_factory=SystemdRunConfig)


def _xdg_dir(env_name: str, fallback: str) -> Path:
    raw = os.getenv(env_name)
    if raw:
        return Path(raw).expanduser()
    return Path.home() / fallback


def default_config_path() -> Path:
    return _xdg_dir("XDG_CONFIG_HOME", ".config") / APP_DIR_NAME / CONFIG_FILE_NAME


def default_history_path() -> Path:
    return _xdg_dir("XDG_DATA_HOME", ".local/share") / APP_DIR_NAME / HISTORY_FILE_NAME


def load_config(path: str | os.PathLike[str] | None = None) -> Config:
    """
    Load configuration from ``path`` or the default location.

    A missing default file yields the built-in defaults; a missing explicit
    file is an error.
    """
    config_path = Path(path).expanduser() if path is not None else default_config_path()
    if not config_path.exists():
        if path is not None:
            raise ConfigError(f"Config file not found: {config_path}")
        return Config()

    try:
        with open(config_path, "rb") as handle:
            raw = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Could not read config file {config_path}: {exc}") from exc

    try:
        return Config.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config file {config_path}:\n{exc}") from exc


def resolve_history_path(
    override_path: str | os.PathLike[str] | None,
    config: Config,
    *,
    disabled: bool = False,
) -> Path | None:
    """
    Resolve the history file, or None when history is turned off.

    Precedence:
    1) ``disabled`` or ``history.enabled = false`` disables history
    2) explicit override_path
    3) FUZZYD_HISTORY_FILE
    4) ``history.file`` from the config
    5) default data directory path
    """
    if disabled or not config.history.enabled:
        return None
    raw_path = override_path or os.getenv(ENV_HISTORY_FILE) or config.history.file
    return Path(raw_path).expanduser() if raw_path else default_history_path()


def write_default_config(path: str | os.PathLike[str] | None = None) -> Path:
    """Write the default configuration file and return its location."""
    config_path = Path(path).expanduser() if path is not None else default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(DEFAULT_CONFIG_TOML, encoding="utf-8")
    return config_path
