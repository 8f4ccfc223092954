"""Configuration root lookup and ``config.toml`` loading."""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

ROOT_ENV_VAR = "NOTEKEEPER_HOME"
CONFIG_FILENAME = "config.toml"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ConfigError(Exception):
    """The configuration root or file cannot be used."""


@dataclass
class Settings:
    """Effective settings for one run."""

    root: Path
    notes_dir: str = "notes"
    tasks_file: str = "tasks.json"
    poll_interval_ms: int = 50
    log_level: str = "WARNING"
    log_file: str = "notekeeper.log"

    @property
    def notes_path(self) -> Path:
        return self.root / self.notes_dir

    @property
    def tasks_path(self) -> Path:
        return self.root / self.tasks_file

    @property
    def log_path(self) -> Path:
        return self.root / self.log_file

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)


def resolve_root(explicit: Path | None = None) -> Path:
    """Find the configuration root.

    Order: explicit path, ``$NOTEKEEPER_HOME``, ``~/.config/notekeeper``.

    Raises:
        ConfigError: If no home directory can be determined or the root is a file
    """
    if explicit is not None:
        root = explicit
    elif os.environ.get(ROOT_ENV_VAR):
        root = Path(os.environ[ROOT_ENV_VAR])
    else:
        try:
            home = Path.home()
        except RuntimeError as e:
            raise ConfigError(f"Could not find home directory: {e}") from e
        root = home / ".config" / "notekeeper"

    root = root.expanduser()
    if root.exists() and not root.is_dir():
        raise ConfigError(f"Configuration root '{root}' is not a directory.")
    return root


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _coerce_str(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def load_settings(root: Path) -> Settings:
    """
    Load settings from ``<root>/config.toml``.

    A missing file gives the defaults. Unknown keys are ignored and values of
    the wrong type fall back to their defaults.

    Raises:
        ConfigError: If the file exists but is not valid TOML
    """
    settings = Settings(root=root)
    path = root / CONFIG_FILENAME
    if not path.exists():
        return settings

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to read {path}: {e}") from e

    storage = _coerce_dict(data.get("storage"))
    settings.notes_dir = _coerce_str(storage.get("notes_dir"), settings.notes_dir)
    settings.tasks_file = _coerce_str(storage.get("tasks_file"), settings.tasks_file)

    ui = _coerce_dict(data.get("ui"))
    poll = ui.get("poll_interval_ms")
    if isinstance(poll, int) and not isinstance(poll, bool) and poll > 0:
        settings.poll_interval_ms = poll

    log = _coerce_dict(data.get("logging"))
    level = _coerce_str(log.get("level"), settings.log_level).upper()
    if level in _LOG_LEVELS:
        settings.log_level = level
    settings.log_file = _coerce_str(log.get("file"), settings.log_file)

    return settings
