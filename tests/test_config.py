"""Tests for the configuration root and config.toml."""

import logging
from pathlib import Path

import pytest

from notekeeper.config import ROOT_ENV_VAR, ConfigError, Settings, load_settings, resolve_root


def test_explicit_root_wins(tmp_path: Path, monkeypatch):
    monkeypatch.setenv(ROOT_ENV_VAR, str(tmp_path / "env"))
    assert resolve_root(tmp_path / "explicit") == tmp_path / "explicit"


def test_environment_root(tmp_path: Path, monkeypatch):
    monkeypatch.setenv(ROOT_ENV_VAR, str(tmp_path / "env"))
    assert resolve_root() == tmp_path / "env"


def test_default_root_under_home(tmp_path: Path, monkeypatch):
    monkeypatch.delenv(ROOT_ENV_VAR, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    assert resolve_root() == tmp_path / ".config" / "notekeeper"


def test_root_that_is_a_file(tmp_path: Path):
    target = tmp_path / "file"
    target.write_text("", encoding="utf-8")
    with pytest.raises(ConfigError, match="not a directory"):
        resolve_root(target)


def test_defaults_without_config_file(tmp_path: Path):
    settings = load_settings(tmp_path)
    assert settings == Settings(root=tmp_path)
    assert settings.notes_path == tmp_path / "notes"
    assert settings.tasks_path == tmp_path / "tasks.json"
    assert settings.log_level_value == logging.WARNING


def test_config_file_values(tmp_path: Path):
    (tmp_path / "config.toml").write_text(
        """
[storage]
notes_dir = "vault"
tasks_file = "todo.json"

[ui]
poll_interval_ms = 200

[logging]
level = "debug"
file = "debug.log"
""",
        encoding="utf-8",
    )
    settings = load_settings(tmp_path)
    assert settings.notes_path == tmp_path / "vault"
    assert settings.tasks_path == tmp_path / "todo.json"
    assert settings.poll_interval_ms == 200
    assert settings.log_level == "DEBUG"
    assert settings.log_path == tmp_path / "debug.log"


def test_bad_values_fall_back_to_defaults(tmp_path: Path):
    (tmp_path / "config.toml").write_text(
        """
storage = "not a table"

[ui]
poll_interval_ms = -5

[logging]
level = "LOUD"
file = 3
""",
        encoding="utf-8",
    )
    assert load_settings(tmp_path) == Settings(root=tmp_path)


def test_invalid_toml(tmp_path: Path):
    (tmp_path / "config.toml").write_text("[storage\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_settings(tmp_path)
