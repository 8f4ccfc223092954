"""Tests for the command line interface."""

from pathlib import Path

from click.testing import CliRunner

from notekeeper import __version__
from notekeeper.cli import cli
from notekeeper.storage import NoteStore


def invoke(*args: str):
    return CliRunner().invoke(cli, list(args), obj={})


def test_version():
    result = invoke("--version")
    assert result.exit_code == 0
    assert __version__ in result.output


def test_notes_listing(tmp_path: Path, notes):
    result = invoke("--root", str(tmp_path), "notes")
    assert result.exit_code == 0
    assert "Alpha" in result.output
    assert "Beta" in result.output
    assert "Gamma" in result.output


def test_notes_listing_by_tag(tmp_path: Path, notes):
    result = invoke("--root", str(tmp_path), "notes", "--tag", "ideas")
    assert result.exit_code == 0
    assert "Gamma" in result.output
    assert "Alpha" not in result.output


def test_empty_listings(tmp_path: Path):
    assert "No notes found." in invoke("--root", str(tmp_path), "notes").output
    assert "No tasks found." in invoke("--root", str(tmp_path), "tasks").output
    assert (tmp_path / "notes" / "daily-notes").is_dir()


def test_tasks_listing(tmp_path: Path, store: NoteStore, tasks):
    store.save_tasks(tasks)
    result = invoke("--root", str(tmp_path), "tasks")
    assert result.exit_code == 0
    assert "one" in result.output
    assert "three" not in result.output

    result = invoke("--root", str(tmp_path), "tasks", "--all")
    assert "three" in result.output


def test_corrupt_tasks_exit_code(tmp_path: Path, store: NoteStore):
    store.tasks_file.write_text("[{]", encoding="utf-8")
    result = invoke("--root", str(tmp_path), "tasks")
    assert result.exit_code == 1
    assert "Error loading tasks" in result.output


def test_invalid_config_is_reported(tmp_path: Path):
    (tmp_path / "config.toml").write_text("not = [valid", encoding="utf-8")
    result = invoke("--root", str(tmp_path), "notes")
    assert result.exit_code != 0
    assert "config.toml" in result.output


def test_root_that_is_a_file(tmp_path: Path):
    target = tmp_path / "file"
    target.write_text("", encoding="utf-8")
    result = invoke("--root", str(target), "notes")
    assert result.exit_code != 0
