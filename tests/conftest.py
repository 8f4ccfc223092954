"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from notekeeper.app import App
from notekeeper.config import Settings
from notekeeper.messages import Key, KeyCode
from notekeeper.models import Note, Priority, Task
from notekeeper.state import AppState
from notekeeper.storage import NoteStore


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Default settings rooted in a temporary directory."""
    return Settings(root=tmp_path)


@pytest.fixture
def store(settings: Settings) -> NoteStore:
    """Empty store with its directory layout created."""
    store = NoteStore.from_settings(settings)
    store.ensure_layout()
    return store


@pytest.fixture
def notes(store: NoteStore) -> list[Note]:
    """Three notes on disk: two tagged, one plain."""
    notes = [
        Note(path=store.notes_dir / "alpha.md", title="Alpha", content="first line\nsecond", tags=["work"]),
        Note(path=store.notes_dir / "beta.md", title="Beta", content="nothing tagged"),
        Note(path=store.notes_dir / "gamma.md", title="Gamma", content="ab\ncd", tags=["work", "ideas"]),
    ]
    store.save_notes(notes)
    return notes


@pytest.fixture
def tasks() -> list[Task]:
    return [
        Task(id=1, description="one", priority=Priority.LOW),
        Task(id=2, description="two"),
        Task(id=3, description="three", priority=Priority.HIGH, completed=True),
    ]


@pytest.fixture
def state(notes: list[Note], tasks: list[Task]) -> AppState:
    """State holding the fixture notes and tasks, first note selected."""
    return AppState(notes=notes, tasks=tasks)


@pytest.fixture
def app(state: AppState, store: NoteStore, settings: Settings) -> App:
    return App(state=state, store=store, settings=settings)


def press(app: App, *keys: str | KeyCode) -> None:
    """Feed keys to the app: single characters or KeyCode members."""
    for key in keys:
        if isinstance(key, KeyCode):
            app.handle_key(Key(key))
        else:
            app.handle_key(Key.of(key))


def type_text(app: App, text: str) -> None:
    press(app, *text)
