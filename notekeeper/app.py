"""Startup and the single-threaded control loop."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import Settings
from .keymap import classify
from .messages import Key
from .reducer import update
from .state import WELCOME_MESSAGE, AppState, sample_state
from .storage import NoteStore

logger = logging.getLogger(__name__)


def load_initial_state(store: NoteStore) -> AppState:
    """Load notes and tasks, falling back to sample data for whatever fails.

    Each failing part (notes, tasks) keeps its sample data and is named in
    the status message.
    """
    state = sample_state(store.notes_dir)
    notes, tasks = state.notes, state.tasks
    errors = []

    try:
        notes = store.load_notes()
    except OSError as e:
        logger.error(f"Failed to load notes: {e}")
        errors.append(f"notes ({e})")

    try:
        tasks = store.load_tasks()
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load tasks: {e}")
        errors.append(f"tasks ({e})")

    state = AppState(
        notes=notes,
        tasks=tasks,
        calendar_year=state.calendar_year,
        calendar_month=state.calendar_month,
    )
    if errors:
        state.status_message = f"Error loading {', '.join(errors)}. Using sample data."
    else:
        state.status_message = WELCOME_MESSAGE
    return state


@dataclass
class App:
    """Owns the state and the store for one session."""

    state: AppState
    store: NoteStore
    settings: Settings

    @classmethod
    def open(cls, settings: Settings) -> App:
        store = NoteStore.from_settings(settings)
        store.ensure_layout()
        return cls(state=load_initial_state(store), store=store, settings=settings)

    def handle_key(self, key: Key) -> None:
        """Classify one key and apply the resulting message, if any."""
        message = classify(self.state, key)
        if message is not None:
            logger.debug(f"{key} -> {message.kind.value}")
            update(self.state, message, self.store)

    def run(self) -> None:
        """Take over the terminal until the state stops running."""
        from .tui import run_terminal

        run_terminal(self)
