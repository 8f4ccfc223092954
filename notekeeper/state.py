"""Application state: mode, view, selections and the loaded notes/tasks."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from pathlib import Path

from .models import Note, Priority, Task
from .selection import clamp_index


class Mode(str, Enum):
    """How keys are interpreted. Exactly one is active."""

    NORMAL = "normal"
    INSERT = "insert"
    COMMAND = "command"
    TITLE_INPUT = "title_input"
    TAG_INPUT = "tag_input"
    CONFIRM_DELETION = "confirm_deletion"
    CONFIRM_QUIT = "confirm_quit"


class View(str, Enum):
    """The active screen."""

    NOTE_LIST = "note_list"
    NOTE_EDITOR = "note_editor"
    CALENDAR = "calendar"
    TASKS = "tasks"
    SEARCH = "search"
    HELP = "help"


class Focus(str, Enum):
    """Which pane of the note list view receives j/k/Enter."""

    NOTE_LIST = "note_list"
    TAG_LIST = "tag_list"


WELCOME_MESSAGE = "Welcome to notekeeper! Press 'q' to quit."


@dataclass
class AppState:
    """The single mutable state owned by the control loop."""

    notes: list[Note] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)
    mode: Mode = Mode.NORMAL
    current_view: View = View.NOTE_LIST
    previous_view: View | None = None  # one slot, overwritten on each push
    focus: Focus = Focus.NOTE_LIST

    selected_note: int | None = None
    selected_tag: int | None = None
    selected_task: int | None = None
    cursor_offset: int = 0

    command_input: str = ""
    status_message: str = ""
    search_query: str = ""
    search_results: list[int] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    active_tag: str | None = None

    dirty: bool = False
    running: bool = True
    calendar_year: int = field(default_factory=lambda: date.today().year)
    calendar_month: int = field(default_factory=lambda: date.today().month)
    next_task_id: int = 1

    def __post_init__(self) -> None:
        self.next_task_id = max([self.next_task_id] + [task.id + 1 for task in self.tasks])
        if self.selected_note is None and self.notes:
            self.selected_note = 0
        refresh_tags(self)

    @property
    def current_note(self) -> Note | None:
        if self.selected_note is None or not 0 <= self.selected_note < len(self.notes):
            return None
        return self.notes[self.selected_note]

    @property
    def current_task(self) -> Task | None:
        if self.selected_task is None or not 0 <= self.selected_task < len(self.tasks):
            return None
        return self.tasks[self.selected_task]

    def allocate_task_id(self) -> int:
        task_id = self.next_task_id
        self.next_task_id += 1
        return task_id


def refresh_tags(state: AppState) -> None:
    """Rebuild the sorted, deduplicated tag list from all notes."""
    state.tags = sorted({tag for note in state.notes for tag in note.tags})
    state.selected_tag = clamp_index(state.selected_tag, len(state.tags))
    if state.active_tag is not None and state.active_tag not in state.tags:
        state.active_tag = None


def update_search_results(state: AppState) -> None:
    """Recompute indices of notes matching the query (case-insensitive).

    A note matches when the query occurs in its title, body or any tag.
    """
    query = state.search_query.lower()
    if not query:
        state.search_results = []
        return
    state.search_results = [
        i
        for i, note in enumerate(state.notes)
        if query in note.title.lower()
        or query in note.content.lower()
        or any(query in tag.lower() for tag in note.tags)
    ]


def visible_note_indices(state: AppState) -> list[int]:
    """Indices of the notes shown in the note list (active tag filter applied)."""
    if state.active_tag is None:
        return list(range(len(state.notes)))
    return [i for i, note in enumerate(state.notes) if state.active_tag in note.tags]


def days_with_notes(notes: list[Note], year: int, month: int) -> set[int]:
    """Days of ``year``/``month`` having a note named after an ISO date."""
    days = set()
    for note in notes:
        try:
            day = date.fromisoformat(note.path.stem)
        except ValueError:
            continue
        if day.year == year and day.month == month:
            days.add(day.day)
    return days


def sample_state(notes_dir: Path | None = None, today: date | None = None) -> AppState:
    """Initial state with built-in sample data."""
    base = notes_dir or Path(".")
    today = today or date.today()
    notes = [
        Note(
            path=base / "sample-note.md",
            title="Sample Note",
            content="This is the content of the sample note.",
            tags=["sample", "notes"],
        ),
        Note(
            path=base / f"{today.isoformat()}.md",
            title="Daily Note for today",
            content="This is a sample daily note for today.",
            tags=["daily"],
        ),
    ]
    tasks = [
        Task(
            id=1,
            description="Write the first real note",
            project="notekeeper",
            priority=Priority.HIGH,
        ),
        Task(
            id=2,
            description="Add sample data",
            project="notekeeper",
            priority=Priority.MEDIUM,
            completed=True,
        ),
    ]
    return AppState(
        notes=notes,
        tasks=tasks,
        status_message=WELCOME_MESSAGE,
        calendar_year=today.year,
        calendar_month=today.month,
    )


def month_title(year: int, month: int) -> str:
    return datetime(year, month, 1).strftime("%B %Y")
