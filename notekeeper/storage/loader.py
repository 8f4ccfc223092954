"""On-disk layout, note loading/saving and the task document."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path

from ..config import Settings
from ..models import Note, Task, utc_now
from .parser import parse_note_text, render_note_text

logger = logging.getLogger(__name__)

NOTE_SUFFIX = ".md"
DAILY_NOTES_DIR = "daily-notes"


def _file_times(path: Path) -> tuple[datetime, datetime]:
    stat = path.stat()
    created = getattr(stat, "st_birthtime", stat.st_ctime)
    return (
        datetime.fromtimestamp(created, tz=timezone.utc),
        datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
    )


def sanitize_title(title: str) -> str:
    """Keep alphanumerics and spaces, then turn spaces into underscores."""
    kept = "".join(c for c in title if c.isalnum() or c == " ")
    return kept.replace(" ", "_")


def load_note(path: Path) -> Note:
    """Load a single markdown file and parse its front matter."""
    text = path.read_bytes().decode("utf-8")
    title, tags, body = parse_note_text(text, path)
    created_at, updated_at = _file_times(path)
    return Note(
        path=path,
        title=title,
        content=body,
        tags=tags,
        created_at=created_at,
        updated_at=updated_at,
    )


def save_note(note: Note) -> None:
    """Write a note in place at its path."""
    note.path.parent.mkdir(parents=True, exist_ok=True)
    note.path.write_bytes(render_note_text(note.title, note.tags, note.content).encode("utf-8"))
    note.updated_at = utc_now()


@dataclass
class NoteStore:
    """Storage layout under the configuration root."""

    notes_dir: Path
    tasks_file: Path

    @classmethod
    def from_settings(cls, settings: Settings) -> NoteStore:
        return cls(notes_dir=settings.notes_path, tasks_file=settings.tasks_path)

    @property
    def daily_notes_dir(self) -> Path:
        return self.notes_dir / DAILY_NOTES_DIR

    def ensure_layout(self) -> None:
        """Create the notes directories and an empty task file if absent."""
        self.daily_notes_dir.mkdir(parents=True, exist_ok=True)
        if not self.tasks_file.exists():
            self.tasks_file.parent.mkdir(parents=True, exist_ok=True)
            self.tasks_file.touch()

    def new_note_path(self, title: str, timestamp: int) -> Path:
        return self.notes_dir / f"{sanitize_title(title)}_{timestamp}{NOTE_SUFFIX}"

    def daily_note_path(self, day: date) -> Path:
        return self.daily_notes_dir / f"{day.isoformat()}{NOTE_SUFFIX}"

    def load_notes(self) -> list[Note]:
        """Load every markdown file under the notes directory.

        Files that cannot be read are skipped with a warning.

        Raises:
            OSError: If the notes directory itself is missing or unreadable
        """
        if not self.notes_dir.is_dir():
            raise FileNotFoundError(f"Notes directory not found: {self.notes_dir}")

        notes = []
        for md_file in sorted(self.notes_dir.rglob(f"*{NOTE_SUFFIX}")):
            rel_parts = md_file.relative_to(self.notes_dir).parts
            if any(part.startswith(".") for part in rel_parts):
                continue
            try:
                notes.append(load_note(md_file))
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Skipping unreadable note {md_file}: {e}")
        logger.info(f"Loaded {len(notes)} notes from {self.notes_dir}")
        return notes

    def save_notes(self, notes: list[Note]) -> None:
        """Write every note back to its file; stops at the first failure."""
        for note in notes:
            save_note(note)
        logger.info(f"Saved {len(notes)} notes")

    def delete_note(self, note: Note) -> None:
        """Remove a note's file; a note that was never saved has none."""
        note.path.unlink(missing_ok=True)
        logger.info(f"Deleted {note.path}")

    def load_tasks(self) -> list[Task]:
        """Load the task document. Missing or empty file -> no tasks.

        Raises:
            OSError: If the file exists but cannot be read
            ValueError: If the document is not a JSON array of task records
        """
        if not self.tasks_file.exists():
            return []
        text = self.tasks_file.read_text(encoding="utf-8")
        if not text.strip():
            return []
        data = json.loads(text)
        if not isinstance(data, list):
            raise ValueError(f"{self.tasks_file.name} must hold a JSON array")
        return [Task.from_dict(record) for record in data]

    def save_tasks(self, tasks: list[Task]) -> None:
        """Rewrite the whole task document."""
        self.tasks_file.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps([task.to_dict() for task in tasks], indent=2, ensure_ascii=False)
        self.tasks_file.write_text(payload + "\n", encoding="utf-8")
        logger.debug(f"Saved {len(tasks)} tasks to {self.tasks_file}")
