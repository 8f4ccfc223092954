"""Data models for notes and tasks."""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any


class Priority(str, Enum):
    """Task priority, ordered Low < Medium < High."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        return _PRIORITY_ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank >= other.rank

    def cycled(self) -> "Priority":
        """Next priority, wrapping High back to Low."""
        return _PRIORITY_ORDER[(self.rank + 1) % len(_PRIORITY_ORDER)]


_PRIORITY_ORDER = [Priority.LOW, Priority.MEDIUM, Priority.HIGH]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Note:
    """A markdown note; the path is its identity."""

    path: Path
    title: str
    content: str  # body after the front matter
    tags: list[str] = field(default_factory=list, compare=False)  # display order; compared as a set
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Note):
            return NotImplemented
        return (
            self.path == other.path
            and self.title == other.title
            and self.content == other.content
            and self.tag_set == other.tag_set
            and self.created_at == other.created_at
            and self.updated_at == other.updated_at
        )

    def add_tag(self, tag: str) -> bool:
        """Append a tag unless already present. Returns True if added."""
        if tag in self.tags:
            return False
        self.tags.append(tag)
        return True

    @property
    def tag_set(self) -> frozenset[str]:
        return frozenset(self.tags)


@dataclass
class Task:
    """A single to-do item."""

    id: int
    description: str
    project: str | None = None
    priority: Priority = Priority.MEDIUM
    due_date: date | None = None
    completed: bool = False
    created_at: datetime = field(default_factory=utc_now)
    sub_tasks: list["Task"] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "description": self.description,
            "project": self.project,
            "priority": self.priority.value,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "completed": self.completed,
            "created_at": self.created_at.isoformat(),
            "sub_tasks": [sub.to_dict() for sub in self.sub_tasks],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """Create from dictionary.

        Raises:
            ValueError: If a required field is missing or any field has the wrong shape
        """
        try:
            due_raw = data.get("due_date")
            created_raw = data.get("created_at")
            created_at = datetime.fromisoformat(created_raw) if created_raw else utc_now()
            if created_at.tzinfo is None:
                created_at = created_at.replace(tzinfo=timezone.utc)

            return cls(
                id=int(data["id"]),
                description=str(data["description"]),
                project=data.get("project"),
                priority=Priority(data.get("priority", Priority.MEDIUM.value)),
                due_date=date.fromisoformat(due_raw) if due_raw else None,
                completed=bool(data.get("completed", False)),
                created_at=created_at,
                sub_tasks=[cls.from_dict(sub) for sub in data.get("sub_tasks") or []],
            )
        except (AttributeError, KeyError, TypeError) as e:
            raise ValueError(f"Invalid task record: {e}") from e
