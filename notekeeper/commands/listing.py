"""Listing commands - print stored notes and tasks without the terminal UI."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..storage import NoteStore


def run_notes(store: NoteStore, *, tag: str | None = None) -> int:
    """Print notes as a table. Returns the exit code."""
    console = Console()

    try:
        notes = store.load_notes()
    except OSError as e:
        console.print(f"[red]Error loading notes: {e}[/red]", highlight=False)
        return 1

    if tag is not None:
        notes = [note for note in notes if tag in note.tags]

    if not notes:
        console.print("[dim]No notes found.[/dim]")
        return 0

    table = Table(title=f"Notes tagged '{escape(tag)}'" if tag else "Notes")
    table.add_column("Title", style="cyan")
    table.add_column("Tags")
    table.add_column("Updated", style="dim")
    table.add_column("Path", style="dim")

    for note in notes:
        try:
            path = str(note.path.relative_to(store.notes_dir))
        except ValueError:
            path = str(note.path)
        table.add_row(
            escape(note.title),
            escape(", ".join(note.tags)),
            note.updated_at.astimezone().strftime("%Y-%m-%d %H:%M"),
            path,
        )

    console.print(table)
    return 0


def run_tasks(store: NoteStore, *, include_completed: bool = False) -> int:
    """Print tasks as a table. Returns the exit code."""
    console = Console()

    try:
        tasks = store.load_tasks()
    except (OSError, ValueError) as e:
        console.print(f"[red]Error loading tasks: {e}[/red]", highlight=False)
        return 1

    if not include_completed:
        tasks = [task for task in tasks if not task.completed]

    if not tasks:
        console.print("[dim]No tasks found.[/dim]")
        return 0

    table = Table(title="Tasks")
    table.add_column("ID", justify="right")
    table.add_column("Done")
    table.add_column("Priority")
    table.add_column("Description", style="cyan")
    table.add_column("Project")
    table.add_column("Due")

    priority_style = {"High": "red", "Medium": "yellow", "Low": "green"}
    for task in sorted(tasks, key=lambda t: (t.completed, -t.priority.rank, t.id)):
        table.add_row(
            str(task.id),
            "x" if task.completed else "",
            f"[{priority_style[task.priority.value]}]{task.priority.value}[/]",
            escape(task.description),
            escape(task.project or ""),
            task.due_date.isoformat() if task.due_date else "",
        )

    console.print(table)
    return 0
