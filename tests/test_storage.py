"""Tests for note front matter, the note round trip and the task document."""

import json
from datetime import date, datetime, timezone
from pathlib import Path

import pytest

from notekeeper.models import Note, Priority, Task
from notekeeper.storage import (
    NoteStore,
    load_note,
    parse_note_text,
    render_note_text,
    sanitize_title,
    save_note,
    split_front_matter,
)


# -----------------------------------------------------------------------------
# Front matter
# -----------------------------------------------------------------------------


def test_split_front_matter():
    meta, body = split_front_matter("---\ntitle: Hello\ntags:\n  - a\n---\n\nBody text\n")
    assert meta == {"title": "Hello", "tags": ["a"]}
    assert body == "Body text\n"


def test_only_one_blank_line_is_trimmed():
    _, body = split_front_matter("---\ntitle: x\n---\n\n\nindented start")
    assert body == "\nindented start"


def test_body_directly_after_delimiter():
    _, body = split_front_matter("---\ntitle: x\n---\nno gap")
    assert body == "no gap"


def test_empty_front_matter_block():
    meta, body = split_front_matter("---\n---\n\nbody")
    assert meta == {}
    assert body == "body"


@pytest.mark.parametrize(
    "text",
    [
        "plain body without metadata",
        "---\ntitle: never closed\n",
        "---\ntitle: [unbalanced\n---\n\nbody",
        "---\n- just\n- a list\n---\n\nbody",
        "--- not a delimiter\ntitle: x\n---\n",
    ],
)
def test_malformed_front_matter_keeps_whole_file_as_body(text: str):
    meta, body = split_front_matter(text)
    assert meta is None
    assert body == text


def test_title_falls_back_to_file_stem():
    title, tags, body = parse_note_text("---\ntags: [a]\n---\n\nbody", Path("notes/my-note.md"))
    assert title == "my-note"
    assert tags == ["a"]
    assert body == "body"


def test_blank_title_falls_back_to_file_stem():
    title, _, _ = parse_note_text("---\ntitle: '   '\n---\n\n", Path("x/fallback.md"))
    assert title == "fallback"


def test_single_string_tag_is_accepted():
    _, tags, _ = parse_note_text("---\ntags: solo\n---\n\n", Path("a.md"))
    assert tags == ["solo"]


def test_render_layout():
    text = render_note_text("Title", ["a", "b"], "body")
    assert text == "---\ntitle: Title\ntags:\n- a\n- b\n---\n\nbody"


def test_render_without_tags_omits_block():
    assert render_note_text("Title", [], "") == "---\ntitle: Title\n---\n\n"


# -----------------------------------------------------------------------------
# Round trip through the file system
# -----------------------------------------------------------------------------


def _round_trip(path: Path, note: Note) -> Note:
    save_note(note)
    return load_note(path)


def test_round_trip_note_without_front_matter(tmp_path: Path):
    """A file with no metadata: title from the file name, no tags."""
    path = tmp_path / "loose.md"
    path.write_text("just text\n\nmore\n", encoding="utf-8")
    original = load_note(path)
    assert original.title == "loose"
    assert original.tags == []

    reloaded = _round_trip(path, original)
    assert reloaded.title == original.title
    assert reloaded.content == "just text\n\nmore\n"
    assert reloaded.tag_set == original.tag_set


def test_round_trip_note_with_tags_only(tmp_path: Path):
    path = tmp_path / "tagged.md"
    path.write_text("---\ntags:\n  - b\n  - a\n---\n\nbody", encoding="utf-8")
    original = load_note(path)

    reloaded = _round_trip(path, original)
    assert reloaded.title == "tagged"
    assert reloaded.content == "body"
    assert reloaded.tag_set == {"a", "b"}


@pytest.mark.parametrize(
    "title",
    ["Plain", "yes", "key: value", "  padded  ", "# hash", "Ünïcödé 日本", "123"],
)
def test_round_trip_note_with_title_and_tags(tmp_path: Path, title: str):
    path = tmp_path / "full.md"
    body = "\nLeading blank line\r\nwindows line\n\ntrailing newline\n"
    note = Note(path=path, title=title, content=body, tags=["x", "y: z", "true"])

    reloaded = _round_trip(path, note)
    assert reloaded.title == title
    assert reloaded.content == body
    assert reloaded.tag_set == note.tag_set


def test_save_overwrites_in_place(tmp_path: Path):
    path = tmp_path / "n.md"
    save_note(Note(path=path, title="One", content="first"))
    save_note(Note(path=path, title="Two", content="second"))
    note = load_note(path)
    assert (note.title, note.content) == ("Two", "second")


# -----------------------------------------------------------------------------
# Store
# -----------------------------------------------------------------------------


def test_ensure_layout_creates_directories(tmp_path: Path):
    store = NoteStore(notes_dir=tmp_path / "notes", tasks_file=tmp_path / "tasks.json")
    store.ensure_layout()
    assert store.daily_notes_dir.is_dir()
    assert store.tasks_file.exists()
    assert store.load_tasks() == []


def test_load_notes_scans_recursively_and_skips_hidden(store: NoteStore):
    (store.daily_notes_dir / "2024-05-01.md").write_text("daily", encoding="utf-8")
    (store.notes_dir / "top.md").write_text("top", encoding="utf-8")
    hidden = store.notes_dir / ".trash"
    hidden.mkdir()
    (hidden / "gone.md").write_text("x", encoding="utf-8")
    (store.notes_dir / "readme.txt").write_text("not a note", encoding="utf-8")

    titles = sorted(note.title for note in store.load_notes())
    assert titles == ["2024-05-01", "top"]


def test_load_notes_skips_undecodable_file(store: NoteStore):
    (store.notes_dir / "good.md").write_text("ok", encoding="utf-8")
    (store.notes_dir / "bad.md").write_bytes(b"\xff\xfe\x00broken")
    assert [note.title for note in store.load_notes()] == ["good"]


def test_load_notes_without_directory_raises(tmp_path: Path):
    store = NoteStore(notes_dir=tmp_path / "missing", tasks_file=tmp_path / "tasks.json")
    with pytest.raises(OSError):
        store.load_notes()


def test_delete_note_removes_file(store: NoteStore):
    note = Note(path=store.notes_dir / "bye.md", title="Bye", content="")
    save_note(note)
    store.delete_note(note)
    assert not note.path.exists()
    store.delete_note(note)  # already gone


def test_sanitize_title():
    assert sanitize_title("My note: v2!") == "My_note_v2"
    assert sanitize_title("Café au lait") == "Café_au_lait"


def test_new_note_path(store: NoteStore):
    assert store.new_note_path("Hello world?", 1700000000) == store.notes_dir / "Hello_world_1700000000.md"


def test_daily_note_path(store: NoteStore):
    assert store.daily_note_path(date(2024, 2, 29)) == store.daily_notes_dir / "2024-02-29.md"


# -----------------------------------------------------------------------------
# Tasks
# -----------------------------------------------------------------------------


def test_missing_or_blank_task_file_is_empty(store: NoteStore):
    store.tasks_file.unlink()
    assert store.load_tasks() == []
    store.tasks_file.write_text("  \n", encoding="utf-8")
    assert store.load_tasks() == []


def test_tasks_round_trip(store: NoteStore):
    created = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    tasks = [
        Task(
            id=7,
            description="parent",
            project="home",
            priority=Priority.HIGH,
            due_date=date(2024, 3, 1),
            created_at=created,
            sub_tasks=[Task(id=8, description="child", created_at=created)],
        ),
        Task(id=9, description="done", completed=True, priority=Priority.LOW, created_at=created),
    ]
    store.save_tasks(tasks)
    assert store.load_tasks() == tasks


def test_task_document_format(store: NoteStore):
    store.save_tasks([Task(id=1, description="d", due_date=date(2024, 1, 1))])
    data = json.loads(store.tasks_file.read_text(encoding="utf-8"))
    assert isinstance(data, list)
    assert set(data[0]) == {
        "id",
        "description",
        "project",
        "priority",
        "due_date",
        "completed",
        "created_at",
        "sub_tasks",
    }
    assert data[0]["priority"] == "Medium"
    assert data[0]["due_date"] == "2024-01-01"
    assert data[0]["project"] is None


def test_task_timestamps_with_z_suffix(store: NoteStore):
    store.tasks_file.write_text(
        json.dumps(
            [
                {
                    "id": 1,
                    "description": "from elsewhere",
                    "project": None,
                    "priority": "High",
                    "due_date": None,
                    "completed": False,
                    "created_at": "2024-06-01T12:00:00Z",
                    "sub_tasks": [],
                }
            ]
        ),
        encoding="utf-8",
    )
    (task,) = store.load_tasks()
    assert task.priority is Priority.HIGH
    assert task.created_at == datetime(2024, 6, 1, 12, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "payload",
    [
        "{not json",
        '{"id": 1}',
        '[{"description": "no id"}]',
        "[5]",
        '[{"id": 1, "description": "x", "due_date": 20240101}]',
        '[{"id": 1, "description": "x", "created_at": 5}]',
        '[{"id": 1, "description": "x", "sub_tasks": 5}]',
        '[{"id": 1, "description": "x", "sub_tasks": [{"id": []}]}]',
        '[{"id": 1, "description": "x", "priority": "Urgent"}]',
    ],
)
def test_malformed_task_document_raises(store: NoteStore, payload: str):
    store.tasks_file.write_text(payload, encoding="utf-8")
    with pytest.raises(ValueError):
        store.load_tasks()


def test_priority_order():
    assert Priority.LOW < Priority.MEDIUM < Priority.HIGH
    assert max([Priority.MEDIUM, Priority.HIGH, Priority.LOW]) is Priority.HIGH
    assert Priority.HIGH.cycled() is Priority.LOW


def test_note_equality_ignores_tag_order(tmp_path: Path):
    stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)
    first = Note(tmp_path / "n.md", "t", "", ["x", "y"], created_at=stamp, updated_at=stamp)
    second = Note(tmp_path / "n.md", "t", "", ["y", "x"], created_at=stamp, updated_at=stamp)
    assert first == second
    assert first.tags == ["x", "y"]
    assert first != Note(tmp_path / "n.md", "t", "", ["x"], created_at=stamp, updated_at=stamp)
    assert first != Note(tmp_path / "n.md", "t", "other", ["x", "y"], created_at=stamp, updated_at=stamp)
