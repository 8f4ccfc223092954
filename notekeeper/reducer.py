"""The reducer: the only place application state changes.

``update(state, message, store)`` applies one message to completion. File
I/O goes through ``store``; ``OSError`` from it is logged and surfaced as an
``Error ...`` status message, leaving the failed change unapplied.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable

from . import selection, textbuffer
from .messages import Message, MessageKind as M
from .models import Note, Task, utc_now
from .state import (
    AppState,
    Focus,
    Mode,
    View,
    refresh_tags,
    update_search_results,
    visible_note_indices,
)
from .storage import NoteStore

logger = logging.getLogger(__name__)

Handler = Callable[[AppState, Message, NoteStore], None]

INSERT_STATUS = "-- INSERT --"
EMPTY_INPUT_STATUS = "Input cannot be empty"


def _return_to_normal(state: AppState) -> None:
    state.mode = Mode.NORMAL
    state.command_input = ""


def _autosave_tasks(state: AppState, store: NoteStore) -> None:
    try:
        store.save_tasks(state.tasks)
    except OSError as e:
        logger.error(f"Failed to save tasks: {e}")
        state.status_message = f"Error auto-saving tasks: {e}"


def _title_prompt(state: AppState) -> str:
    if state.current_view is View.TASKS:
        return "New Task: "
    if state.selected_note is None:
        return "New note title: "
    return "Rename note to: "


# -- application / views -----------------------------------------------------


def _quit(state: AppState, msg: Message, store: NoteStore) -> None:
    if state.dirty:
        state.mode = Mode.CONFIRM_QUIT
        state.status_message = "You have unsaved changes. Quit without saving? (y/n)"
    else:
        state.running = False


def _force_quit(state: AppState, msg: Message, store: NoteStore) -> None:
    state.running = False


def _switch_view(view: View) -> Handler:
    def handler(state: AppState, msg: Message, store: NoteStore) -> None:
        state.current_view = view

    return handler


def _toggle_help(state: AppState, msg: Message, store: NoteStore) -> None:
    if state.current_view is View.HELP:
        state.current_view = state.previous_view or View.NOTE_LIST
        state.previous_view = None
    else:
        state.previous_view = state.current_view
        state.current_view = View.HELP


def _previous_month(state: AppState, msg: Message, store: NoteStore) -> None:
    if state.calendar_month == 1:
        state.calendar_month = 12
        state.calendar_year -= 1
    else:
        state.calendar_month -= 1


def _next_month(state: AppState, msg: Message, store: NoteStore) -> None:
    if state.calendar_month == 12:
        state.calendar_month = 1
        state.calendar_year += 1
    else:
        state.calendar_month += 1


def _open_daily_note(state: AppState, msg: Message, store: NoteStore) -> None:
    today = date.today()
    path = store.daily_note_path(today)
    index = next((i for i, note in enumerate(state.notes) if note.path == path), None)
    if index is None:
        state.notes.append(Note(path=path, title=f"Daily Note for {today.isoformat()}", content=""))
        index = len(state.notes) - 1
        state.dirty = True
    state.selected_note = index
    state.cursor_offset = 0
    state.current_view = View.NOTE_EDITOR
    state.status_message = ""


# -- modes and the shared input buffer ---------------------------------------


def _enter_insert_mode(state: AppState, msg: Message, store: NoteStore) -> None:
    note = state.current_note
    if note is None:
        state.status_message = "No note selected."
        return
    state.mode = Mode.INSERT
    state.cursor_offset = len(note.content)
    state.status_message = INSERT_STATUS


def _enter_normal_mode(state: AppState, msg: Message, store: NoteStore) -> None:
    if state.mode is Mode.INSERT:
        state.dirty = True
    _return_to_normal(state)
    state.status_message = ""


def _enter_command_mode(state: AppState, msg: Message, store: NoteStore) -> None:
    state.mode = Mode.COMMAND
    state.command_input = ":"
    state.status_message = state.command_input


def _save(state: AppState, msg: Message, store: NoteStore) -> None:
    if not state.dirty:
        state.status_message = "No changes to save."
        return
    try:
        store.save_notes(state.notes)
    except OSError as e:
        logger.error(f"Failed to save notes: {e}")
        state.status_message = f"Error saving notes: {e}"
        return
    state.dirty = False
    state.status_message = "Notes saved successfully!"
    refresh_tags(state)


def _execute_command(state: AppState, msg: Message, store: NoteStore) -> None:
    command = state.command_input[1:]
    state.command_input = ""
    if command in ("w", "write"):
        _save(state, msg, store)
    elif command in ("q", "quit"):
        _quit(state, msg, store)
    elif command == "wq":
        _save(state, msg, store)
        if not state.dirty:
            _quit(state, msg, store)
    else:
        state.status_message = f"Not a command: {command}"
    # The command's own status (saved, no changes, error) stays visible.
    if state.running and state.mode is Mode.COMMAND:
        state.mode = Mode.NORMAL


def _char(state: AppState, msg: Message, store: NoteStore) -> None:
    char = msg.char or ""
    if not char:
        return
    if state.mode is Mode.INSERT:
        note = state.current_note
        if note is not None:
            note.content, state.cursor_offset = textbuffer.insert_char(
                note.content, state.cursor_offset, char
            )
    elif state.mode is Mode.COMMAND:
        state.command_input += char
        state.status_message = state.command_input
    elif state.mode is Mode.TITLE_INPUT:
        state.command_input += char
        state.status_message = _title_prompt(state) + state.command_input
    elif state.mode is Mode.TAG_INPUT:
        state.command_input += char
        state.status_message = f"Add Tag: {state.command_input}"
    elif state.mode is Mode.NORMAL and state.current_view is View.SEARCH:
        state.search_query += char
        update_search_results(state)
        state.status_message = f"/{state.search_query}"


def _backspace(state: AppState, msg: Message, store: NoteStore) -> None:
    if state.mode is Mode.INSERT:
        note = state.current_note
        if note is not None:
            note.content, state.cursor_offset = textbuffer.delete_before(
                note.content, state.cursor_offset
            )
    elif state.mode is Mode.COMMAND:
        state.command_input = state.command_input[:-1]
        if not state.command_input:
            _enter_normal_mode(state, msg, store)
        else:
            state.status_message = state.command_input
    elif state.mode is Mode.TITLE_INPUT:
        state.command_input = state.command_input[:-1]
        state.status_message = _title_prompt(state) + state.command_input
    elif state.mode is Mode.TAG_INPUT:
        state.command_input = state.command_input[:-1]
        state.status_message = f"Add Tag: {state.command_input}"
    elif state.mode is Mode.NORMAL and state.current_view is View.SEARCH:
        state.search_query = state.search_query[:-1]
        update_search_results(state)
        state.status_message = f"/{state.search_query}"


def _enter_search(state: AppState, msg: Message, store: NoteStore) -> None:
    state.current_view = View.SEARCH
    state.search_query = ""
    state.status_message = "/"
    update_search_results(state)


def _exit_search(state: AppState, msg: Message, store: NoteStore) -> None:
    state.current_view = View.NOTE_LIST
    state.search_query = ""
    state.search_results = []
    state.status_message = ""


# -- notes ---------------------------------------------------------------------


def _step_note(step: Callable[[int | None, int], int | None]) -> Handler:
    def handler(state: AppState, msg: Message, store: NoteStore) -> None:
        visible = visible_note_indices(state)
        position = visible.index(state.selected_note) if state.selected_note in visible else None
        position = step(position, len(visible))
        if position is not None:
            state.selected_note = visible[position]

    return handler


def _open_note(state: AppState, msg: Message, store: NoteStore) -> None:
    if state.current_note is None:
        return
    state.cursor_offset = 0
    state.current_view = View.NOTE_EDITOR
    state.status_message = ""


def _new_note(state: AppState, msg: Message, store: NoteStore) -> None:
    state.selected_note = None  # no selection marks a creation
    state.mode = Mode.TITLE_INPUT
    state.command_input = ""
    state.status_message = "New note title: "


def _rename_note(state: AppState, msg: Message, store: NoteStore) -> None:
    note = state.current_note
    if note is None:
        return
    state.mode = Mode.TITLE_INPUT
    state.command_input = note.title
    state.status_message = f"Rename note to: {state.command_input}"


def _create_note(state: AppState, title: str, store: NoteStore) -> None:
    now = utc_now()
    note = Note(
        path=store.new_note_path(title, int(now.timestamp())),
        title=title,
        content="",
        created_at=now,
        updated_at=now,
    )
    state.notes.append(note)
    state.selected_note = len(state.notes) - 1
    state.cursor_offset = 0
    state.current_view = View.NOTE_EDITOR
    state.mode = Mode.INSERT
    state.command_input = ""
    state.dirty = True
    state.status_message = INSERT_STATUS


def _create_task(state: AppState, description: str, store: NoteStore) -> None:
    state.tasks.append(Task(id=state.allocate_task_id(), description=description))
    state.selected_task = len(state.tasks) - 1
    _autosave_tasks(state, store)


def _set_title(state: AppState, msg: Message, store: NoteStore) -> None:
    text = state.command_input
    if not text.strip():
        state.status_message = EMPTY_INPUT_STATUS
        _return_to_normal(state)
        return

    state.status_message = ""
    if state.current_view in (View.NOTE_LIST, View.NOTE_EDITOR):
        note = state.current_note
        if note is None:
            _create_note(state, text, store)
            return
        note.title = text
        state.dirty = True
    elif state.current_view is View.TASKS and state.selected_task is None:
        _create_task(state, text, store)
    _return_to_normal(state)


def _delete_note(state: AppState, msg: Message, store: NoteStore) -> None:
    note = state.current_note
    if note is None:
        return
    state.mode = Mode.CONFIRM_DELETION
    state.status_message = f"Delete '{note.title}'? (y/n)"


def _confirm_delete_note(state: AppState, store: NoteStore) -> None:
    index = state.selected_note
    note = state.current_note
    if index is None or note is None:
        return
    try:
        store.delete_note(note)
    except OSError as e:
        logger.error(f"Failed to delete {note.path}: {e}")
        state.status_message = f"Error deleting note: {e}"
        return
    visible = visible_note_indices(state)
    position = visible.index(index) if index in visible else index
    active_tag = state.active_tag
    del state.notes[index]
    refresh_tags(state)
    visible = visible_note_indices(state)
    if state.active_tag != active_tag:
        position = index  # filter dropped with its last note
    position = selection.index_after_removal(position, len(visible))
    state.selected_note = visible[position] if position is not None else None
    state.dirty = True
    state.status_message = f"'{note.title}' deleted."
    update_search_results(state)


def _confirm_delete_task(state: AppState, store: NoteStore) -> None:
    index = state.selected_task
    task = state.current_task
    if index is None or task is None:
        return
    del state.tasks[index]
    state.selected_task = selection.index_after_removal(index, len(state.tasks))
    state.status_message = f"'{task.description}' deleted."
    _autosave_tasks(state, store)


def _confirm_delete(state: AppState, msg: Message, store: NoteStore) -> None:
    if state.current_view in (View.NOTE_LIST, View.NOTE_EDITOR):
        _confirm_delete_note(state, store)
    elif state.current_view is View.TASKS:
        _confirm_delete_task(state, store)
    _return_to_normal(state)


# -- tags ----------------------------------------------------------------------


def _enter_tag_input(state: AppState, msg: Message, store: NoteStore) -> None:
    if state.current_note is None:
        state.status_message = "No note selected."
        return
    state.mode = Mode.TAG_INPUT
    state.command_input = ""
    state.status_message = "Add Tag: "


def _add_tag(state: AppState, msg: Message, store: NoteStore) -> None:
    tag = state.command_input.strip()
    note = state.current_note
    if tag and note is not None and note.add_tag(tag):
        state.dirty = True
        refresh_tags(state)
    _return_to_normal(state)
    state.status_message = ""


def _toggle_focus(state: AppState, msg: Message, store: NoteStore) -> None:
    state.focus = Focus.TAG_LIST if state.focus is Focus.NOTE_LIST else Focus.NOTE_LIST


def _next_tag(state: AppState, msg: Message, store: NoteStore) -> None:
    state.selected_tag = selection.next_index(state.selected_tag, len(state.tags))


def _previous_tag(state: AppState, msg: Message, store: NoteStore) -> None:
    state.selected_tag = selection.previous_index(state.selected_tag, len(state.tags))


def _select_tag(state: AppState, msg: Message, store: NoteStore) -> None:
    index = state.selected_tag
    if index is None or index >= len(state.tags):
        return
    tag = state.tags[index]
    state.active_tag = None if state.active_tag == tag else tag
    visible = visible_note_indices(state)
    state.selected_note = visible[0] if visible else None


# -- editing -------------------------------------------------------------------


def _new_line(state: AppState, msg: Message, store: NoteStore) -> None:
    if state.mode is Mode.INSERT:
        _char(state, Message.char_input("\n"), store)


def _move_cursor(move: Callable[[str, int], int]) -> Handler:
    def handler(state: AppState, msg: Message, store: NoteStore) -> None:
        note = state.current_note
        if note is not None:
            state.cursor_offset = move(note.content, state.cursor_offset)

    return handler


# -- tasks -----------------------------------------------------------------------


def _next_task(state: AppState, msg: Message, store: NoteStore) -> None:
    state.selected_task = selection.next_index(state.selected_task, len(state.tasks))


def _previous_task(state: AppState, msg: Message, store: NoteStore) -> None:
    state.selected_task = selection.previous_index(state.selected_task, len(state.tasks))


def _new_task(state: AppState, msg: Message, store: NoteStore) -> None:
    state.selected_task = None
    state.mode = Mode.TITLE_INPUT
    state.command_input = ""
    state.status_message = "New Task: "


def _delete_task(state: AppState, msg: Message, store: NoteStore) -> None:
    task = state.current_task
    if task is None:
        return
    state.mode = Mode.CONFIRM_DELETION
    state.status_message = f"Delete '{task.description}'? (y/n)"


def _toggle_task_complete(state: AppState, msg: Message, store: NoteStore) -> None:
    task = state.current_task
    if task is None:
        return
    task.completed = not task.completed
    _autosave_tasks(state, store)


def _cycle_priority(state: AppState, msg: Message, store: NoteStore) -> None:
    task = state.current_task
    if task is None:
        return
    task.priority = task.priority.cycled()
    state.status_message = f"Priority: {task.priority.value}"
    _autosave_tasks(state, store)


_HANDLERS: dict[M, Handler] = {
    M.QUIT: _quit,
    M.FORCE_QUIT: _force_quit,
    M.SWITCH_TO_NOTE_LIST: _switch_view(View.NOTE_LIST),
    M.SWITCH_TO_CALENDAR: _switch_view(View.CALENDAR),
    M.SWITCH_TO_TASKS: _switch_view(View.TASKS),
    M.PREVIOUS_MONTH: _previous_month,
    M.NEXT_MONTH: _next_month,
    M.OPEN_DAILY_NOTE: _open_daily_note,
    M.SAVE: _save,
    M.CHAR: _char,
    M.BACKSPACE: _backspace,
    M.ENTER_SEARCH: _enter_search,
    M.EXIT_SEARCH: _exit_search,
    M.PREVIOUS_NOTE: _step_note(selection.previous_index),
    M.NEXT_NOTE: _step_note(selection.next_index),
    M.OPEN_NOTE: _open_note,
    M.NEW_NOTE: _new_note,
    M.RENAME_NOTE: _rename_note,
    M.SET_TITLE: _set_title,
    M.DELETE_NOTE: _delete_note,
    M.CONFIRM_DELETE: _confirm_delete,
    M.TOGGLE_HELP: _toggle_help,
    M.TOGGLE_FOCUS: _toggle_focus,
    M.PREVIOUS_TAG: _previous_tag,
    M.NEXT_TAG: _next_tag,
    M.SELECT_TAG: _select_tag,
    M.NEW_LINE: _new_line,
    M.PREVIOUS_TASK: _previous_task,
    M.NEXT_TASK: _next_task,
    M.TOGGLE_TASK_COMPLETE: _toggle_task_complete,
    M.CYCLE_PRIORITY: _cycle_priority,
    M.NEW_TASK: _new_task,
    M.DELETE_TASK: _delete_task,
    M.CURSOR_LEFT: _move_cursor(textbuffer.move_left),
    M.CURSOR_RIGHT: _move_cursor(textbuffer.move_right),
    M.CURSOR_UP: _move_cursor(textbuffer.move_up),
    M.CURSOR_DOWN: _move_cursor(textbuffer.move_down),
    M.ENTER_TAG_INPUT: _enter_tag_input,
    M.ADD_TAG: _add_tag,
    M.ENTER_INSERT_MODE: _enter_insert_mode,
    M.ENTER_NORMAL_MODE: _enter_normal_mode,
    M.ENTER_COMMAND_MODE: _enter_command_mode,
    M.EXECUTE_COMMAND: _execute_command,
}


def update(state: AppState, message: Message, store: NoteStore) -> None:
    """Apply one message to ``state``."""
    _HANDLERS[message.kind](state, message, store)
