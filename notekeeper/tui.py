"""Curses presentation: key translation, drawing, and the poll loop."""

from __future__ import annotations

import calendar
import curses
import os
from datetime import date
from typing import TYPE_CHECKING

from .messages import Key, KeyCode
from .state import AppState, Focus, Mode, View, days_with_notes, month_title, visible_note_indices
from .textbuffer import cursor_position

if TYPE_CHECKING:
    from .app import App

_SPECIAL_KEYS = {
    "\x1b": KeyCode.ESC,
    "\n": KeyCode.ENTER,
    "\r": KeyCode.ENTER,
    "\t": KeyCode.TAB,
    "\x7f": KeyCode.BACKSPACE,
    "\b": KeyCode.BACKSPACE,
    curses.KEY_BACKSPACE: KeyCode.BACKSPACE,
    curses.KEY_ENTER: KeyCode.ENTER,
    curses.KEY_LEFT: KeyCode.LEFT,
    curses.KEY_RIGHT: KeyCode.RIGHT,
    curses.KEY_UP: KeyCode.UP,
    curses.KEY_DOWN: KeyCode.DOWN,
}

HELP_ROWS = [
    ("q", "Quit", "Normal"),
    (":", "Command mode (w, q, wq)", "Normal"),
    ("/", "Search notes", "Normal"),
    ("?", "Toggle this help", "Normal"),
    ("n, c, T", "Notes, Calendar, Tasks", "Normal"),
    ("j/k", "Move selection", "Note list, Tags, Tasks"),
    ("Tab", "Switch notes/tags pane", "Note list"),
    ("Enter", "Open note / filter by tag", "Note list"),
    ("a, r, d", "New, rename, delete note", "Note list"),
    ("i, t, r", "Insert, add tag, rename", "Editor"),
    ("Esc", "Leave mode or view", "All"),
    ("Left/Right", "Previous/next month", "Calendar"),
    ("Enter", "Open today's daily note", "Calendar"),
    ("a, d", "New, delete task", "Tasks"),
    ("Space, p", "Toggle done, cycle priority", "Tasks"),
]


def translate_key(raw: str | int) -> Key | None:
    """Map a ``get_wch`` result onto a Key; unknown keys are dropped."""
    code = _SPECIAL_KEYS.get(raw)
    if code is not None:
        return Key(code)
    if isinstance(raw, str) and raw.isprintable():
        return Key.of(raw)
    return None


def _put(win: curses.window, y: int, x: int, text: str, attr: int = 0) -> None:
    height, width = win.getmaxyx()
    if not 0 <= y < height or x >= width:
        return
    try:
        win.addnstr(y, x, text, max(0, width - x - 1), attr)
    except curses.error:
        pass


def _draw_list(win: curses.window, top: int, left: int, title: str, rows: list[str], selected: int | None, focused: bool) -> None:
    _put(win, top, left, title, curses.A_BOLD | (curses.A_UNDERLINE if focused else 0))
    for i, row in enumerate(rows):
        _put(win, top + 1 + i, left, row, curses.A_REVERSE if i == selected else 0)


def _draw_note_list(win: curses.window, state: AppState, width: int) -> None:
    visible = visible_note_indices(state)
    rows = [state.notes[i].title for i in visible]
    selected = visible.index(state.selected_note) if state.selected_note in visible else None
    title = "Notes" if state.active_tag is None else f"Notes [{state.active_tag}]"
    _draw_list(win, 0, 0, title, rows, selected, state.focus is Focus.NOTE_LIST)
    tag_rows = [f"* {tag}" if tag == state.active_tag else f"  {tag}" for tag in state.tags]
    _draw_list(win, 0, width * 7 // 10, "Tags", tag_rows, state.selected_tag, state.focus is Focus.TAG_LIST)


def _draw_editor(win: curses.window, state: AppState) -> None:
    note = state.current_note
    if note is None:
        _put(win, 0, 0, "No note selected.")
        return
    header = note.title + (f"  [ {' | '.join(note.tags)} ]" if note.tags else "")
    _put(win, 0, 0, header, curses.A_BOLD)
    for i, line in enumerate(note.content.split("\n")):
        _put(win, 1 + i, 0, line)


def _draw_calendar(win: curses.window, state: AppState) -> None:
    _put(win, 0, 0, month_title(state.calendar_year, state.calendar_month), curses.A_BOLD)
    _put(win, 1, 0, " ".join(day[:2] for day in calendar.day_abbr))
    marked = days_with_notes(state.notes, state.calendar_year, state.calendar_month)
    today = date.today()
    weeks = calendar.Calendar().monthdayscalendar(state.calendar_year, state.calendar_month)
    for row, week in enumerate(weeks):
        for col, day in enumerate(week):
            if not day:
                continue
            attr = curses.A_BOLD if day in marked else 0
            if (state.calendar_year, state.calendar_month, day) == (today.year, today.month, today.day):
                attr |= curses.A_REVERSE
            _put(win, 2 + row, col * 3, f"{day:2d}", attr)


def _draw_tasks(win: curses.window, state: AppState) -> None:
    rows = []
    for task in state.tasks:
        due = f" ({task.due_date.isoformat()})" if task.due_date else ""
        rows.append(f"[{'x' if task.completed else ' '}] [{task.priority.value}] {task.description}{due}")
    _draw_list(win, 0, 0, "Tasks", rows, state.selected_task, True)


def _draw_search(win: curses.window, state: AppState) -> None:
    rows = [state.notes[i].title for i in state.search_results if i < len(state.notes)]
    _draw_list(win, 0, 0, "Search Results", rows, None, True)


def _draw_help(win: curses.window) -> None:
    _put(win, 0, 0, f"{'Key(s)':<12}{'Action':<32}Mode(s) / View(s)", curses.A_BOLD)
    for i, (keys, action, where) in enumerate(HELP_ROWS):
        _put(win, 2 + i, 0, f"{keys:<12}{action:<32}{where}")


def draw(stdscr: curses.window, state: AppState) -> None:
    """Render the current state; the last row is the status bar."""
    stdscr.erase()
    height, width = stdscr.getmaxyx()
    body = stdscr.derwin(max(1, height - 1), width, 0, 0)
    view = state.current_view
    if view is View.NOTE_LIST:
        _draw_note_list(body, state, width)
    elif view is View.NOTE_EDITOR:
        _draw_editor(body, state)
    elif view is View.CALENDAR:
        _draw_calendar(body, state)
    elif view is View.TASKS:
        _draw_tasks(body, state)
    elif view is View.SEARCH:
        _draw_search(body, state)
    elif view is View.HELP:
        _draw_help(body)
    _put(stdscr, height - 1, 0, state.status_message)

    note = state.current_note
    if state.mode is Mode.INSERT and note is not None:
        x, y = cursor_position(note.content, state.cursor_offset)
        curses.curs_set(1)
        try:
            stdscr.move(min(1 + y, height - 2), min(x, width - 1))
        except curses.error:
            pass
    else:
        curses.curs_set(0)
    stdscr.refresh()


def _main(stdscr: curses.window, app: App) -> None:
    stdscr.keypad(True)
    stdscr.timeout(app.settings.poll_interval_ms)
    while app.state.running:
        draw(stdscr, app.state)
        try:
            raw = stdscr.get_wch()
        except curses.error:
            continue  # poll timeout
        key = translate_key(raw)
        if key is not None:
            app.handle_key(key)


def run_terminal(app: App) -> None:
    os.environ.setdefault("ESCDELAY", "25")
    curses.wrapper(_main, app)
