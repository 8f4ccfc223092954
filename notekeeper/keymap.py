"""Key classification: (state, key) -> at most one message.

Precedence, first match wins:

1. the table of the current mode, whenever the mode is not Normal
2. full-capture views (Search, Help) in Normal mode
3. bindings of the current view (and, in the note list, the focused pane)
4. global bindings

Nothing here mutates state.
"""

from __future__ import annotations

from .messages import Key, KeyCode, Message, MessageKind as M
from .state import AppState, Focus, Mode, View

KeyTable = dict[object, M]

_INSERT_KEYS: KeyTable = {
    KeyCode.ESC: M.ENTER_NORMAL_MODE,
    KeyCode.ENTER: M.NEW_LINE,
    KeyCode.LEFT: M.CURSOR_LEFT,
    KeyCode.RIGHT: M.CURSOR_RIGHT,
    KeyCode.UP: M.CURSOR_UP,
    KeyCode.DOWN: M.CURSOR_DOWN,
    KeyCode.BACKSPACE: M.BACKSPACE,
}

# Command, TitleInput and TagInput share one buffer and differ only in commit.
_TEXT_INPUT_COMMIT = {
    Mode.COMMAND: M.EXECUTE_COMMAND,
    Mode.TITLE_INPUT: M.SET_TITLE,
    Mode.TAG_INPUT: M.ADD_TAG,
}

_CONFIRM_YES = {
    Mode.CONFIRM_DELETION: M.CONFIRM_DELETE,
    Mode.CONFIRM_QUIT: M.FORCE_QUIT,
}

_NOTE_LIST_KEYS: KeyTable = {
    "j": M.NEXT_NOTE,
    KeyCode.DOWN: M.NEXT_NOTE,
    "k": M.PREVIOUS_NOTE,
    KeyCode.UP: M.PREVIOUS_NOTE,
    KeyCode.ENTER: M.OPEN_NOTE,
    "a": M.NEW_NOTE,
    "r": M.RENAME_NOTE,
    "d": M.DELETE_NOTE,
}

_TAG_LIST_KEYS: KeyTable = {
    "j": M.NEXT_TAG,
    KeyCode.DOWN: M.NEXT_TAG,
    "k": M.PREVIOUS_TAG,
    KeyCode.UP: M.PREVIOUS_TAG,
    KeyCode.ENTER: M.SELECT_TAG,
}

_EDITOR_KEYS: KeyTable = {
    "t": M.ENTER_TAG_INPUT,
    "i": M.ENTER_INSERT_MODE,
    "r": M.RENAME_NOTE,
    KeyCode.ESC: M.SWITCH_TO_NOTE_LIST,
}

_CALENDAR_KEYS: KeyTable = {
    KeyCode.LEFT: M.PREVIOUS_MONTH,
    KeyCode.RIGHT: M.NEXT_MONTH,
    KeyCode.ENTER: M.OPEN_DAILY_NOTE,
}

_TASK_KEYS: KeyTable = {
    "j": M.NEXT_TASK,
    KeyCode.DOWN: M.NEXT_TASK,
    "k": M.PREVIOUS_TASK,
    KeyCode.UP: M.PREVIOUS_TASK,
    "a": M.NEW_TASK,
    "d": M.DELETE_TASK,
    " ": M.TOGGLE_TASK_COMPLETE,
    "p": M.CYCLE_PRIORITY,
}

_GLOBAL_KEYS: KeyTable = {
    ":": M.ENTER_COMMAND_MODE,
    "/": M.ENTER_SEARCH,
    "?": M.TOGGLE_HELP,
    "q": M.QUIT,
    "n": M.SWITCH_TO_NOTE_LIST,
    "c": M.SWITCH_TO_CALENDAR,
    "T": M.SWITCH_TO_TASKS,
}


def _key_id(key: Key) -> object:
    return key.char if key.code is KeyCode.CHAR else key.code


def _lookup(table: KeyTable, key: Key) -> Message | None:
    kind = table.get(_key_id(key))
    return Message(kind) if kind is not None else None


def _text_entry(key: Key, commit: M | None, cancel: M = M.ENTER_NORMAL_MODE) -> Message | None:
    """Append/backspace/commit/cancel, the shape every text prompt shares."""
    if key.code is KeyCode.CHAR and key.char:
        return Message.char_input(key.char)
    if key.code is KeyCode.BACKSPACE:
        return Message(M.BACKSPACE)
    if key.code is KeyCode.ENTER and commit is not None:
        return Message(commit)
    if key.code is KeyCode.ESC:
        return Message(cancel)
    return None


def _classify_mode(mode: Mode, key: Key) -> Message | None:
    if mode is Mode.INSERT:
        if key.code is KeyCode.CHAR and key.char:
            return Message.char_input(key.char)
        return _lookup(_INSERT_KEYS, key)
    if mode in _TEXT_INPUT_COMMIT:
        return _text_entry(key, _TEXT_INPUT_COMMIT[mode])
    if mode in _CONFIRM_YES:
        if key.is_char("y"):
            return Message(_CONFIRM_YES[mode])
        if key.is_char("n") or key.code is KeyCode.ESC:
            return Message(M.ENTER_NORMAL_MODE)
    return None


def _view_table(state: AppState) -> KeyTable:
    view = state.current_view
    if view is View.NOTE_LIST:
        return _NOTE_LIST_KEYS if state.focus is Focus.NOTE_LIST else _TAG_LIST_KEYS
    if view is View.NOTE_EDITOR:
        return _EDITOR_KEYS
    if view is View.CALENDAR:
        return _CALENDAR_KEYS
    if view is View.TASKS:
        return _TASK_KEYS
    return {}


def classify(state: AppState, key: Key) -> Message | None:
    """Turn one key press into the message it means in the current state."""
    if state.mode is not Mode.NORMAL:
        return _classify_mode(state.mode, key)

    if state.current_view is View.SEARCH:
        return _text_entry(key, commit=None, cancel=M.EXIT_SEARCH)
    if state.current_view is View.HELP:
        if key.is_char("?") or key.code is KeyCode.ESC:
            return Message(M.TOGGLE_HELP)
        return None

    if state.current_view is View.NOTE_LIST and key.code is KeyCode.TAB:
        return Message(M.TOGGLE_FOCUS)

    return _lookup(_view_table(state), key) or _lookup(_GLOBAL_KEYS, key)
