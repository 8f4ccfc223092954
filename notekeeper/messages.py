"""Key events coming in and the semantic messages they classify to."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class KeyCode(str, Enum):
    """Terminal-independent key identity."""

    CHAR = "char"
    ENTER = "enter"
    ESC = "esc"
    BACKSPACE = "backspace"
    TAB = "tab"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class Key:
    """A single key press; ``char`` is set only for ``KeyCode.CHAR``."""

    code: KeyCode
    char: str | None = None

    @classmethod
    def of(cls, char: str) -> Key:
        return cls(KeyCode.CHAR, char)

    def is_char(self, *chars: str) -> bool:
        return self.code is KeyCode.CHAR and self.char in chars


class MessageKind(str, Enum):
    """Everything the reducer knows how to apply."""

    QUIT = "quit"
    FORCE_QUIT = "force_quit"
    SWITCH_TO_NOTE_LIST = "switch_to_note_list"
    SWITCH_TO_CALENDAR = "switch_to_calendar"
    SWITCH_TO_TASKS = "switch_to_tasks"
    PREVIOUS_MONTH = "previous_month"
    NEXT_MONTH = "next_month"
    OPEN_DAILY_NOTE = "open_daily_note"
    SAVE = "save"
    CHAR = "char"
    BACKSPACE = "backspace"
    ENTER_SEARCH = "enter_search"
    EXIT_SEARCH = "exit_search"
    PREVIOUS_NOTE = "previous_note"
    NEXT_NOTE = "next_note"
    OPEN_NOTE = "open_note"
    NEW_NOTE = "new_note"
    RENAME_NOTE = "rename_note"
    SET_TITLE = "set_title"
    DELETE_NOTE = "delete_note"
    CONFIRM_DELETE = "confirm_delete"
    TOGGLE_HELP = "toggle_help"
    TOGGLE_FOCUS = "toggle_focus"
    PREVIOUS_TAG = "previous_tag"
    NEXT_TAG = "next_tag"
    SELECT_TAG = "select_tag"
    NEW_LINE = "new_line"
    PREVIOUS_TASK = "previous_task"
    NEXT_TASK = "next_task"
    TOGGLE_TASK_COMPLETE = "toggle_task_complete"
    CYCLE_PRIORITY = "cycle_priority"
    NEW_TASK = "new_task"
    DELETE_TASK = "delete_task"
    CURSOR_LEFT = "cursor_left"
    CURSOR_RIGHT = "cursor_right"
    CURSOR_UP = "cursor_up"
    CURSOR_DOWN = "cursor_down"
    ENTER_TAG_INPUT = "enter_tag_input"
    ADD_TAG = "add_tag"
    ENTER_INSERT_MODE = "enter_insert_mode"
    ENTER_NORMAL_MODE = "enter_normal_mode"
    ENTER_COMMAND_MODE = "enter_command_mode"
    EXECUTE_COMMAND = "execute_command"


@dataclass(frozen=True)
class Message:
    kind: MessageKind
    char: str | None = None  # payload of MessageKind.CHAR

    @classmethod
    def char_input(cls, char: str) -> Message:
        return cls(MessageKind.CHAR, char)
