"""Note files and the task document on disk."""

from .loader import NoteStore, load_note, sanitize_title, save_note
from .parser import parse_note_text, render_note_text, split_front_matter

__all__ = [
    "NoteStore",
    "load_note",
    "save_note",
    "sanitize_title",
    "parse_note_text",
    "render_note_text",
    "split_front_matter",
]
