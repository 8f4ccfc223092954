"""Front matter parsing and emission for note files.

A note file is an optional YAML block fenced by ``---`` lines, a blank line,
then the body. Only ``title`` and ``tags`` are read from the block.
"""

import re
from pathlib import Path
from typing import Any

import yaml

DELIMITER = "---"

_OPENING = re.compile(r"\A---[ \t]*\r?\n")
_CLOSING = re.compile(r"^---[ \t]*\r?$\n?", re.MULTILINE)


def split_front_matter(text: str) -> tuple[dict[str, Any] | None, str]:
    """Split a note file into its front matter mapping and body.

    Returns ``(None, text)`` when there is no well-formed front matter: no
    opening line, no closing line, invalid YAML, or a document that is not a
    mapping. One blank line after the closing delimiter is not part of the body.
    """
    opening = _OPENING.match(text)
    if not opening:
        return None, text
    closing = _CLOSING.search(text, opening.end())
    if not closing:
        return None, text

    raw = text[opening.end() : closing.start()]
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError:
        return None, text
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return None, text

    body = text[closing.end() :]
    if body.startswith("\r\n"):
        body = body[2:]
    elif body.startswith("\n"):
        body = body[1:]
    return data, body


def extract_title(front_matter: dict[str, Any] | None) -> str | None:
    """Front matter title, or None when absent or blank."""
    if not front_matter:
        return None
    title = front_matter.get("title")
    if title is None:
        return None
    title = str(title)
    return title if title.strip() else None


def extract_tags(front_matter: dict[str, Any] | None) -> list[str]:
    """Front matter tags as strings.

    Tags can be:
    - A list: ["work", "ideas"]
    - A single string: "work"
    """
    if not front_matter:
        return []
    tags = front_matter.get("tags") or []
    if isinstance(tags, str):
        tags = [tags]
    if not isinstance(tags, list):
        return []
    return [str(tag) for tag in tags if tag is not None]


def parse_note_text(text: str, path: Path) -> tuple[str, list[str], str]:
    """Parse a note file into ``(title, tags, body)``.

    The title falls back to the file name without its extension.
    """
    front_matter, body = split_front_matter(text)
    title = extract_title(front_matter) or path.stem
    return title, extract_tags(front_matter), body


def render_note_text(title: str, tags: list[str], body: str) -> str:
    """Serialize a note for disk; the inverse of :func:`parse_note_text`."""
    metadata: dict[str, Any] = {"title": title}
    if tags:
        metadata["tags"] = list(tags)
    block = yaml.safe_dump(
        metadata,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=float("inf"),
    )
    return f"{DELIMITER}\n{block}{DELIMITER}\n\n{body}"
