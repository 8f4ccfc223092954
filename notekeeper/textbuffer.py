"""Character-offset editing over a note body.

Offsets index Unicode code points (Python ``str`` positions), not grapheme
clusters or display columns: a wide or combining character still counts as one
column. Every function clamps the incoming offset to ``[0, len(content)]``.
"""


def clamp(content: str, offset: int) -> int:
    return max(0, min(offset, len(content)))


def insert_char(content: str, offset: int, char: str) -> tuple[str, int]:
    """Splice ``char`` in at ``offset``; returns the new content and offset."""
    offset = clamp(content, offset)
    return content[:offset] + char + content[offset:], offset + 1


def delete_before(content: str, offset: int) -> tuple[str, int]:
    """Remove the character before ``offset`` (backspace)."""
    offset = clamp(content, offset)
    if offset == 0:
        return content, 0
    return content[: offset - 1] + content[offset:], offset - 1


def move_left(content: str, offset: int) -> int:
    return clamp(content, offset - 1)


def move_right(content: str, offset: int) -> int:
    return clamp(content, offset + 1)


def line_starts(content: str) -> list[int]:
    """Offsets at which each line begins: 0, then one past every newline."""
    starts = [0]
    for i, char in enumerate(content):
        if char == "\n":
            starts.append(i + 1)
    return starts


def _line_index(starts: list[int], offset: int) -> int:
    # last line start <= offset
    index = 0
    for i, start in enumerate(starts):
        if start <= offset:
            index = i
        else:
            break
    return index


def _line_length(content: str, starts: list[int], index: int) -> int:
    if index + 1 < len(starts):
        end = starts[index + 1] - 1  # the newline itself
    else:
        end = len(content)
    return end - starts[index]


def move_up(content: str, offset: int) -> int:
    """Same column on the previous line, clamped to that line's length."""
    offset = clamp(content, offset)
    starts = line_starts(content)
    current = _line_index(starts, offset)
    if current == 0:
        return offset
    column = offset - starts[current]
    target = current - 1
    return starts[target] + min(column, _line_length(content, starts, target))


def move_down(content: str, offset: int) -> int:
    """Same column on the next line, clamped to that line's length."""
    offset = clamp(content, offset)
    starts = line_starts(content)
    current = _line_index(starts, offset)
    if current == len(starts) - 1:
        return offset
    column = offset - starts[current]
    target = current + 1
    return starts[target] + min(column, _line_length(content, starts, target))


def cursor_position(content: str, offset: int) -> tuple[int, int]:
    """(column, line) of ``offset``, one column per character."""
    offset = clamp(content, offset)
    before = content[:offset]
    line = before.count("\n")
    column = offset - (before.rfind("\n") + 1)
    return column, line
