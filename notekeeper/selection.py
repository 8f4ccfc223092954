"""Wrap-around selection arithmetic shared by the note, tag and task lists."""


def next_index(selected: int | None, length: int) -> int | None:
    """Move down one row, wrapping from the last row to the first."""
    if length == 0:
        return selected
    return ((selected or 0) + 1) % length


def previous_index(selected: int | None, length: int) -> int | None:
    """Move up one row, wrapping from the first row to the last."""
    if length == 0:
        return selected
    return ((selected or 0) + length - 1) % length


def index_after_removal(removed: int, new_length: int) -> int | None:
    """Selection after the row at ``removed`` was deleted.

    The row that followed the removed one slides into its index; removing the
    last row selects the new last row; an emptied list has no selection.
    """
    if new_length == 0:
        return None
    if removed >= new_length:
        return new_length - 1
    return removed


def clamp_index(selected: int | None, length: int) -> int | None:
    """Keep a selection valid after the list was rebuilt."""
    if selected is None or length == 0:
        return None
    return min(selected, length - 1)
