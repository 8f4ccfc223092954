"""notekeeper - terminal note and task organizer."""

__version__ = "0.1.0"
