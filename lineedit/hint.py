"""Hints: suggestions shown to the right of the cursor as the user types."""

from __future__ import annotations

from dataclasses import dataclass

from .history import History, SearchDirection


@dataclass(frozen=True)
class Hint:
    """A hint whose displayed text is also the text to complete."""

    text: str

    def display(self) -> str:
        """Text to display while the hint is active."""
        return self.text

    def completion(self) -> str | None:
        """Text to insert in the line when the hint is accepted."""
        return self.text


@dataclass
class Context:
    """Gives hinters and completers access to the history."""

    history: History
    history_index: int | None = None

    def __post_init__(self) -> None:
        if self.history_index is None:
            self.history_index = len(self.history)


class Hinter:
    """Provides hints; the default offers none."""

    def hint(self, line: str, pos: int, ctx: Context) -> Hint | None:
        """Return a hint for `line` with the cursor at `pos`, or None."""
        return None


class HistoryHinter(Hinter):
    """Suggests the rest of the latest history entry starting with the line."""

    def hint(self, line: str, pos: int, ctx: Context) -> Hint | None:
        if not line or pos < len(line):
            return None
        index = ctx.history_index
        start = max(index - 1, 0) if index == len(ctx.history) else index
        found = ctx.history.starts_with(line, start, SearchDirection.REVERSE)
        if found is None or found.entry == line:
            return None
        return Hint(found.entry[pos:])