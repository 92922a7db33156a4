"""Exceptions raised while reading a line."""


class ReadlineError(Exception):
    """Base class for line editor errors."""


class Eof(ReadlineError):
    """End of input (Ctrl-D on an empty line)."""

    def __str__(self) -> str:
        return "EOF"


class Interrupted(ReadlineError):
    """Interrupt signal (Ctrl-C); carries the line being edited."""

    def __init__(self, line: str = "") -> None:
        super().__init__(line)
        self.line = line

    def __str__(self) -> str:
        return f"Interrupted({self.line})"


class WindowResized(ReadlineError):
    """The terminal window was resized while reading."""

    def __str__(self) -> str:
        return "WindowResized"