"""Syntax highlighting hooks and a matching-bracket highlighter."""

from __future__ import annotations

from .config import CompletionType

_OPEN_BRACKETS = frozenset("{[(")
_CLOSE_BRACKETS = frozenset("}])")
_MATCHING = {"{": "}", "}": "{", "[": "]", "]": "[", "(": ")", ")": "("}
_HIGHLIGHT_START = "\x1b[1;34m"
_RESET = "\x1b[0m"


def _paint(text: str, style: str | None) -> str:
    """Wrap `text` in the ANSI `style`, or return it as is when there is none."""
    if not style or not text:
        return text
    return f"{style}{text}{_RESET}"


class Highlighter:
    """Decorates the edited line, prompt, hint and candidates with ANSI colours.

    The highlighted text must keep the display width of the original.
    Subclasses may set `prompt_style`, `hint_style` or `candidate_style`
    to an ANSI escape sequence; with none set, everything is left untouched.
    """

    prompt_style: str | None = None
    hint_style: str | None = None
    candidate_style: str | None = None

    def highlight(self, line: str, pos: int) -> str:
        """Return the highlighted version of `line` with the cursor at `pos`."""
        return line

    def highlight_prompt(self, prompt: str, default: bool) -> str:
        """Return the highlighted version of `prompt`.

        Only the default prompt is styled; other prompts are returned as is.
        """
        return _paint(prompt, self.prompt_style) if default else prompt

    def highlight_hint(self, hint: str) -> str:
        """Return the highlighted version of `hint`."""
        return _paint(hint, self.hint_style)

    def highlight_candidate(self, candidate: str, completion: CompletionType) -> str:
        """Return the highlighted version of a completion candidate."""
        return _paint(candidate, self.candidate_style)

    def highlight_char(self, line: str, pos: int) -> bool:
        """Tell if `line` must be redrawn when the cursor is at `pos`."""
        return False


class MatchingBracketHighlighter(Highlighter):
    """Highlights the bracket matching the one typed or under the cursor."""

    def __init__(self) -> None:
        self._bracket: tuple[str, int] | None = None

    def highlight(self, line: str, pos: int) -> str:
        if len(line) <= 1 or self._bracket is None:
            return line
        bracket, bracket_pos = self._bracket
        found = find_matching_bracket(line, bracket_pos, bracket)
        if found is None:
            return line
        matching, idx = found
        return f"{line[:idx]}{_HIGHLIGHT_START}{matching}{_RESET}{line[idx + 1:]}"

    def highlight_char(self, line: str, pos: int) -> bool:
        self._bracket = check_bracket(line, pos)
        return self._bracket is not None


def find_matching_bracket(line: str, pos: int, bracket: str) -> tuple[str, int] | None:
    """Find the bracket that closes or opens the `bracket` found at `pos`."""
    matching = matching_bracket(bracket)
    unmatched = 1
    if is_open_bracket(bracket):
        candidates = enumerate(line[pos + 1:], start=pos + 1)
    else:
        candidates = reversed(list(enumerate(line[:pos])))
    for idx, c in candidates:
        if c == matching:
            unmatched -= 1
            if unmatched == 0:
                return matching, idx
        elif c == bracket:
            unmatched += 1
    return None


def check_bracket(line: str, pos: int) -> tuple[str, int] | None:
    """Return a bracket under or just before the cursor, with its position."""
    if not line:
        return None
    if pos >= len(line):
        pos = len(line) - 1
        c = line[pos]
        return (c, pos) if is_close_bracket(c) else None
    under_cursor = True
    while True:
        c = line[pos]
        if is_close_bracket(c):
            return None if pos == 0 else (c, pos)
        if is_open_bracket(c):
            return None if pos + 1 == len(line) else (c, pos)
        if under_cursor and pos > 0:
            under_cursor = False
            pos -= 1
        else:
            return None


def matching_bracket(bracket: str) -> str:
    """Return the counterpart of `bracket`, or `bracket` itself."""
    return _MATCHING.get(bracket, bracket)


def is_open_bracket(bracket: str) -> bool:
    return bracket in _OPEN_BRACKETS


def is_close_bracket(bracket: str) -> bool:
    return bracket in _CLOSE_BRACKETS