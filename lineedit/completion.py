"""Tab-completion API and a completer for file and folder names."""

from __future__ import annotations

import enum
import os
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, Union

_WINDOWS = os.name == "nt"
_CASE_INSENSITIVE_FS = _WINDOWS or sys.platform == "darwin"

DOUBLE_QUOTES_ESCAPE_CHAR: str | None = "\\"
ESCAPE_CHAR: str | None = None if _WINDOWS else "\\"

if _WINDOWS:
    # Backslash is a path separator here, so it cannot break words.
    _BREAK_CHARS = frozenset(" \t\n\"'`@$><=;|&{(\0")
    _DOUBLE_QUOTES_SPECIAL_CHARS = frozenset('"')
else:
    _BREAK_CHARS = frozenset(" \t\n\"\\'`@$><=;|&{(\0")
    _DOUBLE_QUOTES_SPECIAL_CHARS = frozenset('"$\\`')


def default_break_chars(c: str) -> bool:
    """Tell whether `c` separates words for completion purposes."""
    return c in _BREAK_CHARS


def double_quotes_special_chars(c: str) -> bool:
    """Tell whether `c` must be escaped inside double quotes."""
    return c in _DOUBLE_QUOTES_SPECIAL_CHARS


class Candidate(Protocol):
    """A completion candidate."""

    @property
    def display(self) -> str:
        """Text to display when listing alternatives."""
        ...

    @property
    def replacement(self) -> str:
        """Text to insert in the line."""
        ...


@dataclass(frozen=True)
class Pair:
    """Completion candidate with distinct display and replacement texts."""

    display: str
    replacement: str


CandidateLike = Union[str, Candidate]


def _replacement(candidate: CandidateLike) -> str:
    return candidate if isinstance(candidate, str) else candidate.replacement


def _display(candidate: CandidateLike) -> str:
    return candidate if isinstance(candidate, str) else candidate.display


class Completer:
    """Provides completion candidates; the default offers none."""

    def complete(self, line: str, pos: int, ctx: Any) -> tuple[int, list[CandidateLike]]:
        """Return the start of the word to complete and the candidates for it."""
        return 0, []


class Quote(enum.Enum):
    """Kind of quote."""

    DOUBLE = '"'
    SINGLE = "'"
    NONE = ""


class _ScanMode(enum.Enum):
    DOUBLE_QUOTE = enum.auto()
    ESCAPE = enum.auto()
    ESCAPE_IN_DOUBLE_QUOTE = enum.auto()
    NORMAL = enum.auto()
    SINGLE_QUOTE = enum.auto()


BreakPredicate = Callable[[str], bool]


class FilenameCompleter(Completer):
    """Completer for file and folder names."""

    def __init__(
        self,
        break_chars: BreakPredicate = default_break_chars,
        double_quotes_special: BreakPredicate = double_quotes_special_chars,
    ) -> None:
        self._break_chars = break_chars
        self._double_quotes_special_chars = double_quotes_special

    def complete_path(self, line: str, pos: int) -> tuple[int, list[Pair]]:
        """Return the start position and the sorted candidates for the path at `pos`."""
        start, matches = self.complete_path_unsorted(line, pos)
        matches.sort(key=lambda pair: pair.display)
        return start, matches

    def complete_path_unsorted(self, line: str, pos: int) -> tuple[int, list[Pair]]:
        """Like `complete_path`, without sorting the candidates."""
        unclosed = find_unclosed_quote(line[:pos])
        if unclosed is not None:
            idx, quote = unclosed
            start = idx + 1
            if quote is Quote.DOUBLE:
                path = unescape(line[start:pos], DOUBLE_QUOTES_ESCAPE_CHAR)
                esc_char = DOUBLE_QUOTES_ESCAPE_CHAR
                break_chars = self._double_quotes_special_chars
            else:
                path = line[start:pos]
                esc_char = None
                break_chars = self._break_chars
        else:
            start, word = extract_word(line, pos, ESCAPE_CHAR, self._break_chars)
            path = unescape(word, ESCAPE_CHAR)
            esc_char = ESCAPE_CHAR
            break_chars = self._break_chars
            quote = Quote.NONE
        return start, _filename_complete(path, esc_char, break_chars, quote)

    def complete(self, line: str, pos: int, ctx: Any) -> tuple[int, list[Pair]]:
        return self.complete_path(line, pos)


def unescape(text: str, esc_char: str | None) -> str:
    """Remove the escape character `esc_char` from `text`."""
    if esc_char is None or esc_char not in text:
        return text
    result: list[str] = []
    chars = iter(text)
    for ch in chars:
        if ch != esc_char:
            result.append(ch)
            continue
        following = next(chars, None)
        if following is not None:
            if _WINDOWS and following != '"':
                result.append(esc_char)
            result.append(following)
        elif _WINDOWS:
            result.append(ch)
    return "".join(result)


def escape(text: str, esc_char: str | None, is_break_char: BreakPredicate, quote: Quote) -> str:
    """Escape every break character of `text` with `esc_char`."""
    if quote is Quote.SINGLE:
        return text
    if not any(is_break_char(c) for c in text):
        return text
    if esc_char is None:
        if _WINDOWS and quote is Quote.NONE:
            return '"' + text
        return text
    return "".join(esc_char + c if is_break_char(c) else c for c in text)


def _normalize(s: str) -> str:
    return s.lower() if _CASE_INSENSITIVE_FS else s


def _resolve_dir(dir_name: str) -> Path:
    dir_path = Path(dir_name)
    if dir_path.parts and dir_path.parts[0] == "~":
        try:
            home = Path.home()
        except RuntimeError:
            return dir_path
        return home.joinpath(*dir_path.parts[1:])
    if not dir_path.is_absolute():
        try:
            return Path.cwd() / dir_path
        except OSError:
            return dir_path
    return dir_path


def _filename_complete(
    path: str, esc_char: str | None, is_break_char: BreakPredicate, quote: Quote
) -> list[Pair]:
    sep = os.sep
    idx = path.rfind(sep)
    if idx >= 0:
        dir_name, file_name = path[: idx + 1], path[idx + 1 :]
    else:
        dir_name, file_name = "", path

    directory = _resolve_dir(dir_name)
    entries: list[Pair] = []
    if not directory.exists():
        return entries

    prefix = _normalize(file_name)
    try:
        with os.scandir(directory) as listing:
            for entry in listing:
                if not _normalize(entry.name).startswith(prefix):
                    continue
                try:
                    is_dir = os.stat(entry.path).st_mode is not None and Path(entry.path).is_dir()
                except OSError:
                    continue
                candidate = dir_name + entry.name + (sep if is_dir else "")
                entries.append(
                    Pair(
                        display=entry.name,
                        replacement=escape(candidate, esc_char, is_break_char, quote),
                    )
                )
    except OSError:
        pass
    return entries


def extract_word(
    line: str, pos: int, esc_char: str | None, is_break_char: BreakPredicate
) -> tuple[int, str]:
    """Find backward from `pos` the start of a word; return it and the word."""
    line = line[:pos]
    if not line:
        return 0, line
    start: int | None = None
    for i, c in reversed(list(enumerate(line))):
        if esc_char is not None and start is not None:
            if c == esc_char:
                start = None
                continue
            break
        if is_break_char(c):
            start = i + 1
            if esc_char is None:
                break
    if start is None:
        return 0, line
    return start, line[start:]


def longest_common_prefix(candidates: Sequence[CandidateLike]) -> str | None:
    """Return the longest common prefix of the candidates' replacements."""
    if not candidates:
        return None
    if len(candidates) == 1:
        return _replacement(candidates[0])
    prefix = os.path.commonprefix([_replacement(c) for c in candidates])
    return prefix or None


def find_unclosed_quote(s: str) -> tuple[int, Quote] | None:
    """Return the position and kind of an unclosed quote in `s`, or None."""
    mode = _ScanMode.NORMAL
    quote_index = 0
    for index, char in enumerate(s):
        if mode is _ScanMode.DOUBLE_QUOTE:
            if char == '"':
                mode = _ScanMode.NORMAL
            elif char == "\\":
                mode = _ScanMode.ESCAPE_IN_DOUBLE_QUOTE
        elif mode is _ScanMode.ESCAPE:
            mode = _ScanMode.NORMAL
        elif mode is _ScanMode.ESCAPE_IN_DOUBLE_QUOTE:
            mode = _ScanMode.DOUBLE_QUOTE
        elif mode is _ScanMode.NORMAL:
            if char == '"':
                mode = _ScanMode.DOUBLE_QUOTE
                quote_index = index
            elif char == "\\" and not _WINDOWS:
                mode = _ScanMode.ESCAPE
            elif char == "'" and not _WINDOWS:
                mode = _ScanMode.SINGLE_QUOTE
                quote_index = index
        elif mode is _ScanMode.SINGLE_QUOTE:
            if char == "'":
                mode = _ScanMode.NORMAL
    if mode in (_ScanMode.DOUBLE_QUOTE, _ScanMode.ESCAPE_IN_DOUBLE_QUOTE):
        return quote_index, Quote.DOUBLE
    if mode is _ScanMode.SINGLE_QUOTE:
        return quote_index, Quote.SINGLE
    return None