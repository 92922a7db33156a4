"""In-memory command history with search."""

from __future__ import annotations

import abc
import enum
from collections import deque
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from .config import Config, HistoryDuplicates


class SearchDirection(enum.Enum):
    """Direction in which the history is searched."""

    FORWARD = "forward"
    REVERSE = "reverse"


@dataclass(frozen=True)
class SearchResult:
    """A history entry found by a lookup or a search."""

    entry: str
    idx: int
    pos: int


class History(abc.ABC):
    """Interface for navigating and storing history entries."""

    @abc.abstractmethod
    def get(self, index: int, direction: SearchDirection = SearchDirection.FORWARD) -> SearchResult | None:
        """Return the entry at `index` (starting from 0), or None."""

    @abc.abstractmethod
    def add(self, line: str) -> bool:
        """Add a new entry; return whether it was actually stored."""

    @abc.abstractmethod
    def __len__(self) -> int:
        """Number of entries."""

    @abc.abstractmethod
    def set_max_len(self, length: int) -> None:
        """Set the maximum number of entries, dropping the oldest if needed."""

    @abc.abstractmethod
    def ignore_dups(self, yes: bool) -> None:
        """Ignore lines equal to the previous entry."""

    @abc.abstractmethod
    def ignore_space(self, yes: bool) -> None:
        """Ignore lines that begin with whitespace."""

    @abc.abstractmethod
    def clear(self) -> None:
        """Remove every entry."""

    @abc.abstractmethod
    def search(self, term: str, start: int, direction: SearchDirection) -> SearchResult | None:
        """Find the nearest entry containing `term`, starting at `start` inclusive."""

    @abc.abstractmethod
    def starts_with(self, term: str, start: int, direction: SearchDirection) -> SearchResult | None:
        """Find the nearest entry beginning with `term`, starting at `start` inclusive."""


class MemHistory(History):
    """Transient in-memory history."""

    def __init__(self, config: Config | None = None) -> None:
        config = config if config is not None else Config()
        self._entries: deque[str] = deque()
        self._max_len = config.max_history_size
        self._ignore_space = config.history_ignore_space
        self._ignore_dups = config.history_duplicates is HistoryDuplicates.IGNORE_CONSECUTIVE

    @classmethod
    def with_config(cls, config: Config) -> "MemHistory":
        """Build a history honouring the size and filtering settings of `config`."""
        return cls(config)

    @property
    def max_len(self) -> int:
        """Maximum number of entries kept."""
        return self._max_len

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._entries)!r}, max_len={self._max_len})"

    def _ignore(self, line: str) -> bool:
        if self._max_len == 0:
            return True
        if not line or (self._ignore_space and line[0].isspace()):
            return True
        return self._ignore_dups and bool(self._entries) and self._entries[-1] == line

    def _insert(self, line: str) -> None:
        if len(self._entries) >= self._max_len:
            self._entries.popleft()
        self._entries.append(line)

    def _search_match(
        self,
        term: str,
        start: int,
        direction: SearchDirection,
        test: Callable[[str], int | None],
    ) -> SearchResult | None:
        if not term or start < 0 or start >= len(self._entries):
            return None
        if direction is SearchDirection.REVERSE:
            indices = range(start, -1, -1)
        else:
            indices = range(start, len(self._entries))
        for idx in indices:
            entry = self._entries[idx]
            pos = test(entry)
            if pos is not None:
                return SearchResult(entry=entry, idx=idx, pos=pos)
        return None

    def get(self, index: int, direction: SearchDirection = SearchDirection.FORWARD) -> SearchResult | None:
        if 0 <= index < len(self._entries):
            return SearchResult(entry=self._entries[index], idx=index, pos=0)
        return None

    def add(self, line: str) -> bool:
        if self._ignore(line):
            return False
        self._insert(line)
        return True

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> str:
        return self._entries[index]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def set_max_len(self, length: int) -> None:
        if length < 0:
            raise ValueError(f"history length must not be negative: {length}")
        self._max_len = length
        while len(self._entries) > length:
            self._entries.popleft()

    def ignore_dups(self, yes: bool) -> None:
        self._ignore_dups = yes

    def ignore_space(self, yes: bool) -> None:
        self._ignore_space = yes

    def clear(self) -> None:
        self._entries.clear()

    def search(self, term: str, start: int, direction: SearchDirection) -> SearchResult | None:
        def test(entry: str) -> int | None:
            found = entry.find(term)
            return None if found < 0 else found

        return self._search_match(term, start, direction, test)

    def starts_with(self, term: str, start: int, direction: SearchDirection) -> SearchResult | None:
        def test(entry: str) -> int | None:
            return len(term) if entry.startswith(term) else None

        return self._search_match(term, start, direction, test)