"""Command history persisted in a file, with locking and incremental appends."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from .config import Config, HistoryDuplicates
from .history import History, MemHistory, SearchDirection, SearchResult

try:
    import fcntl
except ImportError:  # pragma: no cover - platforms without flock
    fcntl = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)

_FILE_VERSION_V2 = "#V2"
_PRIVATE_UMASK = 0o177
_PRIVATE_MODE = 0o600


@dataclass
class _PathInfo:
    """Last history path used, with its modification time and entry count."""

    path: Path
    modified: int
    size: int


@contextmanager
def _locked(file: BinaryIO, exclusive: bool) -> Iterator[BinaryIO]:
    if fcntl is None:
        yield file
        return
    fcntl.flock(file.fileno(), fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH)
    try:
        yield file
    finally:
        fcntl.flock(file.fileno(), fcntl.LOCK_UN)


@contextmanager
def _private_umask() -> Iterator[None]:
    if os.name != "posix":
        yield
        return
    old = os.umask(_PRIVATE_UMASK)
    try:
        yield
    finally:
        os.umask(old)


def _fix_perm(file: BinaryIO) -> None:
    if os.name == "posix" and hasattr(os, "fchmod"):
        try:
            os.fchmod(file.fileno(), _PRIVATE_MODE)
        except OSError:
            pass


def _modified(file: BinaryIO) -> int:
    return os.fstat(file.fileno()).st_mtime_ns


def _escape(entry: str) -> str:
    return entry.replace("\\", "\\\\").replace("\n", "\\n")


def _unescape(line: str) -> str:
    if "\\" not in line:
        return line
    out: list[str] = []
    chars = iter(line)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        escaped = next(chars, "")
        if escaped == "n":
            out.append("\n")
        elif escaped == "\\":
            out.append("\\")
        else:
            logger.warning("bad escaped line: %s", line)
            return line
    return "".join(out)


def _split_lines(data: str) -> list[str]:
    lines = data.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class FileHistory(History):
    """History kept in memory and stored in a file on demand."""

    def __init__(self, config: Config | None = None) -> None:
        config = config if config is not None else Config()
        self._mem = MemHistory(config)
        self._ignore_space = config.history_ignore_space
        self._ignore_dups = config.history_duplicates is HistoryDuplicates.IGNORE_CONSECUTIVE
        self._new_entries = 0
        self._path_info: _PathInfo | None = None

    @classmethod
    def with_config(cls, config: Config) -> "FileHistory":
        """Build a history honouring the size and filtering settings of `config`."""
        return cls(config)

    @property
    def max_len(self) -> int:
        """Maximum number of entries kept."""
        return self._mem.max_len

    @property
    def new_entries(self) -> int:
        """Number of entries added and not yet written to a file."""
        return self._new_entries

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._mem)!r}, max_len={self.max_len})"

    def _sibling(self) -> "FileHistory":
        other = FileHistory()
        other._mem.set_max_len(self.max_len)
        other.ignore_space(self._ignore_space)
        other.ignore_dups(self._ignore_dups)
        return other

    # --- navigation, delegated to the in-memory store ---

    def get(self, index: int, direction: SearchDirection = SearchDirection.FORWARD) -> SearchResult | None:
        return self._mem.get(index, direction)

    def __len__(self) -> int:
        return len(self._mem)

    def __getitem__(self, index: int) -> str:
        return self._mem[index]

    def __iter__(self) -> Iterator[str]:
        return iter(self._mem)

    def search(self, term: str, start: int, direction: SearchDirection) -> SearchResult | None:
        return self._mem.search(term, start, direction)

    def starts_with(self, term: str, start: int, direction: SearchDirection) -> SearchResult | None:
        return self._mem.starts_with(term, start, direction)

    # --- mutation ---

    def add(self, line: str) -> bool:
        if not self._mem.add(line):
            return False
        self._new_entries = min(self._new_entries + 1, len(self))
        return True

    def set_max_len(self, length: int) -> None:
        self._mem.set_max_len(length)
        self._new_entries = min(self._new_entries, length)

    def ignore_dups(self, yes: bool) -> None:
        self._ignore_dups = yes
        self._mem.ignore_dups(yes)

    def ignore_space(self, yes: bool) -> None:
        self._ignore_space = yes
        self._mem.ignore_space(yes)

    def clear(self) -> None:
        self._mem.clear()
        self._new_entries = 0

    # --- persistence ---

    def _save_to(self, file: BinaryIO, append: bool) -> None:
        _fix_perm(file)
        if append:
            entries = list(self._mem)[max(len(self) - self._new_entries, 0):]
            header = ""
        else:
            entries = list(self._mem)
            header = _FILE_VERSION_V2 + "\n"
        body = "".join(_escape(entry) + "\n" for entry in entries)
        file.write((header + body).encode("utf-8"))
        file.flush()

    def _load_from(self, file: BinaryIO) -> bool:
        lines = _split_lines(file.read().decode("utf-8"))
        v2 = False
        if lines:
            first, lines = lines[0], lines[1:]
            if first == _FILE_VERSION_V2:
                v2 = True
            else:
                self.add(first)
        appendable = v2
        for line in lines:
            if not line:
                continue
            if v2:
                line = _unescape(line)
            appendable = self.add(line) and appendable
        self._new_entries = 0
        return appendable

    def _update_path(self, path: Path, file: BinaryIO, size: int) -> None:
        modified = _modified(file)
        self._path_info = _PathInfo(path, modified, size)
        logger.debug("PathInfo(%s, %s, %s)", path, modified, size)

    def _can_just_append(self, path: Path, file: BinaryIO) -> bool:
        info = self._path_info
        if info is None:
            return False
        if info.path != path:
            logger.debug("cannot append: %s <> %s", info.path, path)
            return False
        if (
            info.modified != _modified(file)
            or self.max_len <= info.size
            or self.max_len < info.size + self._new_entries
        ):
            logger.debug("cannot append to %s", path)
            return False
        return True

    def save(self, path: str | os.PathLike[str]) -> None:
        """Write the whole history to `path`, replacing its content."""
        if len(self) == 0 or self._new_entries == 0:
            return
        path = Path(path)
        with _private_umask():
            file = open(path, "wb")
        with file, _locked(file, exclusive=True):
            self._save_to(file, append=False)
            self._new_entries = 0
            self._update_path(path, file, len(self))

    def append(self, path: str | os.PathLike[str]) -> None:
        """Add the entries not yet written to `path`, merging with its content."""
        if len(self) == 0 or self._new_entries == 0:
            return
        path = Path(path)
        if not path.exists() or self._new_entries == self.max_len:
            self.save(path)
            return
        with open(path, "r+b") as file, _locked(file, exclusive=True):
            if self._can_just_append(path, file):
                file.seek(0, os.SEEK_END)
                self._save_to(file, append=True)
                assert self._path_info is not None
                size = self._path_info.size + self._new_entries
                self._new_entries = 0
                self._update_path(path, file, size)
                return
            other = self._sibling()
            other._load_from(file)
            first_new = max(len(self) - self._new_entries, 0)
            for entry in list(self._mem)[first_new:]:
                other.add(entry)
            file.seek(0)
            file.truncate(0)
            other._save_to(file, append=False)
            self._update_path(path, file, len(other))
            self._new_entries = 0

    def load(self, path: str | os.PathLike[str]) -> None:
        """Read entries from `path`; raises OSError if it cannot be read."""
        path = Path(path)
        with open(path, "rb") as file, _locked(file, exclusive=False):
            before = len(self)
            if self._load_from(file):
                self._update_path(path, file, len(self) - before)
            else:
                # discard the old format on next save
                self._path_info = None