"""Key events, custom event handlers and the table that binds them."""

from __future__ import annotations

import abc
import bisect
import enum
from dataclasses import dataclass, field
from typing import Any, Protocol

from .config import EditMode


class KeyCode(enum.Enum):
    """Kind of key pressed."""

    UNKNOWN_ESC_SEQ = enum.auto()
    BACKSPACE = enum.auto()
    BACK_TAB = enum.auto()
    BRACKETED_PASTE_START = enum.auto()
    BRACKETED_PASTE_END = enum.auto()
    CHAR = enum.auto()
    DELETE = enum.auto()
    DOWN = enum.auto()
    END = enum.auto()
    ENTER = enum.auto()
    ESC = enum.auto()
    F = enum.auto()
    HOME = enum.auto()
    INSERT = enum.auto()
    LEFT = enum.auto()
    NULL = enum.auto()
    PAGE_DOWN = enum.auto()
    PAGE_UP = enum.auto()
    RIGHT = enum.auto()
    TAB = enum.auto()
    UP = enum.auto()


class Modifiers(enum.Flag):
    """Modifier keys held with a key."""

    NONE = 0
    SHIFT = enum.auto()
    ALT = enum.auto()
    CTRL = enum.auto()


_BASE = 0x0010_FFFF + 1
_BASE_CONTROL = 0x0200_0000
_BASE_META = 0x0400_0000
_BASE_SHIFT = 0x0100_0000
_ESCAPE = 27
_PAGE_UP = _BASE + 1
_PAGE_DOWN = _PAGE_UP + 1
_DOWN = _PAGE_DOWN + 1
_UP = _DOWN + 1
_LEFT = _UP + 1
_RIGHT = _LEFT + 1
_HOME = _RIGHT + 1
_END = _HOME + 1
_DELETE = _END + 1
_INSERT = _DELETE + 1
_MOUSE = _INSERT + 25
_PASTE_START = _MOUSE + 1
_PASTE_FINISH = _PASTE_START + 1
_ANY = _PASTE_FINISH + 1

_FIXED_CODES = {
    KeyCode.UNKNOWN_ESC_SEQ: 0,
    KeyCode.NULL: 0,
    KeyCode.BACKSPACE: 0x7F,
    KeyCode.BACK_TAB: ord("\t") | _BASE_SHIFT,
    KeyCode.BRACKETED_PASTE_START: _PASTE_START,
    KeyCode.BRACKETED_PASTE_END: _PASTE_FINISH,
    KeyCode.DELETE: _DELETE,
    KeyCode.DOWN: _DOWN,
    KeyCode.END: _END,
    KeyCode.ENTER: ord("\r"),
    KeyCode.ESC: _ESCAPE,
    KeyCode.HOME: _HOME,
    KeyCode.INSERT: _INSERT,
    KeyCode.LEFT: _LEFT,
    KeyCode.PAGE_DOWN: _PAGE_DOWN,
    KeyCode.PAGE_UP: _PAGE_UP,
    KeyCode.RIGHT: _RIGHT,
    KeyCode.TAB: ord("\t"),
    KeyCode.UP: _UP,
}


@dataclass(frozen=True)
class KeyEvent:
    """A key with its modifiers; `ch` is set for CHAR keys, `fn_index` for F keys."""

    code: KeyCode
    modifiers: Modifiers = Modifiers.NONE
    ch: str | None = None
    fn_index: int = 0

    def __post_init__(self) -> None:
        if self.code is KeyCode.CHAR:
            if self.ch is None or len(self.ch) != 1:
                raise ValueError(f"a character key needs exactly one character: {self.ch!r}")
        elif self.ch is not None:
            raise ValueError(f"only character keys carry a character: {self.code}")
        if self.code is KeyCode.F and not 0 <= self.fn_index <= 255:
            raise ValueError(f"function key number out of range: {self.fn_index}")

    @classmethod
    def ctrl(cls, c: str) -> "KeyEvent":
        """Character key pressed with Ctrl."""
        return cls(KeyCode.CHAR, Modifiers.CTRL, c)

    @classmethod
    def alt(cls, c: str) -> "KeyEvent":
        """Character key pressed with Alt."""
        return cls(KeyCode.CHAR, Modifiers.ALT, c)

    @classmethod
    def char(cls, c: str) -> "KeyEvent":
        """Character key pressed alone."""
        return cls(KeyCode.CHAR, Modifiers.NONE, c)

    def encode(self) -> int:
        """Encode the key as a single integer, unique per key and modifiers."""
        if self.code is KeyCode.CHAR:
            assert self.ch is not None
            value = ord(self.ch)
        elif self.code is KeyCode.F:
            value = _INSERT + self.fn_index
        else:
            value = _FIXED_CODES[self.code]
        if Modifiers.CTRL in self.modifiers:
            value |= _BASE_CONTROL
        if Modifiers.ALT in self.modifiers:
            value |= _BASE_META
        if Modifiers.SHIFT in self.modifiers:
            value |= _BASE_SHIFT
        return value


class EventKind(enum.Enum):
    """Kind of input event."""

    ANY = enum.auto()
    KEY_SEQ = enum.auto()
    MOUSE = enum.auto()


@dataclass(frozen=True)
class Event:
    """Input event: a wildcard, a key sequence or a mouse event."""

    kind: EventKind
    keys: tuple[KeyEvent, ...] = field(default=())

    @classmethod
    def any(cls) -> "Event":
        """Wildcard matching any input."""
        return cls(EventKind.ANY)

    @classmethod
    def key_seq(cls, keys) -> "Event":
        """Sequence of keys."""
        return cls(EventKind.KEY_SEQ, tuple(keys))

    @classmethod
    def mouse(cls) -> "Event":
        return cls(EventKind.MOUSE)

    @classmethod
    def from_key(cls, key: KeyEvent) -> "Event":
        """Sequence of a single key."""
        return cls(EventKind.KEY_SEQ, (key,))

    def get(self, i: int) -> KeyEvent | None:
        """Return the `i`th key of the sequence, or None."""
        if 0 <= i < len(self.keys):
            return self.keys[i]
        return None

    def encode_bytes(self) -> bytes:
        """Encode the event as bytes, so that key sequences sort by prefix."""
        if self.kind is EventKind.ANY:
            return _ANY.to_bytes(4, "big")
        if self.kind is EventKind.MOUSE:
            return _MOUSE.to_bytes(4, "big")
        return b"".join(key.encode().to_bytes(4, "big") for key in self.keys)


class _Refresher(Protocol):
    def has_hint(self) -> bool: ...

    def hint_text(self) -> str | None: ...

    def line(self) -> str: ...

    def pos(self) -> int: ...


class EventContext:
    """Gives event handlers access to the user input."""

    def __init__(self, mode: EditMode, input_mode: Any, refresher: _Refresher) -> None:
        self.mode = mode
        self.input_mode = input_mode
        self._refresher = refresher

    def has_hint(self) -> bool:
        """Tell if a hint is displayed."""
        return self._refresher.has_hint()

    def hint_text(self) -> str | None:
        """The hint text shown after the cursor."""
        return self._refresher.hint_text()

    def line(self) -> str:
        """The line being edited."""
        return self._refresher.line()

    def pos(self) -> int:
        """The cursor position."""
        return self._refresher.pos()


class ConditionalEventHandler(abc.ABC):
    """Handler whose command depends on the input state."""

    @abc.abstractmethod
    def handle(self, event: Event, n: int, positive: bool, ctx: EventContext) -> Any:
        """Return the command to perform, or None to perform the default one."""


@dataclass(frozen=True)
class EventHandler:
    """Either an unconditional command or a conditional handler."""

    command: Any = None
    conditional: ConditionalEventHandler | None = None

    def __post_init__(self) -> None:
        if (self.command is None) == (self.conditional is None):
            raise ValueError("give exactly one of a command or a conditional handler")


class BindingTrie:
    """Maps events to handlers, with lookup of key-sequence prefixes."""

    def __init__(self) -> None:
        self._handlers: dict[bytes, EventHandler] = {}
        self._keys: list[bytes] = []

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, event: Event) -> bool:
        return event.encode_bytes() in self._handlers

    def insert(self, event: Event, handler: EventHandler) -> EventHandler | None:
        """Bind `handler` to `event`; return the handler previously bound."""
        key = event.encode_bytes()
        previous = self._handlers.get(key)
        if previous is None:
            bisect.insort(self._keys, key)
        self._handlers[key] = handler
        return previous

    def get(self, event: Event) -> EventHandler | None:
        """Return the handler bound to exactly `event`, or None."""
        return self._handlers.get(event.encode_bytes())

    def has_prefix(self, event: Event) -> bool:
        """Tell if some bound event starts with `event`."""
        prefix = event.encode_bytes()
        i = bisect.bisect_left(self._keys, prefix)
        return i < len(self._keys) and self._keys[i].startswith(prefix)