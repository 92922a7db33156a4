import pytest

from lineedit.binding import (
    BindingTrie,
    ConditionalEventHandler,
    Event,
    EventContext,
    EventHandler,
    KeyCode,
    KeyEvent,
    Modifiers,
)
from lineedit.config import EditMode


class _FakeRefresher:
    def __init__(self, line, pos, hint=None):
        self._line = line
        self._pos = pos
        self._hint = hint

    def has_hint(self):
        return self._hint is not None

    def hint_text(self):
        return self._hint

    def line(self):
        return self._line

    def pos(self):
        return self._pos


class _TabHandler(ConditionalEventHandler):
    def handle(self, event, n, positive, ctx):
        before = ctx.line()[: ctx.pos()]
        if before and before[-1].isspace():
            return ("self-insert", n, "\t")
        return None


def test_encode():
    trie = BindingTrie()
    evt = Event.key_seq([KeyEvent.ctrl("X"), KeyEvent.ctrl("E")])
    handler = EventHandler(command="noop")
    trie.insert(evt, handler)
    assert trie.has_prefix(Event.from_key(KeyEvent.ctrl("X")))
    assert trie.get(evt) is handler
    assert not trie.has_prefix(Event.from_key(KeyEvent.ctrl("O")))


def test_no_collision():
    trie = BindingTrie()
    for code in (KeyCode.BACKSPACE, KeyCode.ENTER, KeyCode.TAB):
        for mods in (Modifiers.NONE, Modifiers.CTRL):
            assert trie.insert(Event.from_key(KeyEvent(code, mods)), EventHandler(command="noop")) is None
    assert len(trie) == 6


def test_insert_replaces_and_returns_previous():
    trie = BindingTrie()
    evt = Event.from_key(KeyEvent.alt("n"))
    first = EventHandler(command="first")
    second = EventHandler(command="second")
    assert trie.insert(evt, first) is None
    assert trie.insert(evt, second) is first
    assert trie.get(evt) is second
    assert len(trie) == 1
    assert evt in trie


def test_get_unbound_is_none():
    trie = BindingTrie()
    assert trie.get(Event.any()) is None


def test_key_encodings():
    assert KeyEvent.char("a").encode() == ord("a")
    assert KeyEvent.ctrl("X").encode() == 0x0200_0000 | ord("X")
    assert KeyEvent.alt("f").encode() == 0x0400_0000 | ord("f")
    assert KeyEvent(KeyCode.ESC).encode() == 27
    assert KeyEvent(KeyCode.BACKSPACE).encode() == 0x7F
    assert KeyEvent(KeyCode.ENTER).encode() == ord("\r")
    assert KeyEvent(KeyCode.BACK_TAB).encode() == ord("\t") | 0x0100_0000
    assert KeyEvent(KeyCode.PAGE_UP).encode() == 0x0011_0001


def test_event_encode_bytes():
    assert Event.any().encode_bytes() == (0x0011_0026).to_bytes(4, "big")
    assert Event.mouse().encode_bytes() == (0x0011_0023).to_bytes(4, "big")
    seq = Event.key_seq([KeyEvent.char("a"), KeyEvent.char("b")])
    assert seq.encode_bytes() == b"\x00\x00\x00a\x00\x00\x00b"


def test_event_get():
    key = KeyEvent.ctrl("E")
    evt = Event.from_key(key)
    assert evt.get(0) == key
    assert evt.get(1) is None
    assert Event.any().get(0) is None


def test_event_equality():
    assert Event.from_key(KeyEvent.char("\t")) == Event.key_seq([KeyEvent.char("\t")])
    assert Event.any() != Event.mouse()


def test_key_event_validation():
    with pytest.raises(ValueError):
        KeyEvent(KeyCode.CHAR)
    with pytest.raises(ValueError):
        KeyEvent.ctrl("ab")
    with pytest.raises(ValueError):
        KeyEvent(KeyCode.TAB, ch="x")


def test_event_handler_requires_exactly_one():
    with pytest.raises(ValueError):
        EventHandler()
    with pytest.raises(ValueError):
        EventHandler(command="noop", conditional=_TabHandler())


def test_conditional_handler_is_abstract():
    with pytest.raises(TypeError):
        ConditionalEventHandler()


def test_event_context_delegates():
    ctx = EventContext(EditMode.VI, "insert", _FakeRefresher("abc", 2, hint="def"))
    assert ctx.mode is EditMode.VI
    assert ctx.input_mode == "insert"
    assert ctx.has_hint() is True
    assert ctx.hint_text() == "def"
    assert ctx.line() == "abc"
    assert ctx.pos() == 2


def test_conditional_handler_uses_context():
    handler = _TabHandler()
    evt = Event.from_key(KeyEvent.char("\t"))
    after_space = EventContext(EditMode.EMACS, None, _FakeRefresher("ls ", 3))
    after_word = EventContext(EditMode.EMACS, None, _FakeRefresher("ls", 2))
    assert handler.handle(evt, 2, True, after_space) == ("self-insert", 2, "\t")
    assert handler.handle(evt, 1, True, after_word) is None