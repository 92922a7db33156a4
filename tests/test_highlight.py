import pytest

from lineedit.config import CompletionType
from lineedit.highlight import (
    Highlighter,
    MatchingBracketHighlighter,
    check_bracket,
    find_matching_bracket,
    is_close_bracket,
    is_open_bracket,
    matching_bracket,
)


@pytest.mark.parametrize(
    "line, pos, bracket, expected",
    [
        ("(...", 0, "(", None),
        ("...)", 3, ")", None),
        ("()..", 0, "(", (")", 1)),
        ("(..)", 0, "(", (")", 3)),
        ("..()", 3, ")", ("(", 2)),
        ("(..)", 3, ")", ("(", 0)),
        ("(())", 0, "(", (")", 3)),
        ("(())", 3, ")", ("(", 0)),
    ],
)
def test_find_matching_bracket(line, pos, bracket, expected):
    assert find_matching_bracket(line, pos, bracket) == expected


@pytest.mark.parametrize(
    "line, pos, expected",
    [
        (")...", 0, None),
        ("(...", 2, None),
        ("...(", 3, None),
        ("...(", 4, None),
        ("..).", 4, None),
        ("(...", 0, ("(", 0)),
        ("(...", 1, ("(", 0)),
        ("...)", 3, (")", 3)),
        ("...)", 4, (")", 3)),
        ("", 0, None),
    ],
)
def test_check_bracket(line, pos, expected):
    assert check_bracket(line, pos) == expected


def test_matching_bracket():
    assert matching_bracket("(") == ")"
    assert matching_bracket(")") == "("
    assert matching_bracket("[") == "]"
    assert matching_bracket("x") == "x"


def test_is_open_and_close_bracket():
    assert is_open_bracket("(")
    assert is_close_bracket(")")
    assert not is_open_bracket(")")
    assert not is_close_bracket("(")


def test_default_highlighter_is_identity():
    h = Highlighter()
    assert h.highlight("abc", 1) == "abc"
    assert h.highlight_prompt("> ", True) == "> "
    assert h.highlight_hint("hint") == "hint"
    assert h.highlight_candidate("cand", CompletionType.LIST) == "cand"
    assert h.highlight_char("abc", 0) is False


def test_matching_bracket_highlighter_highlights_closing():
    h = MatchingBracketHighlighter()
    assert h.highlight_char("(..)", 0) is True
    assert h.highlight("(..)", 0) == "(..\x1b[1;34m)\x1b[0m"


def test_matching_bracket_highlighter_highlights_opening():
    h = MatchingBracketHighlighter()
    assert h.highlight_char("a(b)", 4) is True
    assert h.highlight("a(b)", 4) == "a\x1b[1;34m(\x1b[0mb)"


def test_matching_bracket_highlighter_no_bracket():
    h = MatchingBracketHighlighter()
    assert h.highlight_char("abc", 1) is False
    assert h.highlight("abc", 1) == "abc"


def test_matching_bracket_highlighter_short_line():
    h = MatchingBracketHighlighter()
    h.highlight_char("(..)", 0)
    assert h.highlight("(", 0) == "("