import os

import pytest

from lineedit.completion import (
    Completer,
    FilenameCompleter,
    Pair,
    Quote,
    default_break_chars,
    escape,
    extract_word,
    find_unclosed_quote,
    longest_common_prefix,
    unescape,
)


def test_extract_word_after_quote():
    line = "ls '/usr/local/b"
    assert extract_word(line, len(line), "\\", default_break_chars) == (4, "/usr/local/b")


def test_extract_word_with_escaped_space():
    line = "ls /User\\ Information"
    assert extract_word(line, len(line), "\\", default_break_chars) == (3, "/User\\ Information")


def test_extract_word_empty_line():
    assert extract_word("", 0, "\\", default_break_chars) == (0, "")


def test_extract_word_without_break_char():
    assert extract_word("abc", 3, "\\", default_break_chars) == (0, "abc")


def test_unescape_unchanged():
    assert unescape("/usr/local/b", "\\") == "/usr/local/b"


def test_unescape_space():
    assert unescape("/User\\ Information", "\\") == "/User Information"


def test_unescape_without_escape_char():
    assert unescape("a\\ b", None) == "a\\ b"


def test_escape_unchanged():
    assert escape("/usr/local/b", "\\", default_break_chars, Quote.NONE) == "/usr/local/b"


def test_escape_space():
    assert (
        escape("/User Information", "\\", default_break_chars, Quote.NONE)
        == "/User\\ Information"
    )


def test_escape_inside_single_quote():
    assert escape("a b", "\\", default_break_chars, Quote.SINGLE) == "a b"


def test_escape_unescape_round_trip():
    text = "my file name"
    assert unescape(escape(text, "\\", default_break_chars, Quote.NONE), "\\") == text


def test_longest_common_prefix():
    candidates = []
    assert longest_common_prefix(candidates) is None
    candidates.append("User")
    assert longest_common_prefix(candidates) == "User"
    candidates.append("Users")
    assert longest_common_prefix(candidates) == "User"
    candidates.append("")
    assert longest_common_prefix(candidates) is None
    assert longest_common_prefix(["fée", "fête"]) == "f"


def test_longest_common_prefix_of_pairs():
    pairs = [Pair("a", "abcd"), Pair("b", "abxy")]
    assert longest_common_prefix(pairs) == "ab"


def test_find_unclosed_quote():
    assert find_unclosed_quote("ls /etc") is None
    assert find_unclosed_quote('ls "User Information') == (3, Quote.DOUBLE)
    assert find_unclosed_quote('ls "/User Information" /etc') is None
    assert find_unclosed_quote('"c:\\users\\All Users\\') == (0, Quote.DOUBLE)


def test_find_unclosed_single_quote():
    assert find_unclosed_quote("ls 'abc") == (3, Quote.SINGLE)


@pytest.mark.parametrize("c, expected", [(" ", True), ("(", True), ("a", False), ("/", False)])
def test_default_break_chars(c, expected):
    assert default_break_chars(c) is expected


def test_default_completer_offers_nothing():
    assert Completer().complete("abc", 3, None) == (0, [])


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    (tmp_path / "foo.txt").write_text("x")
    (tmp_path / "food").mkdir()
    (tmp_path / "bar").write_text("x")
    (tmp_path / "my file").write_text("x")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_complete_path_sorted_with_directory_separator(workdir):
    start, matches = FilenameCompleter().complete_path("cat fo", 6)
    assert start == 4
    assert [m.display for m in matches] == ["foo.txt", "food"]
    assert [m.replacement for m in matches] == ["foo.txt", "food" + os.sep]


def test_complete_escapes_space(workdir):
    start, matches = FilenameCompleter().complete("cat my", 6, None)
    assert start == 4
    assert matches == [Pair(display="my file", replacement="my\\ file")]


def test_complete_inside_double_quote(workdir):
    line = 'cat "my'
    start, matches = FilenameCompleter().complete_path(line, len(line))
    assert start == 5
    assert matches == [Pair(display="my file", replacement="my file")]


def test_complete_in_subdirectory(workdir):
    (workdir / "food" / "apple").write_text("x")
    line = "cat food" + os.sep + "a"
    start, matches = FilenameCompleter().complete_path(line, len(line))
    assert start == 4
    assert matches == [Pair(display="apple", replacement="food" + os.sep + "apple")]


def test_complete_missing_directory(workdir):
    line = "cat nowhere" + os.sep + "x"
    assert FilenameCompleter().complete_path(line, len(line)) == (4, [])