# lineedit

This package provides components for building interactive line editors and
REPLs. It covers configuration, command history (in memory or in a file),
filename completion, history-based hints, bracket highlighting and key
bindings. The package has no dependencies outside the standard library.

## Installation

```
pip install lineedit
```

To run the test suite:

```
pip install "lineedit[test]"
pytest
```

## Modules

### `lineedit.config`

`Config` is a frozen dataclass of editor preferences. These are the fields and
their defaults:

- `max_history_size`: 100
- `history_duplicates`: `HistoryDuplicates.IGNORE_CONSECUTIVE`
- `history_ignore_space`: `False`
- `completion_type`: `CompletionType.CIRCULAR`
- `completion_prompt_limit`: 100
- `keyseq_timeout`: -1
- `edit_mode`: `EditMode.EMACS`
- `auto_add_history`: `False`
- `bell_style`: `BellStyle.AUDIBLE`, or `BellStyle.NONE` on Windows
- `color_mode`: `ColorMode.ENABLED`
- `behavior`: `Behavior.STDIO`
- `tab_stop`: 8
- `indent_size`: 2
- `check_cursor_position`: `False`
- `enable_bracketed_paste`: `True`

`Config.builder()` returns a `Builder`. Its methods can be chained, and
`build()` returns the finished `Config`.

Setting the edit mode also sets the key-sequence timeout. `EditMode.VI` sets it
to 500 ms and `EditMode.EMACS` sets it to -1.

The history size, completion prompt limit, tab stop and indent size cannot be
negative. A negative value raises `ValueError`.

`Configurer` is a mixin that provides the same setters (`set_max_history_size`,
`set_edit_mode` and the rest) to any object that has a `config` attribute.

### `lineedit.errors`

This module defines `ReadlineError` and its subclasses:

- `Eof`
- `Interrupted`, which carries the edited line in its `line` attribute
- `WindowResized`

### `lineedit.history`

`History` is the abstract interface for a history. `MemHistory` is an
in-memory implementation of it. It is built from a `Config`, either with
`MemHistory(config)` or with `MemHistory.with_config(config)`.

`MemHistory.add(line)` returns `False` when the line was not stored. That
happens in four cases:

- the line is empty
- the line starts with whitespace and leading spaces are ignored
- the line repeats the previous entry and duplicates are ignored
- the maximum length is 0

A `MemHistory` supports `len()`, indexing and iteration. `get(index)` returns a
`SearchResult`, or `None` when the index is out of range.

`search(term, start, direction)` finds the nearest entry that contains `term`.
`starts_with(term, start, direction)` finds the nearest entry that begins with
`term`. Both start at index `start`, include it, and move in the given
`SearchDirection` (`FORWARD` or `REVERSE`). Both return a `SearchResult` with
these fields:

- `entry`: the text of the entry
- `idx`: the index of the entry
- `pos`: the match position for `search`, or the end of the matched prefix for
  `starts_with`

`set_max_len(length)` sets the maximum length and drops the oldest entries
beyond it.

### `lineedit.file_history`

`FileHistory` is a history kept in memory that can be written to a file.

- `save(path)` rewrites the file. It writes a `#V2` header line, and escapes
  newlines and backslashes in each entry.
- `append(path)` writes only the entries added since the last save. If the
  file changed in the meantime, or the merged result would exceed the maximum
  length, it merges the file's content with those entries and rewrites the
  file.
- `load(path)` reads both the `#V2` format and plain line-per-entry files. It
  raises `OSError` if the file cannot be read.

On POSIX systems:

- files are locked with `flock` while they are read or written
- new files are created with mode `0600`

### `lineedit.completion`

`Completer` is the base class. Its `complete(line, pos, ctx)` method returns the
start of the word being completed and a list of candidates.

`FilenameCompleter` completes file and directory names. Its methods are
`complete_path` (sorted by display name) and `complete_path_unsorted`. It
handles these cases:

- unclosed single and double quotes
- escaped break characters
- `~` for the home directory

Directory candidates end with the path separator. Each candidate is a
`Pair(display, replacement)`.

The module also has these helpers:

- `escape` and `unescape`
- `extract_word`
- `longest_common_prefix`
- `find_unclosed_quote`, which returns a position and a `Quote`
- `default_break_chars` and `double_quotes_special_chars`

### `lineedit.highlight`

`Highlighter` is the base class for highlighting. It has these methods:

- `highlight`
- `highlight_prompt`
- `highlight_hint`
- `highlight_candidate`
- `highlight_char`

The base class returns text unchanged. A subclass can set `prompt_style`,
`hint_style` or `candidate_style` to an ANSI escape sequence to wrap the
matching text in that style. `prompt_style` applies only to the default
prompt.

`MatchingBracketHighlighter` finds a bracket under or just before the cursor
when `highlight_char` is called. After that, `highlight` colors the matching
bracket.

The bracket helpers `find_matching_bracket`, `check_bracket`,
`matching_bracket`, `is_open_bracket` and `is_close_bracket` are public.

### `lineedit.hint`

`Hint` holds the hint text. `Context` gives hinters access to a `History` and a
`history_index`. The index defaults to the end of the history.

`Hinter` is the base class, and it offers no hint. `HistoryHinter` suggests the
rest of the latest history entry that starts with the line. It does this only
when the cursor is at the end of the line.

### `lineedit.binding`

This module describes keys and events:

- `KeyEvent` is a `KeyCode` plus `Modifiers`, with the shortcuts
  `KeyEvent.ctrl`, `KeyEvent.alt` and `KeyEvent.char`.
- `Event` is a wildcard (`Event.any()`), a key sequence (`Event.key_seq`,
  `Event.from_key`) or a mouse event (`Event.mouse()`).

Handlers are of two kinds:

- `EventHandler` holds either a plain command or a `ConditionalEventHandler`.
- A `ConditionalEventHandler` decides what to do through its
  `handle(event, n, positive, ctx)` method. It receives an `EventContext` with
  the edit mode, the line, the cursor position and the current hint.

`BindingTrie` maps events to handlers with these methods:

- `insert`
- `get` (exact match)
- `has_prefix`, which tells whether some bound sequence starts with the given
  event

## Example

```python
from lineedit.config import Config, EditMode
from lineedit.history import MemHistory, SearchDirection
from lineedit.hint import Context, HistoryHinter

config = Config.builder().history_ignore_space(True).edit_mode(EditMode.VI).build()
history = MemHistory.with_config(config)
history.add("git status")
history.add("git commit")

result = history.starts_with("git s", len(history) - 1, SearchDirection.REVERSE)
print(result.entry)  # git status

hint = HistoryHinter().hint("git c", 5, Context(history))
print(hint.display())  # ommit
```

## What this package does not do

The package does not drive a terminal:

- it does not read keystrokes
- it does not render the prompt or the edited line
- it has no `readline()` loop
- it has no command that runs an interactive editor

The pieces above are meant to be used by such an editor.