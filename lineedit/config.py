"""User preferences for the line editor and a builder to assemble them."""

from __future__ import annotations

import dataclasses
import enum
import os
from dataclasses import dataclass, field


class BellStyle(enum.Enum):
    """Beep, flash or nothing."""

    AUDIBLE = "audible"
    NONE = "none"
    VISIBLE = "visible"

    @classmethod
    def default(cls) -> "BellStyle":
        """Audible on unix-like systems, silent on Windows."""
        return cls.NONE if os.name == "nt" else cls.AUDIBLE


class HistoryDuplicates(enum.Enum):
    """History filter."""

    ALWAYS_ADD = "always_add"
    IGNORE_CONSECUTIVE = "ignore_consecutive"


class CompletionType(enum.Enum):
    """Tab completion style."""

    CIRCULAR = "circular"
    LIST = "list"


class EditMode(enum.Enum):
    """Style of editing / standard keymaps."""

    EMACS = "emacs"
    VI = "vi"


class ColorMode(enum.Enum):
    """Colorization mode."""

    ENABLED = "enabled"
    FORCED = "forced"
    DISABLED = "disabled"


class Behavior(enum.Enum):
    """Whether the editor uses stdio."""

    STDIO = "stdio"
    PREFER_TERM = "prefer_term"


_VI_KEYSEQ_TIMEOUT_MS = 500


@dataclass(frozen=True)
class Config:
    """Immutable set of editor preferences."""

    max_history_size: int = 100
    history_duplicates: HistoryDuplicates = HistoryDuplicates.IGNORE_CONSECUTIVE
    history_ignore_space: bool = False
    completion_type: CompletionType = CompletionType.CIRCULAR
    completion_prompt_limit: int = 100
    keyseq_timeout: int = -1
    edit_mode: EditMode = EditMode.EMACS
    auto_add_history: bool = False
    bell_style: BellStyle = field(default_factory=BellStyle.default)
    color_mode: ColorMode = ColorMode.ENABLED
    behavior: Behavior = Behavior.STDIO
    tab_stop: int = 8
    indent_size: int = 2
    check_cursor_position: bool = False
    enable_bracketed_paste: bool = True

    @classmethod
    def builder(cls) -> "Builder":
        """Return a fresh configuration builder."""
        return Builder()


def _non_negative(name: str, value: int) -> int:
    if value < 0:
        raise ValueError(f"{name} must not be negative: {value}")
    return value


class Configurer:
    """Mixin for components that hold a `Config` in their `config` attribute."""

    config: Config

    def _update(self, **changes) -> None:
        self.config = dataclasses.replace(self.config, **changes)

    def set_max_history_size(self, max_size: int) -> None:
        """Set the maximum number of history entries."""
        self._update(max_history_size=_non_negative("max_size", max_size))

    def set_history_ignore_dups(self, yes: bool) -> None:
        """Ignore lines that match the previous history entry."""
        dups = HistoryDuplicates.IGNORE_CONSECUTIVE if yes else HistoryDuplicates.ALWAYS_ADD
        self._update(history_duplicates=dups)

    def set_history_ignore_space(self, yes: bool) -> None:
        """Ignore lines that begin with a space."""
        self._update(history_ignore_space=yes)

    def set_completion_type(self, completion_type: CompletionType) -> None:
        self._update(completion_type=completion_type)

    def set_completion_prompt_limit(self, limit: int) -> None:
        """Number of completions above which the user is asked before listing."""
        self._update(completion_prompt_limit=_non_negative("limit", limit))

    def set_keyseq_timeout(self, timeout_ms: int) -> None:
        """Timeout for ambiguous key sequences, in milliseconds (-1: none)."""
        self._update(keyseq_timeout=timeout_ms)

    def set_edit_mode(self, edit_mode: EditMode) -> None:
        """Choose Emacs or Vi mode; also resets the key sequence timeout."""
        self._update(edit_mode=edit_mode)
        if edit_mode is EditMode.VI:
            self.set_keyseq_timeout(_VI_KEYSEQ_TIMEOUT_MS)
        else:
            self.set_keyseq_timeout(-1)

    def set_auto_add_history(self, yes: bool) -> None:
        self._update(auto_add_history=yes)

    def set_bell_style(self, bell_style: BellStyle) -> None:
        self._update(bell_style=bell_style)

    def set_color_mode(self, color_mode: ColorMode) -> None:
        self._update(color_mode=color_mode)

    def set_behavior(self, behavior: Behavior) -> None:
        self._update(behavior=behavior)

    def set_tab_stop(self, tab_stop: int) -> None:
        self._update(tab_stop=_non_negative("tab_stop", tab_stop))

    def set_check_cursor_position(self, yes: bool) -> None:
        self._update(check_cursor_position=yes)

    def set_indent_size(self, size: int) -> None:
        self._update(indent_size=_non_negative("size", size))

    def enable_bracketed_paste(self, enabled: bool) -> None:
        self._update(enable_bracketed_paste=enabled)


class Builder(Configurer):
    """Fluent builder producing a `Config`."""

    def __init__(self) -> None:
        self.config = Config()

    def __repr__(self) -> str:
        return f"Builder({self.config!r})"

    def max_history_size(self, max_size: int) -> "Builder":
        self.set_max_history_size(max_size)
        return self

    def history_ignore_dups(self, yes: bool) -> "Builder":
        self.set_history_ignore_dups(yes)
        return self

    def history_ignore_space(self, yes: bool) -> "Builder":
        self.set_history_ignore_space(yes)
        return self

    def completion_type(self, completion_type: CompletionType) -> "Builder":
        self.set_completion_type(completion_type)
        return self

    def completion_prompt_limit(self, limit: int) -> "Builder":
        self.set_completion_prompt_limit(limit)
        return self

    def keyseq_timeout(self, timeout_ms: int) -> "Builder":
        self.set_keyseq_timeout(timeout_ms)
        return self

    def edit_mode(self, edit_mode: EditMode) -> "Builder":
        self.set_edit_mode(edit_mode)
        return self

    def auto_add_history(self, yes: bool) -> "Builder":
        self.set_auto_add_history(yes)
        return self

    def bell_style(self, bell_style: BellStyle) -> "Builder":
        self.set_bell_style(bell_style)
        return self

    def color_mode(self, color_mode: ColorMode) -> "Builder":
        self.set_color_mode(color_mode)
        return self

    def behavior(self, behavior: Behavior) -> "Builder":
        self.set_behavior(behavior)
        return self

    def tab_stop(self, tab_stop: int) -> "Builder":
        self.set_tab_stop(tab_stop)
        return self

    def check_cursor_position(self, yes: bool) -> "Builder":
        self.set_check_cursor_position(yes)
        return self

    def indent_size(self, indent_size: int) -> "Builder":
        self.set_indent_size(indent_size)
        return self

    def bracketed_paste(self, enabled: bool) -> "Builder":
        self.enable_bracketed_paste(enabled)
        return self

    def build(self) -> Config:
        """Return the configuration assembled so far."""
        return self.config