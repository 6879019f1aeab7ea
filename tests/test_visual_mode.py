from __future__ import annotations

import pytest

from vi_engine.buffer import Buffer
from vi_engine.modes import ModeId, ModeManager


def make_engine(text: str, caret: int = 0) -> ModeManager:
    return ModeManager.create(Buffer.from_text(text, caret=caret))


def test_visual_selection_is_inclusive_of_caret() -> None:
    engine = make_engine("abcdef")

    engine.feed("vll")

    selection = engine.context.buffer.selection
    assert engine.mode is ModeId.VISUAL
    assert engine.status_text == "-- VISUAL --"
    assert selection is not None
    assert (selection.start, selection.end) == (0, 3)


def test_visual_delete_and_repeat_on_same_extent() -> None:
    engine = make_engine("abcdef")

    engine.feed("vlld")
    assert engine.context.buffer.text == "def"
    assert engine.status_text == "Deleted selection"
    assert engine.mode is ModeId.NORMAL

    engine.feed(".")
    assert engine.context.buffer.text == ""


def test_visual_delete_across_lines() -> None:
    engine = make_engine("abc\ndef", caret=1)

    engine.feed("vjd")

    assert engine.context.buffer.text == "af"


def test_visual_line_delete() -> None:
    engine = make_engine("a\nb\nc")

    engine.feed("Vjd")

    assert engine.context.buffer.text == "c"


def test_visual_line_to_document_end() -> None:
    engine = make_engine("a\nb\nc")

    engine.feed("VGd")

    assert engine.context.buffer.text == ""


def test_visual_yank_leaves_caret_at_start() -> None:
    engine = make_engine("abcdef", caret=2)

    engine.feed("vhy")

    assert engine.status_text == "Yanked selection"
    assert engine.context.buffer.caret_offset == 1
    assert engine.context.buffer.selection is None
    assert engine.context.registers.value is not None
    assert engine.context.registers.value.text == "bc"


def test_visual_mode_takes_no_count_prefix() -> None:
    engine = make_engine("abcdef")

    engine.feed("v2")

    assert engine.context.state.count.text == ""
    assert engine.status_text == "Unknown command"
    assert engine.mode is ModeId.NORMAL
    assert engine.context.buffer.text == "abcdef"


def test_count_typed_before_visual_is_dropped() -> None:
    engine = make_engine("abcdef")

    engine.feed("2vld")

    assert engine.context.buffer.text == "cdef"


def test_swap_anchor_then_extend_other_side() -> None:
    engine = make_engine("abcdef", caret=1)

    engine.feed("vllohd")

    assert engine.context.buffer.text == "ef"


def test_visual_inner_word() -> None:
    engine = make_engine("foo bar", caret=5)

    engine.feed("viwd")

    assert engine.context.buffer.text == "foo "


def test_visual_paste_replaces_selection() -> None:
    engine = make_engine("foo bar")

    engine.feed("yiwwviwp")

    assert engine.context.buffer.text == "foo foo"
    assert engine.context.registers.value is not None
    assert engine.context.registers.value.text == "bar"


def test_visual_change() -> None:
    engine = make_engine("abcdef")

    engine.feed("vlcX<Esc>")

    assert engine.context.buffer.text == "Xcdef"


def test_visual_toggle_case() -> None:
    engine = make_engine("abc")

    engine.feed("vl~")

    assert engine.context.buffer.text == "ABc"


@pytest.mark.parametrize("key", [">", "<", "J", "~", "="])
def test_visual_line_operators_return_to_normal(key: str) -> None:
    engine = make_engine("one\ntwo\nthree")

    results = engine.feed("Vj" + key)

    assert results[-1].consumed
    assert engine.mode is ModeId.NORMAL
    assert engine.context.buffer.selection is None


def test_visual_line_indent_and_join() -> None:
    engine = make_engine("a\nb\nc")

    engine.feed("V>")
    assert engine.context.buffer.text == "    a\nb\nc"

    other = make_engine("a\nb\nc")
    other.feed("VjJ")
    assert other.context.buffer.text == "a b\nc"


def test_switch_between_visual_kinds() -> None:
    engine = make_engine("abc\ndef")

    engine.feed("vV")
    assert engine.mode is ModeId.VISUAL_LINE
    assert engine.status_text == "-- VISUAL LINE --"

    engine.feed("V")
    assert engine.mode is ModeId.NORMAL
    assert engine.context.buffer.selection is None


def test_escape_leaves_visual_mode() -> None:
    engine = make_engine("abc")

    engine.feed("vl<Esc>")

    assert engine.mode is ModeId.NORMAL
    assert engine.context.buffer.selection is None


def test_unknown_key_in_visual_mode() -> None:
    engine = make_engine("abc")

    engine.feed("vQ")

    assert engine.status_text == "Unknown command"
    assert engine.mode is ModeId.NORMAL


def test_substitute_limited_to_selection() -> None:
    engine = make_engine("foo foo")

    engine.feed("vll:s/o/0/g<CR>")

    assert engine.context.buffer.text == "f00 foo"
    assert engine.mode is ModeId.NORMAL


def test_host_selection_enters_visual_mode() -> None:
    engine = make_engine("abcdef")
    buffer = engine.context.buffer

    buffer.select(1, 3)
    engine.notify_selection_changed()

    assert engine.mode is ModeId.VISUAL
    assert buffer.caret_offset == 2
    assert (buffer.selection.start, buffer.selection.end) == (1, 3)

    buffer.clear_selection()
    engine.notify_selection_changed()
    assert engine.mode is ModeId.NORMAL
