from __future__ import annotations

import pytest

from vi_engine.buffer import (
    Buffer,
    BufferValidationError,
    Clipboard,
    DefaultRegister,
)
from vi_engine.errors import PatternError


def make_buffer(text: str = "alpha beta\n  gamma\ndelta", caret: int = 0) -> Buffer:
    return Buffer.from_text(text, caret=caret)


def test_line_metrics() -> None:
    buffer = make_buffer()

    assert buffer.line_count == 3
    assert buffer.line_text(1) == "  gamma"
    assert buffer.line_length(1) == 7
    assert buffer.line_start(2) == 19
    assert buffer.line_of(12) == 1


def test_set_caret_clamps_to_document() -> None:
    buffer = make_buffer()

    buffer.set_caret(10, 50)

    assert (buffer.caret_line, buffer.caret_column) == (2, 5)


def test_unknown_motion_raises_validation_error() -> None:
    buffer = make_buffer()

    with pytest.raises(BufferValidationError):
        buffer.move_caret("teleport")


def test_word_motions() -> None:
    buffer = make_buffer()

    buffer.move_caret("word_forward")
    assert buffer.caret_offset == 6
    buffer.move_caret("word_end")
    assert buffer.caret_offset == 9
    buffer.move_caret("word_back")
    assert buffer.caret_offset == 6


def test_select_lines_on_last_line_takes_preceding_break() -> None:
    buffer = make_buffer()

    buffer.select_lines(2, 2)

    assert buffer.selected_text == "\ndelta"
    assert buffer.selection is not None and buffer.selection.linewise


def test_cut_returns_text_and_parks_caret() -> None:
    buffer = make_buffer()
    buffer.select(6, 10)

    removed = buffer.cut()

    assert removed == "beta"
    assert buffer.text.startswith("alpha \n")
    assert buffer.caret_offset == 6
    assert buffer.selection is None


def test_indent_and_unindent_selected_lines() -> None:
    buffer = make_buffer()
    buffer.select_lines(0, 1)

    buffer.indent_selection()
    assert buffer.text == "    alpha beta\n      gamma\ndelta"

    buffer.select_lines(0, 1)
    buffer.unindent_selection()
    assert buffer.text == "alpha beta\n  gamma\ndelta"


def test_join_lines_strips_leading_whitespace() -> None:
    buffer = make_buffer()

    buffer.join_lines()

    assert buffer.text == "alpha beta gamma\ndelta"
    assert buffer.caret_offset == 10


def test_toggle_case_advances_caret() -> None:
    buffer = make_buffer()

    buffer.toggle_case()

    assert buffer.text.startswith("Alpha")
    assert buffer.caret_offset == 1


def test_undo_group_collapses_edits() -> None:
    buffer = make_buffer("abc")

    with buffer.undo_group():
        buffer.insert_at_caret("x")
        buffer.insert_at_caret("y")

    assert buffer.text == "xyabc"
    assert buffer.undo() is True
    assert buffer.text == "abc"
    assert buffer.redo() is True
    assert buffer.text == "xyabc"
    assert buffer.redo() is False


def test_search_wraps_and_respects_case() -> None:
    buffer = make_buffer("Foo bar foo")

    assert buffer.search("foo", 1, backward=False, case_sensitive=True) == 8
    assert buffer.search("foo", 9, backward=False, case_sensitive=False) == 0
    assert buffer.search("bar", 0, backward=True, case_sensitive=True) == 4


def test_search_without_wrapping() -> None:
    buffer = Buffer.from_text("foo bar", search_wraps=False)

    assert buffer.search("foo", 1, backward=False, case_sensitive=True) is None


def test_search_reports_pattern_errors() -> None:
    buffer = make_buffer()

    with pytest.raises(PatternError) as info:
        buffer.search("(", 0, backward=False, case_sensitive=True)

    assert info.value.status.startswith("Search error: ")


def test_fold_operations_track_collapsed_ranges() -> None:
    buffer = make_buffer()
    buffer.add_fold(0, 2)
    buffer.add_fold(0, 1)

    buffer.fold("close")
    assert buffer.collapsed == {(0, 1)}

    buffer.fold("close_all")
    assert buffer.collapsed == {(0, 1), (0, 2)}

    buffer.fold("open_recursive")
    assert buffer.collapsed == set()

    with pytest.raises(BufferValidationError):
        buffer.fold("explode")


def test_default_register_keeps_shape() -> None:
    buffer = make_buffer()
    register = DefaultRegister(buffer)
    received = []

    register.store("line", linewise=True)
    register.request(received.append)

    assert buffer.clipboard.text == "line\n"
    assert received[0].linewise is True


def test_default_register_infers_shape_of_foreign_text() -> None:
    buffer = make_buffer()
    register = DefaultRegister(buffer)
    received = []

    buffer.clipboard.set_text("from elsewhere")
    register.request(received.append)

    assert received[0].text == "from elsewhere"
    assert received[0].linewise is False


def test_deferred_clipboard_answers_on_delivery() -> None:
    clipboard = Clipboard("later", deferred=True)
    received = []

    clipboard.request_text(received.append)
    assert received == []
    assert clipboard.pending_requests == 1

    clipboard.deliver()

    assert received == ["later"]
