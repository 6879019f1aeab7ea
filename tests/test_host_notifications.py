from __future__ import annotations

from vi_engine.buffer import Buffer
from vi_engine.modes import ModeId, ModeManager


def make_engine(text: str, caret: int = 0) -> ModeManager:
    return ModeManager.create(Buffer.from_text(text, caret=caret))


def test_caret_moved_past_line_end_retreats_in_normal_mode() -> None:
    engine = make_engine("abc\ndef")
    buffer = engine.context.buffer

    buffer.caret_offset = 3
    engine.notify_caret_moved()

    assert buffer.caret_offset == 2
    assert engine.mode is ModeId.NORMAL


def test_caret_moved_inside_line_is_left_alone() -> None:
    engine = make_engine("abc")
    buffer = engine.context.buffer

    buffer.caret_offset = 1
    engine.notify_caret_moved()

    assert buffer.caret_offset == 1


def test_caret_moved_during_insert_keeps_only_later_typing_repeatable() -> None:
    engine = make_engine("ab")
    buffer = engine.context.buffer

    engine.feed("ix")
    buffer.caret_offset = 3
    engine.notify_caret_moved()
    engine.feed("y<Esc>")

    assert engine.mode is ModeId.NORMAL
    assert buffer.text == "xaby"

    engine.feed(".")

    assert buffer.text == "xabyy"


def test_caret_moved_aborts_pending_operator() -> None:
    engine = make_engine("abc def")
    buffer = engine.context.buffer

    engine.feed("d")
    assert engine.mode is not ModeId.NORMAL

    engine.notify_caret_moved()
    assert engine.mode is ModeId.NORMAL

    engine.feed("w")

    assert buffer.text == "abc def"
    assert buffer.caret_offset == 4


def test_caret_moved_in_visual_mode_refreshes_selection() -> None:
    engine = make_engine("abcdef")
    buffer = engine.context.buffer

    engine.feed("v")
    buffer.caret_offset = 2
    engine.notify_caret_moved()

    assert engine.mode is ModeId.VISUAL
    assert (buffer.selection.start, buffer.selection.end) == (0, 3)
