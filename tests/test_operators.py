from __future__ import annotations

import pytest

from vi_engine.buffer import Buffer
from vi_engine.modes import ModeId, ModeManager


def make_engine(text: str, caret: int = 0) -> ModeManager:
    return ModeManager.create(Buffer.from_text(text, caret=caret))


def register_text(engine: ModeManager) -> str:
    value = engine.context.registers.value
    assert value is not None
    return value.text


@pytest.mark.parametrize(
    ("keys", "text", "caret", "expected"),
    [
        ("dw", "foo bar", 0, "bar"),
        ("d3w", "a b c d e", 0, "d e"),
        ("2d3w", "a b c d e f g h", 0, "g h"),
        ("de", "foo bar", 0, " bar"),
        ("d$", "foo bar", 4, "foo "),
        ("db", "foo bar", 4, "bar"),
        ("dl", "abc", 1, "ac"),
        ("d%", "(a) b", 0, " b"),
        ("diw", "foo bar baz", 5, "foo  baz"),
        ("daw", "foo bar baz", 5, "foo baz"),
        ("di(", "f(abc)", 3, "f()"),
        ("da(", "f(abc) x", 3, "f x"),
        ('di"', 'say "hi" now', 6, 'say "" now'),
    ],
)
def test_delete_with_motion_or_object(keys: str, text: str, caret: int, expected: str) -> None:
    engine = make_engine(text, caret)

    engine.feed(keys)

    assert engine.context.buffer.text == expected
    assert engine.mode is ModeId.NORMAL
    assert engine.status_text == "action deleted"


def test_delete_lines_with_count() -> None:
    engine = make_engine("one\ntwo\nthree\nfour")

    engine.feed("2dd")

    assert engine.context.buffer.text == "three\nfour"
    assert engine.context.buffer.caret_offset == 0
    assert register_text(engine) == "one\ntwo\n"


def test_delete_line_moves_to_first_non_blank() -> None:
    engine = make_engine("a\n  b\nc")

    engine.feed("dd")

    assert engine.context.buffer.text == "  b\nc"
    assert engine.context.buffer.caret_offset == 2


def test_delete_last_line_keeps_register_linewise() -> None:
    engine = make_engine("a\nb", caret=2)

    engine.feed("dd")

    assert engine.context.buffer.text == "a"
    assert register_text(engine) == "b\n"
    assert engine.context.registers.value.linewise


@pytest.mark.parametrize(
    ("keys", "caret", "expected"),
    [
        ("dj", 0, "c"),
        ("dk", 2, "c"),
        ("dG", 2, "a"),
        ("2dj", 0, ""),
    ],
)
def test_linewise_motions(keys: str, caret: int, expected: str) -> None:
    engine = make_engine("a\nb\nc", caret)

    engine.feed(keys)

    assert engine.context.buffer.text == expected


def test_operator_change_is_single_undo_step() -> None:
    engine = make_engine("one\ntwo\nthree\nfour")

    engine.feed("2dd")
    engine.feed("u")

    assert engine.context.buffer.text == "one\ntwo\nthree\nfour"


def test_unrecognised_motion_cancels_operator() -> None:
    engine = make_engine("abc")

    engine.feed("dZ")

    assert engine.status_text == "Unrecognised motion"
    assert engine.mode is ModeId.NORMAL
    assert engine.context.buffer.text == "abc"


def test_operator_status_shows_pending_command() -> None:
    engine = make_engine("abc")

    engine.feed("d2")
    assert engine.mode is ModeId.DELETE
    assert engine.status_text == "d2"

    engine.feed("i")
    assert engine.status_text == "d2i"


def test_escape_abandons_operator() -> None:
    engine = make_engine("abc")

    engine.feed("d<Esc>")

    assert engine.mode is ModeId.NORMAL
    assert engine.context.buffer.text == "abc"


def test_yank_word_keeps_caret_and_text() -> None:
    engine = make_engine("foo bar", caret=0)

    engine.feed("yw")

    assert engine.context.buffer.text == "foo bar"
    assert engine.context.buffer.caret_offset == 0
    assert register_text(engine) == "foo "
    assert engine.status_text == "action yanked"


def test_yank_line_then_paste_below() -> None:
    engine = make_engine("one\ntwo")

    engine.feed("yyp")

    assert engine.context.buffer.text == "one\none\ntwo"
    assert engine.context.buffer.caret_offset == 4


def test_yank_upwards_parks_caret_on_first_line() -> None:
    engine = make_engine("ab\ncd", caret=4)

    engine.feed("yk")

    assert register_text(engine) == "ab\ncd\n"
    assert engine.context.buffer.caret_offset == 1


def test_yank_is_not_a_repeatable_change() -> None:
    engine = make_engine("abc")

    engine.feed("x")
    engine.feed("yl")
    engine.feed(".")

    assert engine.context.buffer.text == "c"


def test_change_word_enters_insert_mode() -> None:
    engine = make_engine("foo bar")

    engine.feed("cw")
    assert engine.mode is ModeId.INSERT

    engine.feed("baz<Esc>")
    assert engine.context.buffer.text == "baz bar"
    assert engine.mode is ModeId.NORMAL


def test_change_inner_word() -> None:
    engine = make_engine("foo bar", caret=5)

    engine.feed("ciwxy<Esc>")

    assert engine.context.buffer.text == "foo xy"
    assert engine.context.buffer.caret_offset == 5


def test_change_line_keeps_line_break() -> None:
    engine = make_engine("  one\ntwo")

    engine.feed("ccx<Esc>")

    assert engine.context.buffer.text == "x\ntwo"
    assert register_text(engine) == "  one\n"


def test_change_last_line() -> None:
    engine = make_engine("a\nb", caret=2)

    engine.feed("ccx<Esc>")

    assert engine.context.buffer.text == "a\nx"


def test_change_is_repeated_with_its_insertion() -> None:
    engine = make_engine("foo bar")

    engine.feed("cwbaz<Esc>w.")

    assert engine.context.buffer.text == "baz baz"


def test_indent_lines_with_count() -> None:
    engine = make_engine("a\nb\nc")

    engine.feed("2>>")

    assert engine.context.buffer.text == "    a\n    b\nc"
    assert engine.context.buffer.caret_offset == 4


def test_indent_with_motion() -> None:
    engine = make_engine("a\nb\nc")

    engine.feed(">j")

    assert engine.context.buffer.text == "    a\n    b\nc"


def test_unindent_line() -> None:
    engine = make_engine("      a\nb")

    engine.feed("<<")

    assert engine.context.buffer.text == "  a\nb"
    assert engine.context.buffer.caret_offset == 2
