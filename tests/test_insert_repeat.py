from __future__ import annotations

import pytest

from vi_engine.buffer import Buffer
from vi_engine.modes import ModeId, ModeManager


def make_engine(text: str, caret: int = 0) -> ModeManager:
    return ModeManager.create(Buffer.from_text(text, caret=caret))


def test_insert_then_escape_steps_back() -> None:
    engine = make_engine("xy")

    engine.feed("iab")
    assert engine.mode is ModeId.INSERT
    assert engine.status_text == "-- INSERT --"

    engine.feed("<Esc>")
    assert engine.context.buffer.text == "abxy"
    assert engine.context.buffer.caret_offset == 1
    assert engine.mode is ModeId.NORMAL


def test_dot_repeats_insertion_at_caret() -> None:
    engine = make_engine("xy")

    engine.feed("iab<Esc>.")

    assert engine.context.buffer.text == "aabbxy"
    assert engine.context.buffer.caret_offset == 2


def test_dot_repeats_append_priming_step() -> None:
    engine = make_engine("one\ntwo")

    engine.feed("A!<Esc>j.")

    assert engine.context.buffer.text == "one!\ntwo!"


def test_open_line_below_is_repeatable() -> None:
    engine = make_engine("one")

    engine.feed("otwo<Esc>.")

    assert engine.context.buffer.text == "one\ntwo\ntwo"


def test_open_line_above() -> None:
    engine = make_engine("two")

    engine.feed("Oone<Esc>")

    assert engine.context.buffer.text == "one\ntwo"
    assert engine.context.buffer.caret_line == 0


@pytest.mark.parametrize(
    ("keys", "text", "caret", "expected"),
    [
        ("A<BS><BS>x<Esc>", "abc", 0, "ax"),
        ("i<CR><Esc>", "ab", 1, "a\nb"),
        ("i<Tab><Esc>", "ab", 0, "    ab"),
        ("i<Del><Esc>", "ab", 0, "b"),
        ("I-<Esc>", "  ab", 3, "  -ab"),
    ],
)
def test_insert_special_keys(keys: str, text: str, caret: int, expected: str) -> None:
    engine = make_engine(text, caret)

    engine.feed(keys)

    assert engine.context.buffer.text == expected


def test_navigation_in_insert_mode_restarts_repeatable_text() -> None:
    engine = make_engine("ab")

    engine.feed("ix<Right>y<Esc>")
    assert engine.context.buffer.text == "xayb"

    engine.feed(".")
    assert engine.context.buffer.text == "xayyb"


def test_replace_mode_overwrites_then_appends() -> None:
    engine = make_engine("abcd")

    engine.feed("Rxy<Esc>")
    assert engine.context.buffer.text == "xycd"
    assert engine.context.buffer.caret_offset == 1

    other = make_engine("ab")
    other.feed("Rxyz<Esc>")
    assert other.context.buffer.text == "xyz"


def test_replace_mode_is_repeatable() -> None:
    engine = make_engine("abcd")

    engine.feed("Rx<Esc>l.")

    assert engine.context.buffer.text == "xxcd"


def test_substitute_chars_enters_insert() -> None:
    engine = make_engine("abcd")

    engine.feed("2sX<Esc>")

    assert engine.context.buffer.text == "Xcd"


def test_substitute_line_keeps_line() -> None:
    engine = make_engine("one\ntwo")

    engine.feed("Snew<Esc>")

    assert engine.context.buffer.text == "new\ntwo"


def test_change_to_line_end() -> None:
    engine = make_engine("hello world", caret=6)

    engine.feed("Cthere<Esc>")

    assert engine.context.buffer.text == "hello there"


def test_dot_with_count_repeats_change() -> None:
    engine = make_engine("abcdef")

    engine.feed("x3.")

    assert engine.context.buffer.text == "ef"


def test_dot_repeats_operator_change() -> None:
    engine = make_engine("a b c d")

    engine.feed("dw.")

    assert engine.context.buffer.text == "c d"


def test_dot_without_history_does_nothing() -> None:
    engine = make_engine("abc")

    engine.feed(".")

    assert engine.context.buffer.text == "abc"

