from __future__ import annotations

import pytest

from vi_engine.buffer import Buffer
from vi_engine.modes import ModeId, ModeManager


def make_engine(text: str, caret: int = 0) -> ModeManager:
    return ModeManager.create(Buffer.from_text(text, caret=caret))


@pytest.mark.parametrize(
    ("digits", "expected"),
    [("", 1), ("0", 1), ("1", 1), ("3", 3), ("12", 12)],
)
def test_count_prefix_repeats_motion(digits: str, expected: int) -> None:
    engine = make_engine("abcdefghijklmnopqrstuvwxyz")

    engine.feed(f"{digits}l")

    assert engine.context.buffer.caret_offset == expected
    assert engine.context.state.count.text == ""


def test_count_is_shown_while_typed() -> None:
    engine = make_engine("abc")

    engine.feed("12")

    assert engine.status_text == "12"
    assert engine.mode is ModeId.NORMAL


def test_caret_retreats_from_line_end() -> None:
    engine = make_engine("abc\ndefgh")

    engine.feed("$")
    assert engine.context.buffer.caret_offset == 2

    engine.feed("10l")
    assert engine.context.buffer.caret_offset == 2


def test_delete_chars_with_count() -> None:
    engine = make_engine("abcdef")

    engine.feed("3x")

    assert engine.context.buffer.text == "def"
    assert engine.context.registers.value is not None
    assert engine.context.registers.value.text == "abc"


def test_delete_char_at_line_end_keeps_caret_on_text() -> None:
    engine = make_engine("ab", caret=1)

    engine.feed("3x")

    assert engine.context.buffer.text == "a"
    assert engine.context.buffer.caret_offset == 0


def test_delete_key_behaves_like_x() -> None:
    engine = make_engine("abc")

    engine.feed("<Del>")

    assert engine.context.buffer.text == "bc"


def test_delete_char_backwards() -> None:
    engine = make_engine("abc", caret=2)

    engine.feed("X")

    assert engine.context.buffer.text == "ac"
    assert engine.context.buffer.caret_offset == 1


def test_delete_to_line_end() -> None:
    engine = make_engine("hello world\nnext", caret=5)

    engine.feed("D")

    assert engine.context.buffer.text == "hello\nnext"
    assert engine.context.buffer.caret_offset == 4


def test_toggle_case_with_count() -> None:
    engine = make_engine("abc")

    engine.feed("3~")

    assert engine.context.buffer.text == "ABC"
    assert engine.context.buffer.caret_offset == 2


def test_join_lines_with_count() -> None:
    engine = make_engine("a\n  b\nc")

    engine.feed("3J")

    assert engine.context.buffer.text == "a b c"


def test_undo_and_redo() -> None:
    engine = make_engine("abc")

    engine.feed("x")
    assert engine.context.buffer.text == "bc"

    engine.feed("u")
    assert engine.context.buffer.text == "abc"

    engine.feed("<C-r>")
    assert engine.context.buffer.text == "bc"


def test_undo_without_history_reports_status() -> None:
    engine = make_engine("abc")

    engine.feed("u")

    assert engine.status_text == "Already at oldest change"


def test_goto_line_commands_save_context_mark() -> None:
    engine = make_engine("a\n  b\nc")
    buffer = engine.context.buffer

    engine.feed("G")
    assert buffer.caret_line == 2
    assert engine.context.marks.context == (0, 0)

    engine.feed("gg")
    assert buffer.caret_line == 0

    engine.feed("2G")
    assert buffer.caret_offset == 4


def test_count_before_gg_selects_line() -> None:
    engine = make_engine("a\nb\nc")

    engine.feed("3gg")

    assert engine.context.buffer.caret_line == 2


def test_g_followed_by_other_key_is_unknown() -> None:
    engine = make_engine("abc")

    engine.feed("gq")

    assert engine.status_text == "Unknown command"
    assert engine.mode is ModeId.NORMAL


def test_write_char_replaces_under_caret() -> None:
    engine = make_engine("abcd")

    engine.feed("rx")
    assert engine.context.buffer.text == "xbcd"

    engine.feed("l3ry")
    assert engine.context.buffer.text == "xyyy"
    assert engine.context.buffer.caret_offset == 3


def test_write_char_needs_enough_characters() -> None:
    engine = make_engine("abc")

    engine.feed("5rx")

    assert engine.context.buffer.text == "abc"
    assert engine.mode is ModeId.NORMAL


def test_write_char_rejects_non_characters() -> None:
    engine = make_engine("abc")

    engine.feed("r<Left>")

    assert engine.status_text == "Keystroke was not a character"
    assert engine.context.buffer.text == "abc"


def test_yank_line_and_paste_above() -> None:
    engine = make_engine("one\ntwo", caret=4)

    engine.feed("YP")

    assert engine.context.buffer.text == "one\ntwo\ntwo"
    assert engine.context.registers.value is not None
    assert engine.context.registers.value.text == "two\n"
    assert engine.context.buffer.caret_offset == 4


def test_paste_with_count() -> None:
    engine = make_engine("a")

    engine.feed("yy3p")

    assert engine.context.buffer.text == "a\na\na\na"
    assert engine.context.buffer.caret_line == 1


def test_charwise_paste_after_caret() -> None:
    engine = make_engine("abc")

    engine.feed("xp")

    assert engine.context.buffer.text == "bac"


def test_paste_waits_for_deferred_clipboard() -> None:
    engine = make_engine("abc")
    clipboard = engine.context.buffer.clipboard

    engine.feed("x")
    clipboard.deferred = True
    engine.feed("p")
    assert engine.context.buffer.text == "bc"

    clipboard.deliver()
    assert engine.context.buffer.text == "bac"


def test_paste_with_empty_clipboard_is_noop() -> None:
    engine = make_engine("abc")

    engine.feed("p")

    assert engine.context.buffer.text == "abc"


def test_unmatched_key_in_normal_mode_is_silent() -> None:
    engine = make_engine("abc")

    engine.feed("Q")

    assert engine.status_text == ""
    assert engine.mode is ModeId.NORMAL


def test_unsupported_prefix_reports_unknown_command() -> None:
    engine = make_engine("abc")

    engine.feed('"x')

    assert engine.status_text == "Unknown command"
    assert engine.context.buffer.text == "abc"


def test_fold_keys_drive_surface_folds() -> None:
    engine = make_engine("a\nb\nc")
    engine.context.buffer.add_fold(0, 2)

    engine.feed("zc")
    assert engine.context.buffer.collapsed == {(0, 2)}

    engine.feed("zo")
    assert engine.context.buffer.collapsed == set()

    engine.feed("zx")
    assert engine.status_text == "Unknown command"


def test_matching_bracket_is_a_jump() -> None:
    engine = make_engine("(a b)")

    engine.feed("%")

    assert engine.context.buffer.caret_offset == 4
    assert engine.context.marks.context == (0, 0)


def test_wants_raw_input_outside_insert() -> None:
    engine = make_engine("abc")

    assert engine.wants_raw_input is True
    engine.feed("i")
    assert engine.wants_raw_input is False
    engine.feed("<Esc>")
    assert engine.wants_raw_input is True
