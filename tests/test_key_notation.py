from __future__ import annotations

import pytest

from vi_engine.modes import KeyInput
from vi_engine.modes.keymap_helpers import is_cancel, is_escape, key_inputs, key_to_token


def test_plain_characters_type_themselves() -> None:
    keys = key_inputs("d2w")

    assert [key.printable for key in keys] == ["d", "2", "w"]
    assert keys[1].is_digit


@pytest.mark.parametrize(
    ("notation", "key", "modifiers", "text"),
    [
        ("<Esc>", "ESC", (), None),
        ("<CR>", "ENTER", (), "\n"),
        ("<Tab>", "TAB", (), "\t"),
        ("<BS>", "BACKSPACE", (), None),
        ("<Del>", "DELETE", (), None),
        ("<Left>", "LEFT", (), None),
        ("<C-r>", "r", ("ctrl",), None),
        ("<C-R>", "r", ("ctrl",), None),
        ("<C-Home>", "HOME", ("ctrl",), None),
        ("<lt>", "<", (), "<"),
        ("<Space>", " ", (), " "),
    ],
)
def test_special_keys(notation: str, key: str, modifiers: tuple, text) -> None:
    (parsed,) = key_inputs(notation)

    assert parsed.key == key
    assert parsed.modifiers == modifiers
    assert parsed.text == text


def test_unclosed_angle_bracket_is_literal() -> None:
    keys = key_inputs("<<")

    assert [key.printable for key in keys] == ["<", "<"]


def test_unknown_notation_is_rejected() -> None:
    with pytest.raises(ValueError):
        key_inputs("<Bogus>")


def test_tokens_for_lookup() -> None:
    assert key_to_token(KeyInput.char("x")) == "x"
    assert key_to_token(KeyInput(key="ENTER", text="\n")) == "ENTER"
    assert key_to_token(KeyInput(key="r", modifiers=("ctrl",))) == "ctrl+r"
    assert key_to_token(KeyInput(key="HOME", modifiers=("ctrl",))) == "ctrl+HOME"


def test_escape_and_cancel_detection() -> None:
    (escape, ctrl_c, ctrl_bracket, plain_c) = key_inputs("<Esc><C-c><C-[>c")

    assert is_escape(escape)
    assert not is_cancel(escape)
    assert is_cancel(ctrl_c)
    assert is_cancel(ctrl_bracket)
    assert not is_cancel(plain_c)
    assert not is_escape(plain_c)
