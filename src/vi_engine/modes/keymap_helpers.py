"""Helper utilities for keymap-driven modes: key tokens and key notation."""

from __future__ import annotations

from typing import List

from .base_mode import KeyInput

NAMED_KEYS = {
    "esc": "ESC",
    "cr": "ENTER",
    "enter": "ENTER",
    "return": "ENTER",
    "bs": "BACKSPACE",
    "backspace": "BACKSPACE",
    "tab": "TAB",
    "del": "DELETE",
    "delete": "DELETE",
    "left": "LEFT",
    "right": "RIGHT",
    "up": "UP",
    "down": "DOWN",
    "home": "HOME",
    "end": "END",
}

MODIFIER_PREFIXES = {"c": "ctrl", "s": "shift", "a": "alt", "m": "meta"}


def key_to_token(key: KeyInput) -> str:
    """Token used for keymap lookups: the typed char or a modified key name."""

    char = key.printable
    if char is not None:
        return char
    name = key.key if len(key.key) == 1 else key.key.upper()
    if key.modifiers:
        modifier = "+".join(key.modifiers)
        return f"{modifier}+{name}"
    return name


def is_escape(key: KeyInput) -> bool:
    return key.key == "ESC" and not key.modifiers


def is_cancel(key: KeyInput) -> bool:
    """Ctrl-C and Ctrl-[ abandon whatever is pending."""

    return key.has_modifier("ctrl") and key.key in {"c", "["}


def _parse_special(body: str) -> KeyInput:
    if body.lower() == "lt":
        return KeyInput.char("<")
    if body.lower() == "space":
        return KeyInput.char(" ")
    modifiers: List[str] = []
    while len(body) > 2 and body[1] == "-" and body[0].lower() in MODIFIER_PREFIXES:
        modifiers.append(MODIFIER_PREFIXES[body[0].lower()])
        body = body[2:]
    named = NAMED_KEYS.get(body.lower())
    if named is not None:
        text = {"ENTER": "\n", "TAB": "\t"}.get(named) if not modifiers else None
        return KeyInput(key=named, modifiers=tuple(modifiers), text=text)
    if len(body) == 1 and modifiers:
        return KeyInput(key=body.lower() if "ctrl" in modifiers else body, modifiers=tuple(modifiers))
    raise ValueError(f"Unknown key notation '<{body}>'")


def key_inputs(notation: str) -> List[KeyInput]:
    """Parse ``"dw<Esc>3j<C-r>"`` style notation into keystrokes.

    Plain characters type themselves; ``<...>`` names a special key, with
    ``C-``, ``S-``, ``A-`` and ``M-`` prefixes for modifiers. ``<lt>`` is a
    literal ``<``. An unclosed ``<`` is taken literally.
    """

    keys: List[KeyInput] = []
    index = 0
    while index < len(notation):
        char = notation[index]
        if char == "<":
            close = notation.find(">", index + 2)
            if close > index:
                keys.append(_parse_special(notation[index + 1 : close]))
                index = close + 1
                continue
        keys.append(KeyInput.char(char))
        index += 1
    return keys


__all__ = ["is_cancel", "is_escape", "key_inputs", "key_to_token"]
