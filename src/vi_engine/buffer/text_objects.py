"""Text object functions for vim-style selection.

Text objects define regions of text for operators.
'i' prefix = inner (excluding delimiters)
'a' prefix = outer (including delimiters)

Each function returns a half-open ``(start, end)`` offset range or ``None``.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional, Tuple

from .motions import line_bounds

Span = Tuple[int, int]
TextObjectFunc = Callable[[str, int, bool], Optional[Span]]


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


# ============================================================================
# Word text objects: iw, aw, iW, aW
# ============================================================================


def _word_object(text: str, offset: int, inner: bool, big: bool) -> Optional[Span]:
    start, end = line_bounds(text, offset)
    if start == end or offset >= end:
        return None

    def same_kind(ch: str, ref: str) -> bool:
        if ref.isspace():
            return ch.isspace()
        if big:
            return not ch.isspace()
        if _is_word_char(ref):
            return _is_word_char(ch)
        return not ch.isspace() and not _is_word_char(ch)

    ref = text[offset]
    left = offset
    right = offset + 1
    while left > start and same_kind(text[left - 1], ref):
        left -= 1
    while right < end and same_kind(text[right], ref):
        right += 1

    if inner or ref.isspace():
        return (left, right)

    # Outer: take trailing whitespace, or leading whitespace at end of line.
    trailing = right
    while trailing < end and text[trailing].isspace():
        trailing += 1
    if trailing > right:
        return (left, trailing)
    leading = left
    while leading > start and text[leading - 1].isspace():
        leading -= 1
    return (leading, right)


def word(text: str, offset: int, inner: bool) -> Optional[Span]:
    return _word_object(text, offset, inner, big=False)


def big_word(text: str, offset: int, inner: bool) -> Optional[Span]:
    return _word_object(text, offset, inner, big=True)


# ============================================================================
# Quote text objects: i", a", i', a', i`, a`
# ============================================================================


def _quote_object(text: str, offset: int, inner: bool, quote: str) -> Optional[Span]:
    start, end = line_bounds(text, offset)
    positions = [i for i in range(start, end) if text[i] == quote]
    for opening, closing in zip(positions[::2], positions[1::2]):
        if opening <= offset <= closing or offset < opening:
            if inner:
                return (opening + 1, closing)
            return (opening, closing + 1)
    return None


def double_quote(text: str, offset: int, inner: bool) -> Optional[Span]:
    return _quote_object(text, offset, inner, '"')


def single_quote(text: str, offset: int, inner: bool) -> Optional[Span]:
    return _quote_object(text, offset, inner, "'")


def backtick(text: str, offset: int, inner: bool) -> Optional[Span]:
    return _quote_object(text, offset, inner, "`")


# ============================================================================
# Bracket text objects: i(, a(, i[, a[, i{, a{, i<, a<
# ============================================================================


def _bracket_object(
    text: str, offset: int, inner: bool, opening: str, closing: str
) -> Optional[Span]:
    if not text:
        return None
    offset = min(offset, len(text) - 1)

    depth = 0
    i = offset
    if text[i] == closing:
        i -= 1
    while i >= 0:
        ch = text[i]
        if ch == closing:
            depth += 1
        elif ch == opening:
            if depth == 0:
                break
            depth -= 1
        i -= 1
    if i < 0:
        return None
    open_at = i

    depth = 0
    j = open_at + 1
    while j < len(text):
        ch = text[j]
        if ch == opening:
            depth += 1
        elif ch == closing:
            if depth == 0:
                break
            depth -= 1
        j += 1
    if j >= len(text):
        return None
    close_at = j

    if inner:
        return (open_at + 1, close_at)
    return (open_at, close_at + 1)


def paren(text: str, offset: int, inner: bool) -> Optional[Span]:
    return _bracket_object(text, offset, inner, "(", ")")


def bracket(text: str, offset: int, inner: bool) -> Optional[Span]:
    return _bracket_object(text, offset, inner, "[", "]")


def brace(text: str, offset: int, inner: bool) -> Optional[Span]:
    return _bracket_object(text, offset, inner, "{", "}")


def angle(text: str, offset: int, inner: bool) -> Optional[Span]:
    return _bracket_object(text, offset, inner, "<", ">")


TEXT_OBJECTS: Dict[str, TextObjectFunc] = {
    "word": word,
    "WORD": big_word,
    "paren": paren,
    "bracket": bracket,
    "brace": brace,
    "angle": angle,
    "double_quote": double_quote,
    "single_quote": single_quote,
    "backtick": backtick,
}


__all__ = ["TEXT_OBJECTS", "TextObjectFunc", "Span"]
