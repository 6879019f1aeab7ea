"""Pure caret motions over a flat text buffer.

Every motion takes the full text and the caret offset and returns the target
offset. Motions never modify text; the surface applies the result.
"""

from __future__ import annotations

from typing import Callable, Dict

MotionFunc = Callable[[str, int], int]

BRACKETS = {"(": ")", "[": "]", "{": "}", ")": "(", "]": "[", "}": "{"}


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def _char_class(ch: str, big: bool) -> int:
    """0 = whitespace, 1 = word, 2 = punctuation (WORD motions merge 1 and 2)."""
    if ch.isspace():
        return 0
    if big or _is_word_char(ch):
        return 1
    return 2


def line_bounds(text: str, offset: int) -> tuple[int, int]:
    """Return ``(start, end)`` offsets of the line containing ``offset``."""
    start = text.rfind("\n", 0, offset) + 1
    end = text.find("\n", offset)
    if end < 0:
        end = len(text)
    return start, end


# ============================================================================
# Character and line motions
# ============================================================================


def left(text: str, offset: int) -> int:
    start, _end = line_bounds(text, offset)
    return max(start, offset - 1)


def right(text: str, offset: int) -> int:
    _start, end = line_bounds(text, offset)
    return min(end, offset + 1)


def up(text: str, offset: int) -> int:
    start, _end = line_bounds(text, offset)
    if start == 0:
        return offset
    prev_start, prev_end = line_bounds(text, start - 1)
    return min(prev_start + (offset - start), prev_end)


def down(text: str, offset: int) -> int:
    start, end = line_bounds(text, offset)
    if end >= len(text):
        return offset
    next_start, next_end = line_bounds(text, end + 1)
    return min(next_start + (offset - start), next_end)


def line_start(text: str, offset: int) -> int:
    return line_bounds(text, offset)[0]


def line_end(text: str, offset: int) -> int:
    return line_bounds(text, offset)[1]


def line_first_non_blank(text: str, offset: int) -> int:
    start, end = line_bounds(text, offset)
    line = text[start:end]
    return start + len(line) - len(line.lstrip(" \t"))


def document_start(text: str, offset: int) -> int:
    del text, offset
    return 0


def document_end(text: str, offset: int) -> int:
    del offset
    return len(text)


# ============================================================================
# Word motions: w, W, b, B, e, E
# ============================================================================


def _word_forward(text: str, offset: int, big: bool) -> int:
    n = len(text)
    if offset >= n:
        return n
    i = offset
    cls = _char_class(text[i], big)
    if cls:
        while i < n and _char_class(text[i], big) == cls:
            i += 1
    seen_newline = False
    while i < n and text[i].isspace():
        if text[i] == "\n":
            # an empty line counts as a word of its own
            if seen_newline:
                return i
            seen_newline = True
        i += 1
    return i


def _word_back(text: str, offset: int, big: bool) -> int:
    if offset <= 0:
        return 0
    i = offset - 1
    while i > 0 and text[i].isspace():
        if text[i] == "\n" and text[i - 1] == "\n":
            return i
        i -= 1
    if text[i].isspace():
        return i
    cls = _char_class(text[i], big)
    while i > 0 and _char_class(text[i - 1], big) == cls:
        i -= 1
    return i


def _word_end(text: str, offset: int, big: bool) -> int:
    n = len(text)
    if n == 0:
        return 0
    i = offset + 1
    while i < n and text[i].isspace():
        i += 1
    if i >= n:
        return max(offset, n - 1)
    cls = _char_class(text[i], big)
    while i + 1 < n and _char_class(text[i + 1], big) == cls:
        i += 1
    return i


def word_forward(text: str, offset: int) -> int:
    return _word_forward(text, offset, big=False)


def big_word_forward(text: str, offset: int) -> int:
    return _word_forward(text, offset, big=True)


def word_back(text: str, offset: int) -> int:
    return _word_back(text, offset, big=False)


def big_word_back(text: str, offset: int) -> int:
    return _word_back(text, offset, big=True)


def word_end(text: str, offset: int) -> int:
    return _word_end(text, offset, big=False)


def big_word_end(text: str, offset: int) -> int:
    return _word_end(text, offset, big=True)


# ============================================================================
# Bracket matching: %
# ============================================================================


def matching_bracket(text: str, offset: int) -> int:
    """Jump to the bracket matching the first bracket at or after the caret."""
    _start, end = line_bounds(text, offset)
    origin = offset
    while origin < end and text[origin] not in BRACKETS:
        origin += 1
    if origin >= end:
        return offset

    opening = text[origin]
    closing = BRACKETS[opening]
    step = 1 if opening in "([{" else -1
    depth = 0
    i = origin
    while 0 <= i < len(text):
        if text[i] == opening:
            depth += 1
        elif text[i] == closing:
            depth -= 1
            if depth == 0:
                return i
        i += step
    return offset


MOTIONS: Dict[str, MotionFunc] = {
    "left": left,
    "right": right,
    "up": up,
    "down": down,
    "line_start": line_start,
    "line_end": line_end,
    "line_first_non_blank": line_first_non_blank,
    "document_start": document_start,
    "document_end": document_end,
    "word_forward": word_forward,
    "WORD_forward": big_word_forward,
    "word_back": word_back,
    "WORD_back": big_word_back,
    "word_end": word_end,
    "WORD_end": big_word_end,
    "matching_bracket": matching_bracket,
}

# Motions whose target character is part of the span they define.
INCLUSIVE_MOTIONS = frozenset({"word_end", "WORD_end", "matching_bracket"})


__all__ = ["MOTIONS", "INCLUSIVE_MOTIONS", "MotionFunc", "line_bounds"]
