"""Editing primitives, the Normal-mode edit commands and Insert-mode keys."""

from __future__ import annotations

from functools import partial
from typing import Optional

from vi_engine.history import LastInsertion
from vi_engine.keymaps import ResolutionMatch
from vi_engine.modes.base_mode import KeyInput, ModeContext, ModeResult
from vi_engine.modes.keymap_helpers import key_to_token

from .clipboard import cut
from .selection import motion_span

# Steps --------------------------------------------------------------------


def indent(context: ModeContext) -> None:
    context.buffer.indent_selection()


def unindent(context: ModeContext) -> None:
    context.buffer.unindent_selection()


def format_lines(context: ModeContext) -> None:
    context.buffer.format_selection()


def join(context: ModeContext) -> None:
    context.buffer.join_lines()


def swap_case(context: ModeContext) -> None:
    context.buffer.toggle_case()


def fold(context: ModeContext, operation: str) -> None:
    context.buffer.fold(operation)


def overwrite_selection(context: ModeContext, text: str) -> None:
    """Replace the selected span with ``text``, caret on its last character."""

    buffer = context.buffer
    current = buffer.selection
    if current is None or current.is_empty:
        return
    buffer.clear_selection()
    buffer.replace(current.start, current.length, text)
    buffer.caret_offset = current.start + max(0, len(text) - 1)


def insert_text(context: ModeContext, text: str, *, overwrite: bool = False) -> None:
    buffer = context.buffer
    if not overwrite:
        buffer.insert_at_caret(text)
        return
    for char in text:
        offset = buffer.caret_offset
        line_end = buffer.line_start(buffer.caret_line) + buffer.line_length(
            buffer.caret_line
        )
        if offset < line_end:
            buffer.replace(offset, 1, char)
            buffer.caret_offset = offset + 1
        else:
            buffer.insert_at_caret(char)


# Insert-mode keys ------------------------------------------------------------


def newline(context: ModeContext, match: Optional[ResolutionMatch], *, overwrite: bool = False) -> None:
    """Break the line at the caret."""

    del match, overwrite
    context.buffer.insert_at_caret("\n")


def backspace(context: ModeContext, match: Optional[ResolutionMatch], *, overwrite: bool = False) -> None:
    """Delete the character before the caret."""

    del match
    buffer = context.buffer
    if overwrite:
        buffer.move_caret("left")
        return
    offset = buffer.caret_offset
    if offset > 0:
        buffer.replace(offset - 1, 1, "")
        buffer.caret_offset = offset - 1


def tab(context: ModeContext, match: Optional[ResolutionMatch], *, overwrite: bool = False) -> None:
    """Insert one indent unit."""

    del match
    insert_text(context, context.config.indent_unit, overwrite=overwrite)


def delete_forward(context: ModeContext, match: Optional[ResolutionMatch], *, overwrite: bool = False) -> None:
    """Delete the character under the caret."""

    del match, overwrite
    buffer = context.buffer
    offset = buffer.caret_offset
    if offset < len(buffer.text):
        buffer.replace(offset, 1, "")
        buffer.caret_offset = offset


def apply_insert_key(context: ModeContext, key: KeyInput, *, overwrite: bool = False) -> bool:
    """Apply an insert-producing keystroke; ``False`` if the key is not one."""

    match = context.keymaps.lookup("insert", key_to_token(key))
    if match is not None:
        match.action(context, match, overwrite=overwrite)
        return True
    char = key.printable
    if char is None:
        return False
    insert_text(context, char, overwrite=overwrite)
    return True


def replay_insertion(context: ModeContext, insertion: LastInsertion) -> None:
    for key in insertion.keys:
        apply_insert_key(context, key, overwrite=insertion.overwrite)


# Normal-mode commands ------------------------------------------------------


def delete_chars(context: ModeContext, match: ResolutionMatch) -> None:
    """Delete ``count`` characters under and after the caret."""

    del match
    steps = [motion_span("right")] * context.count + [cut]
    context.repeat.run(context, steps)


def delete_chars_back(context: ModeContext, match: ResolutionMatch) -> None:
    """Delete ``count`` characters before the caret."""

    del match
    steps = [motion_span("left")] * context.count + [cut]
    context.repeat.run(context, steps)


def delete_to_line_end(context: ModeContext, match: ResolutionMatch) -> None:
    """Delete to the end of the line (and ``count - 1`` more lines)."""

    del match
    steps = [motion_span("down")] * (context.count - 1)
    steps += [motion_span("line_end"), cut]
    context.repeat.run(context, steps)


def toggle_case(context: ModeContext, match: ResolutionMatch) -> None:
    """Switch the case of ``count`` characters."""

    del match
    context.repeat.run(context, [swap_case] * context.count)


def join_lines(context: ModeContext, match: ResolutionMatch) -> None:
    """Join ``count`` lines (at least two)."""

    del match
    context.repeat.run(context, [join] * max(1, context.count - 1))


def undo(context: ModeContext, match: ResolutionMatch) -> Optional[ModeResult]:
    """Undo the last change."""

    del match
    for _ in range(context.count):
        if not context.buffer.undo():
            return ModeResult(consumed=True, message="Already at oldest change")
    return None


def redo(context: ModeContext, match: ResolutionMatch) -> Optional[ModeResult]:
    """Redo the last undone change."""

    del match
    for _ in range(context.count):
        if not context.buffer.redo():
            return ModeResult(consumed=True, message="Already at newest change")
    return None


def repeat_last_change(context: ModeContext, match: ResolutionMatch) -> None:
    """Replay the last change, ``count`` times."""

    del match
    count = context.state.count
    context.repeat.replay(context, count.value if count.explicit else 1)


def write_char_steps(char: str, count: int) -> list:
    """Steps for ``r``: select ``count`` characters then type over them."""

    return [motion_span("right")] * count + [partial(overwrite_selection, text=char * count)]


__all__ = [
    "apply_insert_key",
    "backspace",
    "delete_chars",
    "delete_chars_back",
    "delete_forward",
    "delete_to_line_end",
    "fold",
    "format_lines",
    "indent",
    "insert_text",
    "join",
    "join_lines",
    "newline",
    "overwrite_selection",
    "redo",
    "repeat_last_change",
    "replay_insertion",
    "swap_case",
    "tab",
    "toggle_case",
    "undo",
    "unindent",
    "write_char_steps",
]
