"""Caret motions and the priming steps that precede Insert mode."""

from __future__ import annotations

from functools import partial
from typing import Optional

from vi_engine.history import MarkPosition
from vi_engine.keymaps import ResolutionMatch
from vi_engine.modes.base_mode import ModeContext, ModeResult


def position(context: ModeContext) -> MarkPosition:
    buffer = context.buffer
    return (buffer.caret_line, buffer.caret_column)


def save_context_mark(context: ModeContext) -> None:
    context.marks.set_context(position(context))


def apply_motion(context: ModeContext, motion: str, count: int = 1) -> None:
    for _ in range(count):
        context.buffer.move_caret(motion)


def motion_step(motion: str):
    return partial(apply_motion, motion=motion)


def move(context: ModeContext, match: ResolutionMatch) -> None:
    """Move the caret by the bound motion, ``count`` times."""

    metadata = match.metadata
    if metadata.get("jump"):
        save_context_mark(context)
    count = 1 if metadata.get("jump") else context.count
    apply_motion(context, str(metadata["motion"]), count)


def first_non_blank(context: ModeContext) -> None:
    context.buffer.move_caret("line_first_non_blank")


def jump_to_line(context: ModeContext, line: int, *, save: bool = True) -> int:
    """Jump to ``line`` (clamped) at its first non-blank; returns the line."""

    buffer = context.buffer
    if save:
        save_context_mark(context)
    line = max(0, min(line, buffer.line_count - 1))
    buffer.set_caret(line, 0)
    first_non_blank(context)
    return line


def goto_line(context: ModeContext, match: ResolutionMatch) -> None:
    """Go to line ``count`` or to the last line."""

    del match
    count = context.state.count
    target = count.value - 1 if count.explicit else context.buffer.line_count - 1
    jump_to_line(context, target)


def retreat(context: ModeContext) -> None:
    """Keep a Normal-mode caret on a character, never past the line end."""

    buffer = context.buffer
    column = buffer.caret_column
    if column > 0 and column >= buffer.line_length(buffer.caret_line):
        buffer.set_caret(buffer.caret_line, buffer.line_length(buffer.caret_line) - 1)


def leave_insert(context: ModeContext) -> None:
    buffer = context.buffer
    if buffer.caret_column > 0:
        buffer.move_caret("left")


def new_line_below(context: ModeContext) -> None:
    buffer = context.buffer
    buffer.move_caret("line_end")
    buffer.insert_at_caret("\n")


def new_line_above(context: ModeContext) -> None:
    buffer = context.buffer
    buffer.move_caret("line_start")
    offset = buffer.caret_offset
    buffer.insert_at_caret("\n")
    buffer.caret_offset = offset


def restore_offset(context: ModeContext, offset: int) -> None:
    context.buffer.caret_offset = offset


def jump_to_mark(context: ModeContext, name: str) -> Optional[ModeResult]:
    marks = context.marks
    if not marks.is_valid_name(name):
        return ModeResult(consumed=True, status="error", message="Invalid Mark")
    target = marks.get(name)
    if target is None:
        return ModeResult(consumed=True, status="error", message="Unknown Mark")
    # the context mark is read before it is overwritten, so `` swaps
    save_context_mark(context)
    line = max(0, min(target[0], context.buffer.line_count - 1))
    column = min(target[1], context.buffer.line_length(line))
    context.buffer.set_caret(line, column)
    return None


__all__ = [
    "apply_motion",
    "first_non_blank",
    "goto_line",
    "jump_to_line",
    "jump_to_mark",
    "leave_insert",
    "motion_step",
    "move",
    "new_line_above",
    "new_line_below",
    "position",
    "restore_offset",
    "retreat",
    "save_context_mark",
]
