"""Cut, copy and paste through the default register."""

from __future__ import annotations

from functools import partial
from typing import Optional

from vi_engine.buffer import RegisterValue, Selection
from vi_engine.keymaps import ResolutionMatch
from vi_engine.modes.base_mode import ModeContext

from . import caret, selection


def _register_text(text: str, linewise: bool) -> str:
    # a block ending at the last line carries its separator in front
    if linewise and text.startswith("\n") and not text.endswith("\n"):
        return text[1:] + "\n"
    return text


def cut(context: ModeContext) -> None:
    buffer = context.buffer
    if not buffer.is_something_selected:
        buffer.clear_selection()
        return
    linewise = bool(buffer.selection and buffer.selection.linewise)
    text = buffer.cut()
    context.registers.store(_register_text(text, linewise), linewise=linewise)


def copy(context: ModeContext) -> None:
    buffer = context.buffer
    if not buffer.is_something_selected:
        return
    linewise = bool(buffer.selection and buffer.selection.linewise)
    context.registers.store(_register_text(buffer.copy(), linewise), linewise=linewise)


def finish_yank(context: ModeContext, origin: int) -> None:
    """Drop the selection and park the caret where a yank leaves it."""

    buffer = context.buffer
    current = buffer.selection
    buffer.clear_selection()
    if current is None:
        buffer.caret_offset = origin
    elif current.linewise:
        first, _last = selection.line_span(context)
        origin_line = buffer.line_of(origin)
        if origin_line == first:
            buffer.caret_offset = origin
        else:
            column = origin - buffer.line_start(origin_line)
            buffer.set_caret(first, min(column, buffer.line_length(first)))
    else:
        buffer.caret_offset = min(current.start, origin)


def _insert_value(context: ModeContext, value: RegisterValue, *, after: bool, count: int) -> None:
    buffer = context.buffer
    text = value.text * count
    if value.linewise:
        line = buffer.caret_line
        if after:
            offset = buffer.line_start(line) + buffer.line_length(line)
            buffer.replace(offset, 0, "\n" + text[:-1])
            buffer.caret_offset = offset + 1
        else:
            offset = buffer.line_start(line)
            buffer.replace(offset, 0, text)
            buffer.caret_offset = offset
        caret.first_non_blank(context)
        return
    offset = buffer.caret_offset
    line_end = buffer.line_start(buffer.caret_line) + buffer.line_length(buffer.caret_line)
    if after and offset < line_end:
        offset += 1
    buffer.replace(offset, 0, text)
    buffer.caret_offset = offset + len(text) - 1 if text else offset


def _replace_selection(
    context: ModeContext, value: RegisterValue, target: Selection
) -> None:
    buffer = context.buffer
    buffer.select(target.start, target.end, linewise=target.linewise)
    removed = buffer.copy()
    cut(context)
    text = value.text
    if target.linewise and value.linewise:
        if removed.startswith("\n") and not removed.endswith("\n"):
            offset = buffer.caret_offset
            buffer.replace(offset, 0, "\n" + text[:-1])
            buffer.caret_offset = offset + 1
        else:
            offset = buffer.caret_offset
            buffer.replace(offset, 0, text)
            buffer.caret_offset = offset
        caret.first_non_blank(context)
        return
    if value.linewise and not target.linewise:
        text = text[:-1]
    offset = buffer.caret_offset
    buffer.replace(offset, 0, text)
    buffer.caret_offset = offset + max(0, len(text) - 1)


def paste(context: ModeContext, *, after: bool = True, count: int = 1) -> None:
    """Request the register and insert it once the text is available.

    A selection present at request time is replaced; an absent clipboard
    value performs no edit.
    """

    buffer = context.buffer
    target: Optional[Selection] = buffer.selection if buffer.is_something_selected else None

    def _apply(value: Optional[RegisterValue]) -> None:
        if value is None or not value.text:
            return
        with buffer.undo_group():
            if target is not None:
                _replace_selection(context, value, target)
            else:
                _insert_value(context, value, after=after, count=count)

    context.registers.request(_apply)


def paste_after(context: ModeContext, match: ResolutionMatch) -> None:
    """Paste after the caret (below the line for linewise text)."""

    del match
    step = partial(paste, after=True, count=context.count)
    context.repeat.run(context, (step,))


def paste_before(context: ModeContext, match: ResolutionMatch) -> None:
    """Paste before the caret (above the line for linewise text)."""

    del match
    step = partial(paste, after=False, count=context.count)
    context.repeat.run(context, (step,))


def yank_lines(context: ModeContext, match: ResolutionMatch) -> None:
    """Yank ``count`` whole lines."""

    del match
    origin = context.buffer.caret_offset
    steps = [selection.select_line]
    steps.extend([selection.extend_line_down] * (context.count - 1))
    steps.extend([copy, partial(finish_yank, origin=origin)])
    context.repeat.run(context, steps, record=False)


__all__ = [
    "copy",
    "cut",
    "finish_yank",
    "paste",
    "paste_after",
    "paste_before",
    "yank_lines",
]
