"""Selection-construction steps: motion spans, line blocks, text objects."""

from __future__ import annotations

from functools import partial
from typing import Optional, Tuple

from vi_engine.history import LastSelectionExtent
from vi_engine.keymaps import ResolutionMatch
from vi_engine.modes.base_mode import ModeContext, MotionModifier


def _anchor(context: ModeContext) -> int:
    selection = context.buffer.selection
    return selection.anchor if selection is not None else context.buffer.caret_offset


def extend_by_motion(
    context: ModeContext,
    motion: str,
    inclusive: bool = False,
    clip_to_line: bool = False,
) -> None:
    """Grow the selection from its anchor to wherever ``motion`` takes the caret."""

    buffer = context.buffer
    anchor = _anchor(context)
    buffer.move_caret(motion)
    lead = buffer.caret_offset
    if clip_to_line and lead > anchor:
        anchor_line = buffer.line_of(anchor)
        line_end = buffer.line_start(anchor_line) + buffer.line_length(anchor_line)
        if anchor < line_end < lead:
            lead = line_end
    if inclusive and lead >= anchor:
        lead = min(lead + 1, len(buffer.text))
    buffer.select(anchor, lead)


def motion_span(motion: str, *, inclusive: bool = False, clip_to_line: bool = False):
    return partial(
        extend_by_motion, motion=motion, inclusive=inclusive, clip_to_line=clip_to_line
    )


def _select_span(context: ModeContext, first: int, last: int) -> None:
    last_line = context.buffer.line_count - 1
    first, last = max(0, first), min(last, last_line)
    context.state.line_span = (first, last)
    context.buffer.select_lines(first, last)


def select_line(context: ModeContext) -> None:
    line = context.buffer.caret_line
    _select_span(context, line, line)


def extend_line_down(context: ModeContext) -> None:
    first, last = context.state.line_span or (context.buffer.caret_line,) * 2
    _select_span(context, first, last + 1)


def extend_line_up(context: ModeContext) -> None:
    first, last = context.state.line_span or (context.buffer.caret_line,) * 2
    _select_span(context, first - 1, last)


def extend_to_document_end(context: ModeContext) -> None:
    first, _last = context.state.line_span or (context.buffer.caret_line,) * 2
    _select_span(context, first, context.buffer.line_count - 1)


def trim_line_break(context: ModeContext) -> None:
    """Shrink a line block to its content so the emptied line survives."""

    buffer = context.buffer
    first, last = context.state.line_span or (buffer.caret_line,) * 2
    start = buffer.line_start(first)
    end = buffer.line_start(last) + buffer.line_length(last)
    buffer.select(start, end, linewise=True)


def select_object(context: ModeContext, kind: str, inner: bool) -> None:
    if not context.buffer.select_text_object(kind, inner):
        context.buffer.clear_selection()


def object_span(kind: str, *, inner: bool):
    return partial(select_object, kind=kind, inner=inner)


def text_object(context: ModeContext, match: ResolutionMatch, *, kind: str) -> bool:
    """Select a text object using the pending inner/outer modifier."""

    del match
    inner = context.state.modifier is not MotionModifier.OUTER
    return context.buffer.select_text_object(kind, inner)


# Visual-mode selection ---------------------------------------------------


def visual_update(context: ModeContext, *, linewise: bool) -> None:
    """Re-derive the visual selection from the anchor and the caret."""

    buffer = context.buffer
    lead = buffer.caret_offset
    anchor = context.state.visual_anchor
    if anchor is None:
        anchor = context.state.visual_anchor = lead
    if linewise:
        _select_span(context, buffer.line_of(anchor), buffer.line_of(lead))
    else:
        size = len(buffer.text)
        if anchor <= lead:
            buffer.select(anchor, min(lead + 1, size))
        else:
            buffer.select(min(anchor + 1, size), lead)
    buffer.caret_offset = lead


def swap_anchor(context: ModeContext, *, linewise: bool) -> None:
    buffer = context.buffer
    anchor = context.state.visual_anchor
    if anchor is None:
        return
    context.state.visual_anchor = buffer.caret_offset
    buffer.caret_offset = anchor
    visual_update(context, linewise=linewise)


def capture_extent(context: ModeContext) -> Optional[LastSelectionExtent]:
    """Record the current selection's shape for later reconstruction."""

    buffer = context.buffer
    selection = buffer.selection
    if selection is None:
        return None
    if selection.linewise:
        first, last = context.state.line_span or (
            buffer.line_of(selection.start),
            buffer.line_of(selection.end),
        )
        extent = LastSelectionExtent(last - first, 0, linewise=True)
    else:
        first_line = buffer.line_of(selection.start)
        last_line = buffer.line_of(selection.end)
        if first_line == last_line:
            trailing = selection.end - selection.start
        else:
            trailing = selection.end - buffer.line_start(last_line)
        extent = LastSelectionExtent(last_line - first_line, trailing)
    context.repeat.last_extent = extent
    return extent


def restore_extent(context: ModeContext, extent: LastSelectionExtent) -> None:
    """Select an equivalent-shaped span starting at the caret."""

    buffer = context.buffer
    line = buffer.caret_line
    if extent.linewise:
        _select_span(context, line, line + extent.lines)
        return
    start = buffer.caret_offset
    if extent.lines == 0:
        end = min(start + extent.trailing, buffer.line_start(line) + buffer.line_length(line))
    else:
        last = min(line + extent.lines, buffer.line_count - 1)
        end = buffer.line_start(last) + min(extent.trailing, buffer.line_length(last))
    buffer.select(start, end)


def line_span(context: ModeContext) -> Tuple[int, int]:
    buffer = context.buffer
    return context.state.line_span or (buffer.caret_line, buffer.caret_line)


__all__ = [
    "capture_extent",
    "extend_by_motion",
    "extend_line_down",
    "extend_line_up",
    "extend_to_document_end",
    "line_span",
    "motion_span",
    "object_span",
    "restore_extent",
    "select_line",
    "select_object",
    "swap_anchor",
    "text_object",
    "trim_line_break",
    "visual_update",
]
