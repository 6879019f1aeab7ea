"""In-memory editing surface: the reference implementation of ``EditingSurface``."""

from __future__ import annotations

import re
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Set, Tuple

from vi_engine.errors import PatternError
from vi_engine.runtime import telemetry

from .document import BufferDocument
from .motions import MOTIONS
from .protocol import BufferMirror, BufferValidationError, ClipboardCallback
from .registers import Clipboard
from .state import BufferState, Selection
from .text_objects import TEXT_OBJECTS
from .undo import UndoTimeline

FOLD_OPERATIONS = (
    "toggle",
    "open",
    "close",
    "toggle_recursive",
    "open_recursive",
    "close_recursive",
    "open_all",
    "close_all",
)


class Buffer:
    """Plain-text surface with caret, selection, clipboard, undo and folds."""

    def __init__(
        self,
        *,
        name: str = "default",
        document: Optional[BufferDocument] = None,
        clipboard: Optional[Clipboard] = None,
        indent_unit: str = "    ",
        search_wraps: bool = True,
    ) -> None:
        self.name = name
        self.document = document or BufferDocument()
        self.state = BufferState()
        self.clipboard = clipboard or Clipboard()
        self.undo_timeline = UndoTimeline()
        self.indent_unit = indent_unit
        self.search_wraps = search_wraps
        self.folds: List[Tuple[int, int]] = []
        self.collapsed: Set[Tuple[int, int]] = set()

    @classmethod
    def from_text(cls, text: str, *, caret: int = 0, **kwargs: object) -> "Buffer":
        buffer = cls(document=BufferDocument.from_text(text), **kwargs)  # type: ignore[arg-type]
        buffer.caret_offset = caret
        return buffer

    # ------------------------------------------------------------------
    # Content and metrics
    # ------------------------------------------------------------------
    @property
    def text(self) -> str:
        return self.document.text

    @property
    def line_count(self) -> int:
        return self.document.line_count

    def line_text(self, line: int) -> str:
        return self.document.get_line(line)

    def line_length(self, line: int) -> int:
        return len(self.document.get_line(line))

    def line_start(self, line: int) -> int:
        return self.document.line_start(line)

    def line_of(self, offset: int) -> int:
        return self.document.position_of(offset)[0]

    # ------------------------------------------------------------------
    # Caret
    # ------------------------------------------------------------------
    @property
    def caret_offset(self) -> int:
        return self.state.caret

    @caret_offset.setter
    def caret_offset(self, offset: int) -> None:
        self.state.caret = max(0, min(offset, len(self.text)))

    @property
    def caret_line(self) -> int:
        return self.document.position_of(self.state.caret)[0]

    @property
    def caret_column(self) -> int:
        return self.document.position_of(self.state.caret)[1]

    def set_caret(self, line: int, column: int) -> None:
        line = max(0, min(line, self.line_count - 1))
        column = max(0, min(column, self.line_length(line)))
        self.state.caret = self.document.offset_of(line, column)

    def move_caret(self, motion: str) -> None:
        try:
            func = MOTIONS[motion]
        except KeyError as exc:
            raise BufferValidationError(f"Unknown motion '{motion}'") from exc
        self.state.caret = func(self.text, self.state.caret)

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------
    def replace(self, offset: int, length: int, text: str) -> None:
        before_text = self.text
        caret_before = caret = self.state.caret
        self.document = self.document.replace(offset, length, text)
        if caret >= offset + length:
            caret += len(text) - length
        elif caret > offset:
            caret = offset
        self.state.caret = max(0, min(caret, len(self.text)))
        self.undo_timeline.note_edit(before_text, caret_before, self.text, self.state.caret)

    def insert_at_caret(self, text: str) -> None:
        offset = self.state.caret
        self.replace(offset, 0, text)
        self.state.caret = offset + len(text)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    @property
    def selection(self) -> Optional[Selection]:
        return self.state.selection

    @property
    def is_something_selected(self) -> bool:
        selection = self.state.selection
        return selection is not None and not selection.is_empty

    @property
    def selected_text(self) -> str:
        selection = self.state.selection
        if selection is None:
            return ""
        return self.text[selection.start : selection.end]

    def select(self, anchor: int, lead: int, *, linewise: bool = False) -> None:
        size = len(self.text)
        anchor = max(0, min(anchor, size))
        lead = max(0, min(lead, size))
        self.state.set_selection(
            Selection(min(anchor, lead), max(anchor, lead), anchor, linewise)
        )

    def select_lines(self, first: int, last: int) -> None:
        """Select whole lines ``first..last`` including one line separator."""

        first, last = sorted((first, last))
        first = max(0, first)
        last = min(last, self.line_count - 1)
        start = self.line_start(first)
        if last < self.line_count - 1:
            end = self.line_start(last + 1)
        else:
            end = len(self.text)
            if first > 0:
                # no trailing separator: take the one before the block
                start -= 1
        self.state.set_selection(Selection(start, end, start, linewise=True))

    def clear_selection(self) -> None:
        self.state.clear_selection()

    def select_text_object(self, kind: str, inner: bool) -> bool:
        func = TEXT_OBJECTS.get(kind)
        if func is None:
            raise BufferValidationError(f"Unknown text object '{kind}'")
        span = func(self.text, self.state.caret, inner)
        if span is None:
            return False
        start, end = span
        self.state.set_selection(Selection(start, end, start))
        self.state.caret = start
        return True

    def _selected_lines(self) -> range:
        selection = self.state.selection
        if selection is None or selection.is_empty:
            line = self.caret_line
            return range(line, line + 1)
        first = self.line_of(selection.start)
        if selection.linewise and self.text[selection.start : selection.start + 1] == "\n":
            first += 1
        last = self.line_of(selection.end)
        if last > first and self.document.position_of(selection.end)[1] == 0:
            last -= 1
        return range(first, last + 1)

    # ------------------------------------------------------------------
    # Operator primitives
    # ------------------------------------------------------------------
    def cut(self) -> str:
        selection = self.state.selection
        if selection is None:
            return ""
        text = self.text[selection.start : selection.end]
        self.state.clear_selection()
        self.state.caret = selection.start
        if text:
            self.replace(selection.start, len(text), "")
            self.state.caret = selection.start
        return text

    def copy(self) -> str:
        return self.selected_text

    def _rewrite_lines(self, lines: range, transform) -> None:
        first, last = lines.start, lines.stop - 1
        start = self.line_start(first)
        end = self.line_start(last) + self.line_length(last)
        original = self.text[start:end].split("\n")
        updated = "\n".join(transform(line) for line in original)
        if updated != self.text[start:end]:
            self.replace(start, end - start, updated)
        self.state.clear_selection()
        self.state.caret = self.line_start(first)

    def indent_selection(self) -> None:
        unit = self.indent_unit
        self._rewrite_lines(
            self._selected_lines(), lambda line: unit + line if line else line
        )

    def unindent_selection(self) -> None:
        unit = self.indent_unit

        def outdent(line: str) -> str:
            if line.startswith("\t"):
                return line[1:]
            width = 0
            while width < len(unit) and width < len(line) and line[width] == " ":
                width += 1
            return line[width:]

        self._rewrite_lines(self._selected_lines(), outdent)

    def format_selection(self) -> None:
        self._rewrite_lines(self._selected_lines(), str.rstrip)

    def join_lines(self) -> None:
        lines = self._selected_lines()
        joins = max(1, len(lines) - 1)
        self.state.clear_selection()
        line = lines.start
        for _ in range(joins):
            if line >= self.line_count - 1:
                break
            end = self.line_start(line) + self.line_length(line)
            following = self.line_text(line + 1)
            stripped = following.lstrip(" \t")
            current = self.line_text(line)
            glue = "" if not stripped or not current or current.endswith(" ") else " "
            self.replace(end, 1 + len(following) - len(stripped), glue)
            self.state.caret = end
        telemetry.record_event("buffer.join", data={"lines": joins + 1})

    def toggle_case(self) -> None:
        selection = self.state.selection
        if selection is not None and not selection.is_empty:
            text = self.text[selection.start : selection.end]
            self.replace(selection.start, len(text), text.swapcase())
            self.state.clear_selection()
            self.state.caret = selection.start
            return
        offset = self.state.caret
        line_end = self.line_start(self.caret_line) + self.line_length(self.caret_line)
        if offset >= line_end:
            return
        self.replace(offset, 1, self.text[offset].swapcase())
        self.state.caret = min(offset + 1, line_end)

    # ------------------------------------------------------------------
    # Folds
    # ------------------------------------------------------------------
    def add_fold(self, first_line: int, last_line: int) -> None:
        self.folds.append((first_line, last_line))

    def fold(self, operation: str) -> None:
        if operation not in FOLD_OPERATIONS:
            raise BufferValidationError(f"Unknown fold operation '{operation}'")
        if operation.endswith("_all"):
            targets = list(self.folds)
        else:
            line = self.caret_line
            containing = sorted(
                (fold for fold in self.folds if fold[0] <= line <= fold[1]),
                key=lambda fold: fold[1] - fold[0],
            )
            targets = containing if operation.endswith("_recursive") else containing[:1]
        action = operation.split("_")[0]
        for fold in targets:
            if action == "open" or (action == "toggle" and fold in self.collapsed):
                self.collapsed.discard(fold)
            else:
                self.collapsed.add(fold)

    # ------------------------------------------------------------------
    # Clipboard
    # ------------------------------------------------------------------
    def clipboard_set(self, text: str) -> None:
        self.clipboard.set_text(text)

    def request_clipboard(self, callback: ClipboardCallback) -> None:
        self.clipboard.request_text(callback)

    # ------------------------------------------------------------------
    # Undo
    # ------------------------------------------------------------------
    @contextmanager
    def undo_group(self) -> Iterator[UndoTimeline]:
        self.undo_timeline.open_group()
        try:
            yield self.undo_timeline
        finally:
            self.undo_timeline.close_group(self.text, self.state.caret)

    def undo(self) -> bool:
        entry = self.undo_timeline.undo()
        if entry is None:
            return False
        self.document = BufferDocument.from_text(
            entry.before_text, version=self.document.version + 1
        )
        self.state.clear_selection()
        self.caret_offset = entry.caret_before
        return True

    def redo(self) -> bool:
        entry = self.undo_timeline.redo()
        if entry is None:
            return False
        self.document = BufferDocument.from_text(
            entry.after_text, version=self.document.version + 1
        )
        self.state.clear_selection()
        self.caret_offset = entry.caret_after
        return True

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    def search(
        self, pattern: str, start: int, *, backward: bool, case_sensitive: bool
    ) -> Optional[int]:
        flags = re.MULTILINE if case_sensitive else re.MULTILINE | re.IGNORECASE
        try:
            regex = re.compile(pattern, flags)
        except re.error as exc:
            raise PatternError(pattern, str(exc)) from exc

        text = self.text
        if backward:
            starts = [match.start() for match in regex.finditer(text)]
            before = [offset for offset in starts if offset < start]
            if before:
                return before[-1]
            return starts[-1] if starts and self.search_wraps else None

        start = max(0, min(start, len(text)))
        match = regex.search(text, start)
        if match is None and self.search_wraps:
            match = regex.search(text, 0)
        return match.start() if match else None

    # ------------------------------------------------------------------
    # Host snapshots
    # ------------------------------------------------------------------
    def mirror(self, *, attributes: Optional[Dict[str, str]] = None) -> BufferMirror:
        selection = self.state.selection
        return BufferMirror(
            text=self.text,
            caret=(self.caret_line, self.caret_column),
            selection=(selection.start, selection.end) if selection else None,
            attributes=dict(attributes or {}),
        )


__all__ = ["Buffer", "FOLD_OPERATIONS"]
