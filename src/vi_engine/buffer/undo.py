"""Grouped undo/redo history for the reference editing surface."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True, slots=True)
class UndoEntry:
    before_text: str
    after_text: str
    caret_before: int
    caret_after: int


class UndoTimeline:
    """Linear undo/redo history; nested groups collapse into one entry."""

    def __init__(self) -> None:
        self._entries: List[UndoEntry] = []
        self._index: int = -1
        self._depth = 0
        self._pending: Optional[tuple[str, int]] = None

    @property
    def in_group(self) -> bool:
        return self._depth > 0

    def open_group(self) -> None:
        self._depth += 1

    def close_group(self, text: str, caret: int) -> None:
        if self._depth == 0:
            raise RuntimeError("close_group without matching open_group")
        self._depth -= 1
        if self._depth == 0 and self._pending is not None:
            before_text, caret_before = self._pending
            self._pending = None
            if before_text != text:
                self._push(UndoEntry(before_text, text, caret_before, caret))

    def note_edit(self, before_text: str, caret: int, after_text: str, after_caret: int) -> None:
        """Record an edit; outside a group it becomes its own entry."""

        if self._depth > 0:
            if self._pending is None:
                self._pending = (before_text, caret)
            return
        self._push(UndoEntry(before_text, after_text, caret, after_caret))

    def _push(self, entry: UndoEntry) -> None:
        if self._index < len(self._entries) - 1:
            self._entries = self._entries[: self._index + 1]
        self._entries.append(entry)
        self._index = len(self._entries) - 1

    def can_undo(self) -> bool:
        return self._index >= 0

    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def undo(self) -> Optional[UndoEntry]:
        if not self.can_undo():
            return None
        entry = self._entries[self._index]
        self._index -= 1
        return entry

    def redo(self) -> Optional[UndoEntry]:
        if not self.can_redo():
            return None
        self._index += 1
        return self._entries[self._index]

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["UndoEntry", "UndoTimeline"]
