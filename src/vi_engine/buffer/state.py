"""Caret and selection state for the reference editing surface."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class Selection:
    """Half-open ``[start, end)`` character range with its anchor.

    ``anchor`` is the offset the selection grows from; ``linewise`` marks a
    selection built from whole lines so cut/copy can tag register content.
    """

    start: int
    end: int
    anchor: int
    linewise: bool = False

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start


@dataclass(slots=True)
class BufferState:
    """Mutable caret + selection info tied to a BufferDocument version."""

    caret: int = 0
    selection: Optional[Selection] = None

    def set_selection(self, selection: Optional[Selection]) -> None:
        self.selection = selection

    def clear_selection(self) -> None:
        self.selection = None


__all__ = ["BufferState", "Selection"]
