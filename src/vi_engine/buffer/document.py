"""Line-indexed text storage used by the reference editing surface."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from .protocol import BufferValidationError

Position = Tuple[int, int]  # (line, column), both zero-based


@dataclass(slots=True)
class BufferDocument:
    """Immutable-ish text storage built on a simple list-of-lines model.

    Lines never contain the ``\\n`` separator; a document always holds at
    least one (possibly empty) line.
    """

    _lines: List[str] = field(default_factory=lambda: [""])
    version: int = 0

    @classmethod
    def from_text(cls, text: str, *, version: int = 0) -> "BufferDocument":
        return cls(_lines=text.split("\n"), version=version)

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def snapshot(self) -> Sequence[str]:
        return tuple(self._lines)

    def get_line(self, index: int) -> str:
        if index < 0 or index >= len(self._lines):
            raise BufferValidationError(f"Line {index} out of range", line=index)
        return self._lines[index]

    def line_start(self, index: int) -> int:
        self.get_line(index)
        return sum(len(line) + 1 for line in self._lines[:index])

    def line_end(self, index: int) -> int:
        return self.line_start(index) + len(self._lines[index])

    def offset_of(self, line: int, column: int) -> int:
        text = self.get_line(line)
        if column < 0 or column > len(text):
            raise BufferValidationError(
                f"Column {column} out of range on line {line}", line=line
            )
        return self.line_start(line) + column

    def position_of(self, offset: int) -> Position:
        if offset < 0:
            raise BufferValidationError(f"Offset {offset} out of range")
        running = 0
        for row, line in enumerate(self._lines):
            if offset <= running + len(line):
                return (row, offset - running)
            running += len(line) + 1
        raise BufferValidationError(f"Offset {offset} out of range")

    def replace(self, offset: int, length: int, text: str) -> "BufferDocument":
        """Return a document with ``[offset, offset + length)`` replaced."""

        current = self.text
        if offset < 0 or length < 0 or offset + length > len(current):
            raise BufferValidationError(
                f"Range {offset}+{length} outside document of {len(current)}"
            )
        updated = current[:offset] + text + current[offset + length :]
        return BufferDocument.from_text(updated, version=self.version + 1)


__all__ = ["BufferDocument", "Position"]
