"""Mark store: single-character names mapped to saved caret positions."""

from __future__ import annotations

from typing import Dict, Iterator, Optional, Tuple

from vi_engine.runtime import telemetry

MarkPosition = Tuple[int, int]  # (line, column)


class MarkStore:
    """Session-lifetime marks plus the distinguished context mark.

    The context mark is overwritten automatically before every large jump so
    the user can return to where the jump started.
    """

    def __init__(self, context_mark: str = "`") -> None:
        self.context_mark = context_mark
        self._marks: Dict[str, MarkPosition] = {}

    def is_valid_name(self, name: str) -> bool:
        return len(name) == 1 and (name.isalnum() or name == self.context_mark)

    def set(self, name: str, position: MarkPosition) -> None:
        if not self.is_valid_name(name):
            raise ValueError(f"'{name}' is not a valid mark name")
        self._marks[name] = position
        telemetry.record_event(
            "mark.set", data={"name": name, "line": position[0], "column": position[1]}
        )

    def get(self, name: str) -> Optional[MarkPosition]:
        return self._marks.get(name)

    def set_context(self, position: MarkPosition) -> None:
        self._marks[self.context_mark] = position

    @property
    def context(self) -> Optional[MarkPosition]:
        return self._marks.get(self.context_mark)

    def __contains__(self, name: object) -> bool:
        return name in self._marks

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._marks))

    def __len__(self) -> int:
        return len(self._marks)


__all__ = ["MarkPosition", "MarkStore"]
