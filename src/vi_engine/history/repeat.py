"""Repeat engine: the last change, the last insertion and selection extents."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable, List, Optional, Tuple

from vi_engine.runtime import telemetry

if TYPE_CHECKING:
    from vi_engine.modes.base_mode import KeyInput

Step = Callable[[Any], None]


@dataclass(frozen=True, slots=True)
class LastInsertion:
    """Keystrokes typed during one Insert/Replace session."""

    keys: Tuple["KeyInput", ...] = ()
    overwrite: bool = False


@dataclass(frozen=True, slots=True)
class LastSelectionExtent:
    """Shape of the last operated-on selection.

    ``lines`` counts the lines after the first one; ``trailing`` is the
    selection length for single-line charwise selections and the end column
    on the last line otherwise.
    """

    lines: int
    trailing: int
    linewise: bool = False


class RepeatEngine:
    """Captures primitive steps of mutating commands for dot-repeat.

    A change is drafted with :meth:`begin`, may grow via
    :meth:`capture` while an insertion is running and is published
    atomically by :meth:`commit`. Nothing is recorded while a replay runs.
    """

    def __init__(self) -> None:
        self._last_change: Tuple[Step, ...] = ()
        self._draft: Optional[List[Step]] = None
        self._insertion: List["KeyInput"] = []
        self._overwrite = False
        self.last_insertion: Optional[LastInsertion] = None
        self.last_extent: Optional[LastSelectionExtent] = None
        self.replaying = False

    @property
    def last_change(self) -> Tuple[Step, ...]:
        return self._last_change

    @property
    def drafting(self) -> bool:
        return self._draft is not None

    def begin(self, *steps: Step) -> None:
        if self.replaying:
            return
        self._draft = list(steps)

    def capture(self, *steps: Step) -> None:
        if self.replaying or self._draft is None:
            return
        self._draft.extend(steps)

    def commit(self, *extra: Step) -> None:
        if self.replaying or self._draft is None:
            return
        self._draft.extend(extra)
        self._last_change = tuple(self._draft)
        self._draft = None
        telemetry.record_event("repeat.commit", data={"steps": len(self._last_change)})

    def abort(self) -> None:
        self._draft = None

    def run(self, context: Any, steps: Iterable[Step], *, record: bool = True) -> None:
        """Execute ``steps`` now and, if ``record``, make them the last change."""

        steps = tuple(steps)
        for step in steps:
            step(context)
        if record:
            self.begin(*steps)
            self.commit()

    def replay(self, context: Any, count: int = 1) -> bool:
        if not self._last_change or self.replaying:
            return False
        self.replaying = True
        try:
            for _ in range(max(1, count)):
                for step in self._last_change:
                    step(context)
        finally:
            self.replaying = False
        return True

    # Insert-session keystrokes ---------------------------------------------
    def start_insertion(self, *, overwrite: bool = False) -> None:
        self._insertion = []
        self._overwrite = overwrite

    def note_insert_key(self, key: "KeyInput") -> None:
        if not self.replaying:
            self._insertion.append(key)

    def interrupt_insertion(self) -> None:
        """Navigation inside Insert mode: only later keys stay replayable."""

        self._insertion = []

    def finish_insertion(self) -> LastInsertion:
        self.last_insertion = LastInsertion(tuple(self._insertion), self._overwrite)
        self._insertion = []
        return self.last_insertion


__all__ = [
    "LastInsertion",
    "LastSelectionExtent",
    "RepeatEngine",
    "Step",
]
