"""Macro recorder/player bookkeeping."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Tuple

from vi_engine.errors import EngineError
from vi_engine.runtime import telemetry

if TYPE_CHECKING:
    from vi_engine.modes.base_mode import KeyInput


class MacroRecursionError(EngineError):
    """Raised when macro playback nests deeper than the configured limit."""

    def __init__(self, name: str, depth: int) -> None:
        super().__init__(
            f"Macro '{name}' exceeded playback depth {depth}",
            status="Macro recursion limit reached",
        )
        self.name = name
        self.depth = depth


class MacroRecorder:
    """Stores named keystroke sequences; at most one records at a time."""

    def __init__(self, *, max_depth: int = 32) -> None:
        self.max_depth = max_depth
        self._macros: Dict[str, Tuple["KeyInput", ...]] = {}
        self._recording: Optional[str] = None
        self._buffer: List["KeyInput"] = []
        self.last_played: Optional[str] = None
        self.depth = 0

    @property
    def recording(self) -> Optional[str]:
        return self._recording

    @property
    def is_recording(self) -> bool:
        return self._recording is not None

    @property
    def is_playing(self) -> bool:
        return self.depth > 0

    def start(self, name: str) -> None:
        self._macros.pop(name, None)
        self._recording = name
        self._buffer = []
        telemetry.record_event("macro.record.start", data={"name": name})

    def record(self, key: "KeyInput") -> None:
        if self._recording is not None:
            self._buffer.append(key)

    def stop(self) -> Tuple["KeyInput", ...]:
        if self._recording is None:
            return ()
        keys = tuple(self._buffer)
        self._macros[self._recording] = keys
        telemetry.record_event(
            "macro.record.stop", data={"name": self._recording, "keys": len(keys)}
        )
        self._recording = None
        self._buffer = []
        return keys

    def discard(self) -> None:
        if self._recording is not None:
            telemetry.record_event("macro.record.discard", data={"name": self._recording})
        self._recording = None
        self._buffer = []

    def get(self, name: str) -> Optional[Tuple["KeyInput", ...]]:
        return self._macros.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._macros

    @contextmanager
    def playing(self, name: str) -> Iterator[Tuple["KeyInput", ...]]:
        """Guard one playback level; nested playback raises past ``max_depth``."""

        keys = self._macros.get(name, ())
        if self.depth >= self.max_depth:
            raise MacroRecursionError(name, self.max_depth)
        self.depth += 1
        self.last_played = name
        telemetry.record_event("macro.play", data={"name": name, "depth": self.depth})
        try:
            yield keys
        finally:
            self.depth -= 1


__all__ = ["MacroRecorder", "MacroRecursionError"]
