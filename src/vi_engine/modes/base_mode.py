"""Base classes and shared state records for editor modes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Optional, Tuple

from vi_engine.config import MODE_STATUS, EngineConfig
from vi_engine.keymaps.models import normalize_modifiers

if TYPE_CHECKING:
    from vi_engine.buffer import DefaultRegister, EditingSurface
    from vi_engine.history import MacroRecorder, MarkStore, RepeatEngine
    from vi_engine.keymaps import KeymapResolver

CONTROL_MODIFIERS = frozenset({"ctrl", "alt", "meta"})


@dataclass(frozen=True, slots=True)
class KeyInput:
    """Normalized keystroke record: key code, modifier flags, produced char.

    Printable keys use the character as ``key``; named keys use upper-case
    names (``ESC``, ``ENTER``, ``BACKSPACE``, ``TAB``, ``DELETE``, ``LEFT``...).
    """

    key: str
    modifiers: Tuple[str, ...] = ()
    text: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        object.__setattr__(self, "modifiers", normalize_modifiers(self.modifiers))

    @classmethod
    def char(cls, value: str) -> "KeyInput":
        return cls(key=value, text=value)

    @property
    def printable(self) -> Optional[str]:
        """The produced character, if this keystroke typed one."""

        if CONTROL_MODIFIERS.intersection(self.modifiers):
            return None
        if self.text and len(self.text) == 1 and self.text.isprintable():
            return self.text
        return None

    @property
    def is_digit(self) -> bool:
        char = self.printable
        return char is not None and char in "0123456789"

    def has_modifier(self, name: str) -> bool:
        return name in self.modifiers


@dataclass(slots=True)
class ModeResult:
    """Result returned from ``Mode.handle_key``.

    ``message`` is user-facing status text; ``None`` keeps the default label
    of whichever mode is active afterwards.
    """

    consumed: bool
    switch_to: Optional[str] = None
    status: str = "ok"
    message: Optional[str] = None


class ModeId(str, Enum):
    NORMAL = "normal"
    INSERT = "insert"
    REPLACE = "replace"
    VISUAL = "visual"
    VISUAL_LINE = "visual_line"
    COMMAND = "command"
    DELETE = "delete"
    YANK = "yank"
    CHANGE = "change"
    INDENT = "indent"
    UNINDENT = "unindent"
    AWAIT_G = "await_g"
    AWAIT_FOLD = "await_fold"
    AWAIT_MARK = "await_mark"
    AWAIT_GOTO_MARK = "await_goto_mark"
    AWAIT_MACRO_NAME = "await_macro_name"
    AWAIT_MACRO_PLAYBACK = "await_macro_playback"
    AWAIT_WRITE_CHAR = "await_write_char"
    CONFIRM = "confirm"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


class MotionModifier(Enum):
    NONE = "none"
    INNER = "inner"
    OUTER = "outer"


class CountAccumulator:
    """Textual numeric prefix; ``value`` is the repeat multiplier (>= 1).

    Digits typed before an operator are frozen into ``multiplier`` when the
    operator-pending mode starts, so ``2d3w`` acts six times.
    """

    def __init__(self) -> None:
        self._digits = ""
        self._multiplier = 1
        self._frozen = False

    def push(self, digit: str) -> None:
        if len(digit) != 1 or digit not in "0123456789":
            raise ValueError(f"'{digit}' is not a count digit")
        self._digits += digit

    def freeze(self) -> None:
        if self._digits:
            self._multiplier *= max(1, int(self._digits))
            self._frozen = True
        self._digits = ""

    @property
    def explicit(self) -> bool:
        return bool(self._digits) or self._frozen

    @property
    def value(self) -> int:
        typed = max(1, int(self._digits)) if self._digits else 1
        return typed * self._multiplier

    @property
    def text(self) -> str:
        return self._digits

    def clear(self) -> None:
        self._digits = ""
        self._multiplier = 1
        self._frozen = False

    def __bool__(self) -> bool:
        return self.explicit


@dataclass(frozen=True, slots=True)
class SearchQuery:
    pattern: str
    backward: bool = False
    case_sensitive: bool = True


@dataclass(frozen=True, slots=True)
class Substitution:
    pattern: str
    replacement: str


@dataclass(slots=True)
class EngineState:
    """Transient per-command fields plus the session's search history.

    ``clear`` resets everything a return to Normal mode discards; stored
    searches and substitutions survive it.
    """

    count: CountAccumulator = field(default_factory=CountAccumulator)
    modifier: MotionModifier = MotionModifier.NONE
    command_buffer: str = ""
    status: str = ""
    visual_anchor: Optional[int] = None
    line_span: Optional[Tuple[int, int]] = None
    pending_confirm: Optional[Callable[[], str]] = None
    last_search: Optional[SearchQuery] = None
    last_substitution: Optional[Substitution] = None

    def clear(self) -> None:
        self.count.clear()
        self.modifier = MotionModifier.NONE
        self.command_buffer = ""
        self.visual_anchor = None
        self.line_span = None
        self.pending_confirm = None


@dataclass(slots=True)
class ModeContext:
    """Shared services every mode can access."""

    buffer: "EditingSurface"
    registers: "DefaultRegister"
    bus: "ModeBus"
    state: EngineState
    marks: "MarkStore"
    macros: "MacroRecorder"
    repeat: "RepeatEngine"
    keymaps: "KeymapResolver"
    config: EngineConfig = field(default_factory=EngineConfig)
    extras: Dict[str, object] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return self.state.count.value


class ModeBus:
    """Minimal event bus letting modes exchange structured signals."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


class Mode:
    """Base class all concrete editor modes inherit from."""

    name: str = "mode"
    accepts_count: bool = False
    wants_raw_input: bool = True

    def __init__(self, context: ModeContext) -> None:
        self.context = context

    @property
    def status_label(self) -> str:
        return MODE_STATUS.get(self.name, "")

    def on_enter(
        self, previous: Optional[str]
    ) -> None:  # pragma: no cover - default no-op
        del previous

    def on_exit(
        self, next_mode: Optional[str]
    ) -> None:  # pragma: no cover - default no-op
        del next_mode

    def handle_key(
        self, key: KeyInput
    ) -> ModeResult:  # pragma: no cover - abstract override
        raise NotImplementedError

    def finish(self, message: Optional[str] = None, *, status: str = "ok") -> ModeResult:
        """Terminal result: back to Normal mode with an optional message."""

        return ModeResult(
            consumed=True, switch_to=ModeId.NORMAL, status=status, message=message
        )


__all__ = [
    "CountAccumulator",
    "EngineState",
    "KeyInput",
    "Mode",
    "ModeBus",
    "ModeContext",
    "ModeId",
    "ModeResult",
    "MotionModifier",
    "SearchQuery",
    "Substitution",
]
