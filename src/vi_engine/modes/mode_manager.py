"""Mode manager: the keystroke state machine coordinating every mode."""

from __future__ import annotations

from functools import partial
from typing import Dict, Iterable, List, Optional, Type

from vi_engine.actions import caret, edit, selection
from vi_engine.buffer import DefaultRegister, EditingSurface
from vi_engine.config import EngineConfig
from vi_engine.errors import EngineError
from vi_engine.history import MacroRecorder, MarkStore, RepeatEngine
from vi_engine.keymaps import KeymapRegistry, KeymapResolver, load_default_keymaps
from vi_engine.runtime import telemetry

from .await_modes import (
    AwaitFoldMode,
    AwaitGMode,
    AwaitGoToMarkMode,
    AwaitMacroNameMode,
    AwaitMacroPlaybackMode,
    AwaitMarkMode,
    AwaitWriteCharMode,
    ConfirmMode,
    UnknownMode,
)
from .base_mode import EngineState, KeyInput, Mode, ModeBus, ModeContext, ModeId, ModeResult
from .command_mode import CommandMode
from .insert_mode import InsertMode, ReplaceMode
from .keymap_helpers import is_cancel, is_escape, key_inputs
from .normal_mode import NormalMode
from .operator_mode import ChangeMode, DeleteMode, IndentMode, UnindentMode, YankMode
from .visual_mode import VisualLineMode, VisualMode

DEFAULT_MODES: tuple[Type[Mode], ...] = (
    NormalMode,
    InsertMode,
    ReplaceMode,
    VisualMode,
    VisualLineMode,
    CommandMode,
    DeleteMode,
    YankMode,
    ChangeMode,
    IndentMode,
    UnindentMode,
    AwaitGMode,
    AwaitFoldMode,
    AwaitMarkMode,
    AwaitGoToMarkMode,
    AwaitMacroNameMode,
    AwaitMacroPlaybackMode,
    AwaitWriteCharMode,
    ConfirmMode,
    UnknownMode,
)

INSERT_FAMILY = frozenset({ModeId.INSERT.value, ModeId.REPLACE.value})
VISUAL_FAMILY = frozenset({ModeId.VISUAL.value, ModeId.VISUAL_LINE.value})


def build_context(
    buffer: EditingSurface,
    *,
    config: Optional[EngineConfig] = None,
    keymap_registry: Optional[KeymapRegistry] = None,
    load_defaults: bool = True,
) -> ModeContext:
    """Assemble the shared services for one editing session."""

    config = config or EngineConfig()
    registry = keymap_registry or KeymapRegistry(logger_name="vi_engine.keymaps")
    if load_defaults and keymap_registry is None:
        load_default_keymaps(registry)
    return ModeContext(
        buffer=buffer,
        registers=DefaultRegister(buffer),
        bus=ModeBus(),
        state=EngineState(),
        marks=MarkStore(config.context_mark),
        macros=MacroRecorder(max_depth=config.max_macro_depth),
        repeat=RepeatEngine(),
        keymaps=KeymapResolver(registry, logger_name="vi_engine.keymaps"),
        config=config,
    )


class ModeManager:
    """Owns the active mode, applies global key precedence and dispatches.

    ``handle`` is the host entry point: one call per keystroke, wrapped in
    an undo group and a telemetry span. Recoverable ``EngineError``s are
    turned into a status message and a reset to Normal mode. ``dispatch``
    is the re-entrant inner path used by macro playback.
    """

    def __init__(self, context: ModeContext) -> None:
        self.context = context
        self._modes: Dict[str, Mode] = {}
        self._active: Optional[str] = None
        self.logger = telemetry.get_logger("vi_engine.modes")
        self.context.extras.setdefault("mode_manager", self)

    @classmethod
    def create(
        cls,
        buffer: EditingSurface,
        *,
        config: Optional[EngineConfig] = None,
        keymap_registry: Optional[KeymapRegistry] = None,
        load_defaults: bool = True,
    ) -> "ModeManager":
        """Build a manager with every default mode registered."""

        context = build_context(
            buffer,
            config=config,
            keymap_registry=keymap_registry,
            load_defaults=load_defaults,
        )
        manager = cls(context)
        register_default_modes(manager)
        return manager

    @property
    def active_mode(self) -> Optional[Mode]:
        if self._active is None:
            return None
        return self._modes.get(self._active)

    @property
    def mode(self) -> ModeId:
        return ModeId(self._active) if self._active else ModeId.NORMAL

    @property
    def wants_raw_input(self) -> bool:
        mode = self.active_mode
        return mode.wants_raw_input if mode is not None else True

    @property
    def status_text(self) -> str:
        status = self.context.state.status
        if self.context.macros.is_recording:
            return f"{status} recording" if status else "recording"
        return status

    def register_mode(
        self,
        mode_cls: Type[Mode],
        /,
        *mode_args: object,
        **mode_kwargs: object,
    ) -> Mode:
        mode = mode_cls(self.context, *mode_args, **mode_kwargs)
        if mode.name in self._modes:
            raise ValueError(f"Mode '{mode.name}' already registered")
        self._modes[mode.name] = mode
        if self._active is None:
            self._active = mode.name
            mode.on_enter(None)
        return mode

    def switch_mode(self, name: str) -> None:
        name = str(name)
        if name not in self._modes:
            raise KeyError(f"Unknown mode '{name}'")
        previous = self.active_mode
        if previous and previous.name == name:
            return
        if previous:
            previous.on_exit(name)
        self._active = name
        self._modes[name].on_enter(previous.name if previous else None)
        telemetry.record_event("mode.switch", data={"mode": name})

    def reset(self) -> None:
        """Abandon any pending command and return to Normal mode."""

        self.context.repeat.abort()
        if self._active != ModeId.NORMAL.value:
            self.switch_mode(ModeId.NORMAL)
        else:
            self.context.state.clear()

    # Host entry points -------------------------------------------------------
    def handle(self, key: KeyInput) -> ModeResult:
        mode = self.active_mode
        if mode is None:
            raise RuntimeError("No active mode registered")
        with telemetry.span(
            name=f"mode::{mode.name}",
            component=True,
            metadata={"key": key.key, "mode": mode.name},
        ):
            try:
                with self.context.buffer.undo_group():
                    result = self.dispatch(key)
            except EngineError as exc:
                telemetry.record_event(
                    "engine.error",
                    level="warning",
                    data={"mode": mode.name, "key": key.key, "status": exc.status},
                )
                self.reset()
                result = ModeResult(consumed=True, status="error", message=exc.status)
        self._update_status(result)
        return result

    def handle_key(
        self, key: str, text: Optional[str] = None, modifiers: Iterable[str] = ()
    ) -> ModeResult:
        return self.handle(KeyInput(key=key, modifiers=tuple(modifiers), text=text))

    def feed(self, notation: str) -> List[ModeResult]:
        """Handle every key written in ``<Esc>``-style key notation."""

        return [self.handle(key) for key in key_inputs(notation)]

    def dispatch(self, key: KeyInput) -> ModeResult:
        context = self.context
        macros = context.macros
        top_level = not macros.is_playing

        if is_escape(key):
            if macros.is_recording and top_level:
                macros.record(key)
            self._close_insertion()
            self.reset()
            return ModeResult(consumed=True, status="reset")

        if is_cancel(key):
            macros.discard()
            self._close_insertion()
            self.reset()
            return ModeResult(consumed=True, status="reset")

        mode = self.active_mode
        if mode is None:
            raise RuntimeError("No active mode registered")
        stop_key = mode.name == ModeId.NORMAL.value and key.printable == "q"
        if macros.is_recording and top_level and not stop_key:
            macros.record(key)

        if mode.accepts_count and key.is_digit:
            context.state.count.push(key.printable or "")
            return ModeResult(consumed=True, status="count")

        result = mode.handle_key(key)
        if result.switch_to:
            self.switch_mode(result.switch_to)
        return result

    # Host notifications ------------------------------------------------------
    def notify_selection_changed(self) -> None:
        """Follow a selection made or dropped by the host."""

        buffer = self.context.buffer
        current = buffer.selection
        if self._active == ModeId.NORMAL.value and buffer.is_something_selected:
            if current.anchor == current.start:
                anchor, lead = current.start, current.end - 1
            else:
                anchor, lead = current.end - 1, current.start
            self.context.state.visual_anchor = anchor
            buffer.caret_offset = lead
            self.switch_mode(ModeId.VISUAL)
        elif self._active in VISUAL_FAMILY and not buffer.is_something_selected:
            self.reset()
        self._update_status(ModeResult(consumed=False))

    def notify_caret_moved(self) -> None:
        """Keep mode state consistent with a caret moved by the host."""

        mode = self.active_mode
        if mode is None:
            return
        if mode.name == ModeId.NORMAL.value:
            caret.retreat(self.context)
        elif isinstance(mode, InsertMode):
            mode.interrupt()
        elif mode.name in VISUAL_FAMILY:
            selection.visual_update(
                self.context, linewise=mode.name == ModeId.VISUAL_LINE.value
            )
        else:
            self.reset()
            self._update_status(ModeResult(consumed=False))

    # Internals -----------------------------------------------------------------
    def _close_insertion(self) -> None:
        if self._active not in INSERT_FAMILY:
            return
        repeat = self.context.repeat
        insertion = repeat.finish_insertion()
        repeat.commit(partial(edit.replay_insertion, insertion=insertion), caret.leave_insert)

    def _update_status(self, result: ModeResult) -> None:
        mode = self.active_mode
        if result.message is not None:
            self.context.state.status = result.message
        else:
            self.context.state.status = mode.status_label if mode else ""


def register_default_modes(manager: ModeManager) -> None:
    for mode_cls in DEFAULT_MODES:
        manager.register_mode(mode_cls)


__all__ = ["DEFAULT_MODES", "ModeManager", "build_context", "register_default_modes"]
