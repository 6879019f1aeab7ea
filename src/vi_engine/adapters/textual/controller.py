"""Minimal Textual adapter that wires ModeManager events into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from vi_engine.buffer import BufferMirror
from vi_engine.modes import KeyInput, ModeId, ModeResult
from vi_engine.modes.mode_manager import ModeManager

TEXTUAL_KEY_NAMES = {
    "escape": "ESC",
    "esc": "ESC",
    "enter": "ENTER",
    "return": "ENTER",
    "backspace": "BACKSPACE",
    "tab": "TAB",
    "delete": "DELETE",
    "left": "LEFT",
    "right": "RIGHT",
    "up": "UP",
    "down": "DOWN",
    "home": "HOME",
    "end": "END",
}

TEXTUAL_CHAR_NAMES = {
    "left_square_bracket": "[",
    "right_square_bracket": "]",
    "space": " ",
}


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


def normalize_textual_key(
    key: str, text: Optional[str] = None, modifiers: Iterable[str] = ()
) -> KeyInput:
    """Translate a Textual key name (``"ctrl+r"``, ``"escape"``, ``"a"``)."""

    *prefixes, base = key.split("+") if len(key) > 1 else [key]
    mods = tuple(str(mod).lower() for mod in modifiers) + tuple(prefixes)
    named = TEXTUAL_KEY_NAMES.get(base.lower())
    if named is not None:
        return KeyInput(key=named, modifiers=mods)
    base = TEXTUAL_CHAR_NAMES.get(base, base)
    if len(base) == 1:
        produced = text if text else (None if mods else base)
        return KeyInput(key=base, modifiers=mods, text=produced)
    if text:
        return KeyInput(key=text, modifiers=mods, text=text)
    return KeyInput(key=base.upper(), modifiers=mods)


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[str], None] = _noop
    show_command: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    # Optional realtime log callback a host may use to surface debug lines
    log: Callable[[str], None] = _noop


class TextualViAdapter:
    """Bridges ModeManager + bus events to a Textual-friendly surface."""

    def __init__(self, manager: ModeManager, hooks: TextualUIHooks) -> None:
        self.manager = manager
        self.hooks = hooks
        self._subscribe_events()
        self._refresh_buffer()
        self._refresh_command_line()

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> ModeResult:
        """Translate a Textual key event into a KeyInput and dispatch it."""

        key_input = normalize_textual_key(key, text, modifiers)
        self._log_state("key ->", key=key_input.key, text=text, mods=key_input.modifiers)
        result = self.manager.handle(key_input)
        self._after_mode_result()
        self._log_state(
            "result <-",
            consumed=result.consumed,
            status=result.status,
            message=result.message,
        )
        return result

    def mirror(self) -> BufferMirror:
        """Snapshot built only from editing-surface calls."""

        buffer = self.manager.context.buffer
        selection = buffer.selection
        return BufferMirror(
            text=buffer.text,
            caret=(buffer.caret_line, buffer.caret_column),
            selection=(selection.start, selection.end) if selection else None,
            attributes={"mode": self.manager.mode.value},
        )

    def _after_mode_result(self) -> None:
        self.hooks.update_status(self.manager.status_text)
        self._refresh_buffer()
        self._refresh_command_line()

    def _subscribe_events(self) -> None:
        bus = self.manager.context.bus
        for event in ("command.start", "command.end", "command.submit"):
            bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name, payload=payload)
        self.hooks.handle_event(name, payload)

    def _refresh_buffer(self) -> None:
        self.hooks.update_buffer(self.mirror())

    def _refresh_command_line(self) -> None:
        if self.manager.mode is ModeId.COMMAND:
            self.hooks.show_command(self.manager.context.state.command_buffer)
        else:
            self.hooks.show_command("")

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        buffer = self.manager.context.buffer
        return {
            "mode": self.manager.mode.value,
            "caret": buffer.caret_offset,
            "selection": buffer.selection,
            "count": self.manager.context.state.count.text,
        }


__all__ = ["TextualUIHooks", "TextualViAdapter", "normalize_textual_key"]
