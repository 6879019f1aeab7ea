"""Default register and the single clipboard slot it is backed by."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Optional, Protocol

from vi_engine.runtime import telemetry

from .protocol import ClipboardCallback


@dataclass(frozen=True, slots=True)
class RegisterValue:
    """Register content tagged with its shape."""

    text: str
    linewise: bool = False


class Clipboard:
    """In-memory clipboard slot with an optional deferred read.

    With ``deferred=True`` text requests queue until :meth:`deliver` is
    called, mimicking a platform clipboard that answers asynchronously.
    """

    def __init__(self, text: Optional[str] = None, *, deferred: bool = False) -> None:
        self.text = text
        self.deferred = deferred
        self._waiting: Deque[ClipboardCallback] = deque()

    def set_text(self, text: str) -> None:
        self.text = text

    def request_text(self, callback: ClipboardCallback) -> None:
        if self.deferred:
            self._waiting.append(callback)
            return
        callback(self.text)

    @property
    def pending_requests(self) -> int:
        return len(self._waiting)

    def deliver(self) -> None:
        while self._waiting:
            self._waiting.popleft()(self.text)


class ClipboardHost(Protocol):
    def clipboard_set(self, text: str) -> None: ...

    def request_clipboard(self, callback: ClipboardCallback) -> None: ...


class DefaultRegister:
    """The one implicit register: remembers the shape of what it stored.

    Text is mirrored to the surface clipboard slot. When the clipboard hands
    back text the register did not write itself, the shape falls back to a
    trailing-newline check.
    """

    def __init__(self, surface: ClipboardHost) -> None:
        self._surface = surface
        self._value: Optional[RegisterValue] = None
        self.logger = telemetry.get_logger("vi_engine.registers")

    @property
    def value(self) -> Optional[RegisterValue]:
        return self._value

    def store(self, text: str, *, linewise: bool = False) -> RegisterValue:
        if linewise and not text.endswith("\n"):
            text += "\n"
        self._value = RegisterValue(text=text, linewise=linewise)
        self._surface.clipboard_set(text)
        telemetry.record_event(
            "register.store", data={"length": len(text), "linewise": linewise}
        )
        return self._value

    def request(self, callback: Callable[[Optional[RegisterValue]], None]) -> None:
        def _receive(text: Optional[str]) -> None:
            callback(self._shape(text))

        self._surface.request_clipboard(_receive)

    def _shape(self, text: Optional[str]) -> Optional[RegisterValue]:
        if text is None:
            return None
        if self._value is not None and self._value.text == text:
            return self._value
        return RegisterValue(text=text, linewise=text.endswith(("\n", "\r")))


__all__ = ["Clipboard", "DefaultRegister", "RegisterValue"]
