"""Exceptions shared by the engine and its editing surfaces."""

from __future__ import annotations


class EngineError(RuntimeError):
    """Base class for recoverable failures raised while handling a keystroke.

    The mode manager catches these at the outermost ``handle`` call, resets to
    Normal mode and reports ``status`` on the status line.
    """

    def __init__(self, message: str, *, status: str | None = None) -> None:
        super().__init__(message)
        self.status = status if status is not None else message


class PatternError(EngineError):
    """Raised when a search or substitution pattern fails to compile."""

    def __init__(self, pattern: str, message: str) -> None:
        super().__init__(message, status=f"Search error: {message}")
        self.pattern = pattern


__all__ = ["EngineError", "PatternError"]
