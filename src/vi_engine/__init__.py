"""UI-agnostic modal (vi-style) keystroke interpreter."""

__all__ = [
    "actions",
    "adapters",
    "buffer",
    "config",
    "errors",
    "history",
    "keymaps",
    "modes",
    "runtime",
]

__version__ = "0.1.0"
