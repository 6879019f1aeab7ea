"""Action handlers and editing steps invoked by modes and keymaps."""

from . import caret, clipboard, command, edit, selection

__all__ = ["caret", "clipboard", "command", "edit", "selection"]
