"""Textual adapter for the modal engine."""

from .controller import TextualUIHooks, TextualViAdapter, normalize_textual_key

__all__ = ["TextualUIHooks", "TextualViAdapter", "normalize_textual_key"]
