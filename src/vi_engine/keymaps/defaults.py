"""Built-in lookup tables: navigation, direction, command, insert and object keys."""

from __future__ import annotations

from functools import partial
from typing import Iterable, Mapping, Sequence

from .models import ActionRef, Binding, KeySequence
from .registry import KeymapRegistry

TABLES = ("nav", "direction", "command", "insert", "object")

# (key, motion, description, is_jump)
NAV_KEYS: tuple[tuple[str, str, str, bool], ...] = (
    ("h", "left", "Move left", False),
    ("l", "right", "Move right", False),
    (" ", "right", "Move right", False),
    ("j", "down", "Move down", False),
    ("k", "up", "Move up", False),
    ("w", "word_forward", "Next word start", False),
    ("W", "WORD_forward", "Next WORD start", False),
    ("b", "word_back", "Previous word start", False),
    ("B", "WORD_back", "Previous WORD start", False),
    ("e", "word_end", "Word end", False),
    ("E", "WORD_end", "WORD end", False),
    ("$", "line_end", "Line end", False),
    ("^", "line_first_non_blank", "First non-blank", False),
    ("%", "matching_bracket", "Matching bracket", True),
)

DIRECTION_KEYS: tuple[tuple[str, str, str, bool], ...] = (
    ("LEFT", "left", "Move left", False),
    ("RIGHT", "right", "Move right", False),
    ("UP", "up", "Move up", False),
    ("DOWN", "down", "Move down", False),
    ("HOME", "line_start", "Line start", False),
    ("END", "line_end", "Line end", False),
    ("ctrl+HOME", "document_start", "Document start", True),
    ("ctrl+END", "document_end", "Document end", True),
)

# (key, action id)
COMMAND_KEYS: tuple[tuple[str, str], ...] = (
    ("x", "edit.delete_chars"),
    ("DELETE", "edit.delete_chars"),
    ("X", "edit.delete_chars_back"),
    ("D", "edit.delete_to_line_end"),
    ("~", "edit.toggle_case"),
    ("J", "edit.join_lines"),
    ("u", "edit.undo"),
    ("ctrl+r", "edit.redo"),
    (".", "edit.repeat_last_change"),
    ("Y", "clipboard.yank_lines"),
    ("p", "clipboard.paste_after"),
    ("P", "clipboard.paste_before"),
    ("G", "caret.goto_line"),
    ("n", "search.next"),
    ("N", "search.previous"),
    ("*", "search.word_forward"),
    ("#", "search.word_backward"),
)

INSERT_KEYS: tuple[tuple[str, str], ...] = (
    ("ENTER", "insert.newline"),
    ("BACKSPACE", "insert.backspace"),
    ("TAB", "insert.tab"),
    ("DELETE", "insert.delete_forward"),
)

# (key, text object)
OBJECT_KEYS: tuple[tuple[str, str], ...] = (
    ("w", "word"),
    ("W", "WORD"),
    ("(", "paren"),
    (")", "paren"),
    ("b", "paren"),
    ("[", "bracket"),
    ("]", "bracket"),
    ("{", "brace"),
    ("}", "brace"),
    ("B", "brace"),
    ("<", "angle"),
    (">", "angle"),
    ('"', "double_quote"),
    ("'", "single_quote"),
    ("`", "backtick"),
)


def default_actions() -> tuple[ActionRef, ...]:
    """Action references backing the default bindings."""

    from vi_engine.actions import caret, clipboard, command, edit, selection

    actions: list[ActionRef] = []
    motions = {(motion, jump) for _key, motion, _desc, jump in NAV_KEYS + DIRECTION_KEYS}
    for motion, jump in sorted(motions):
        actions.append(
            ActionRef(
                id=f"motion.{motion}",
                handler=caret.move,
                description=f"Move by {motion}",
                metadata={"motion": motion, "jump": jump},
            )
        )
    for kind in sorted({kind for _key, kind in OBJECT_KEYS}):
        actions.append(
            ActionRef(
                id=f"object.{kind}",
                handler=partial(selection.text_object, kind=kind),
                description=f"Select {kind} text object",
                metadata={"object": kind},
            )
        )
    handlers = {
        "edit.delete_chars": edit.delete_chars,
        "edit.delete_chars_back": edit.delete_chars_back,
        "edit.delete_to_line_end": edit.delete_to_line_end,
        "edit.toggle_case": edit.toggle_case,
        "edit.join_lines": edit.join_lines,
        "edit.undo": edit.undo,
        "edit.redo": edit.redo,
        "edit.repeat_last_change": edit.repeat_last_change,
        "clipboard.yank_lines": clipboard.yank_lines,
        "clipboard.paste_after": clipboard.paste_after,
        "clipboard.paste_before": clipboard.paste_before,
        "caret.goto_line": caret.goto_line,
        "search.next": command.search_next,
        "search.previous": command.search_previous,
        "search.word_forward": command.search_word_forward,
        "search.word_backward": command.search_word_backward,
        "insert.newline": edit.newline,
        "insert.backspace": edit.backspace,
        "insert.tab": edit.tab,
        "insert.delete_forward": edit.delete_forward,
    }
    for action_id, handler in handlers.items():
        actions.append(
            ActionRef(
                id=action_id,
                handler=handler,
                description=(handler.__doc__ or action_id).strip().splitlines()[0],
            )
        )
    return tuple(actions)


def _motion_bindings(
    table: str, keys: Iterable[tuple[str, str, str, bool]]
) -> tuple[Binding, ...]:
    return tuple(
        Binding(
            id=f"{table}.{key}",
            table=table,
            sequence=KeySequence.from_strings(key),
            action_id=f"motion.{motion}",
            description=description,
        )
        for key, motion, description, _jump in keys
    )


DEFAULT_BINDINGS: tuple[Binding, ...] = (
    _motion_bindings("nav", NAV_KEYS)
    + _motion_bindings("direction", DIRECTION_KEYS)
    + tuple(
        Binding(
            id=f"command.{key}",
            table="command",
            sequence=KeySequence.from_strings(key),
            action_id=action_id,
        )
        for key, action_id in COMMAND_KEYS
    )
    + tuple(
        Binding(
            id=f"insert.{key}",
            table="insert",
            sequence=KeySequence.from_strings(key),
            action_id=action_id,
        )
        for key, action_id in INSERT_KEYS
    )
    + tuple(
        Binding(
            id=f"object.{key}",
            table="object",
            sequence=KeySequence.from_strings(key),
            action_id=f"object.{kind}",
        )
        for key, kind in OBJECT_KEYS
    )
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    include_actions: Sequence[str] | None = None,
    exclude_actions: Sequence[str] | None = None,
    include_bindings: Sequence[str] | None = None,
    exclude_bindings: Sequence[str] | None = None,
    per_table_overrides: Mapping[str, Iterable[Binding]] | None = None,
) -> None:
    """Register built-in actions and bindings for every lookup table."""

    allowed_actions = _build_filters(include_actions, exclude_actions)
    allowed_bindings = _build_filters(include_bindings, exclude_bindings)

    for action in default_actions():
        if not _selected(action.id, allowed_actions):
            continue
        registry.register_action(action, replace=replace)

    for binding in DEFAULT_BINDINGS:
        if not _selected(binding.id, allowed_bindings):
            continue
        if not registry.has_action(binding.action_id):
            continue
        registry.register_binding(binding, replace=replace)

    if extra_bindings:
        for binding in extra_bindings:
            registry.register_binding(binding, replace=replace)

    if per_table_overrides:
        for table, bindings in per_table_overrides.items():
            for binding in bindings:
                if binding.table != table:
                    raise ValueError(
                        f"Override binding '{binding.id}' must target table '{table}'"
                    )
                registry.register_binding(binding, replace=True)


__all__ = [
    "DEFAULT_BINDINGS",
    "TABLES",
    "default_actions",
    "load_default_keymaps",
]


def _build_filters(
    include: Sequence[str] | None, exclude: Sequence[str] | None
) -> tuple[set[str] | None, set[str]]:
    include_set = set(include) if include else None
    exclude_set = set(exclude or ())
    return include_set, exclude_set


def _selected(item_id: str, filters: tuple[set[str] | None, set[str]]) -> bool:
    include, exclude = filters
    if include is not None and item_id not in include:
        return False
    if item_id in exclude:
        return False
    return True
