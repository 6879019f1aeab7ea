import pytest

from vi_engine.keymaps import (
    ActionRef,
    Binding,
    KeySequence,
    KeymapConflictError,
    KeymapRegistry,
    load_default_keymaps,
)


def make_action(action_id: str = "core.test") -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_sequence(*keys: str) -> KeySequence:
    return KeySequence.from_strings(*keys)


def make_binding(
    *,
    binding_id: str,
    table: str = "command",
    sequence: KeySequence | None = None,
    action_id: str = "core.test",
) -> Binding:
    return Binding(
        id=binding_id,
        table=table,
        sequence=sequence or make_sequence("x"),
        action_id=action_id,
    )


def test_register_binding_success() -> None:
    registry = KeymapRegistry()
    action = make_action()
    registry.register_action(action)
    binding = make_binding(binding_id="command.x")

    registry.register_binding(binding)

    assert list(registry.iter_bindings()) == [binding]
    assert list(registry.iter_bindings(table="command")) == [binding]


def test_register_binding_conflict_detection() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    registry.register_binding(make_binding(binding_id="command.x"))

    with pytest.raises(KeymapConflictError):
        registry.register_binding(make_binding(binding_id="command.x.duplicate"))


def test_same_key_in_different_tables_does_not_conflict() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    registry.register_binding(make_binding(binding_id="command.DELETE", sequence=make_sequence("DELETE")))
    registry.register_binding(
        make_binding(binding_id="insert.DELETE", table="insert", sequence=make_sequence("DELETE"))
    )

    assert {binding.table for binding in registry.iter_bindings()} == {"command", "insert"}


def test_register_binding_requires_known_action() -> None:
    registry = KeymapRegistry()

    with pytest.raises(KeyError):
        registry.register_binding(make_binding(binding_id="command.x"))


def test_register_binding_with_replace() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    first = make_binding(binding_id="binding")
    second = make_binding(binding_id="binding")

    registry.register_binding(first)
    registry.register_binding(second, replace=True)

    assert list(registry.iter_bindings()) == [second]


def test_replace_binding_drops_conflicting_key() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="command.x"))

    registry.register_binding(make_binding(binding_id="command.x.alt"), replace=True)

    assert [binding.id for binding in registry.iter_bindings()] == ["command.x.alt"]
    with pytest.raises(KeyError):
        registry.get_binding("command.x")


def test_revision_bumps_on_changes() -> None:
    registry = KeymapRegistry()
    before = registry.revision()

    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="binding"))

    assert registry.revision() == before + 2


def test_load_default_keymaps_populates_every_table() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry)

    assert {binding.table for binding in registry.iter_bindings()} == {
        "command",
        "direction",
        "insert",
        "nav",
        "object",
    }
    assert registry.get_binding("nav.w").action_id == "motion.word_forward"
    assert registry.get_binding("command.ctrl+r").action_id == "edit.redo"
    assert registry.get_action("motion.matching_bracket").metadata["jump"] is True


def test_load_default_keymaps_include_filters() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(
        registry,
        include_actions=("edit.delete_chars",),
        include_bindings=("command.x",),
    )

    assert len(list(registry.iter_bindings())) == 1
    assert registry.get_binding("command.x").action_id == "edit.delete_chars"


def test_load_default_keymaps_skips_bindings_without_actions() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry, exclude_actions=("edit.undo",))

    assert not registry.has_action("edit.undo")
    with pytest.raises(KeyError):
        registry.get_binding("command.u")


def test_load_default_keymaps_per_table_override() -> None:
    registry = KeymapRegistry()
    custom_binding = Binding(
        id="command.x",
        table="command",
        sequence=KeySequence.from_strings("s"),
        action_id="edit.delete_chars",
    )

    load_default_keymaps(
        registry,
        per_table_overrides={"command": (custom_binding,)},
    )

    binding = registry.get_binding("command.x")
    assert binding.sequence.tokens == ("s",)


def test_per_table_override_must_match_table() -> None:
    registry = KeymapRegistry()
    misplaced = Binding(
        id="nav.q",
        table="nav",
        sequence=KeySequence.from_strings("q"),
        action_id="motion.left",
    )

    with pytest.raises(ValueError):
        load_default_keymaps(registry, per_table_overrides={"command": (misplaced,)})
