from __future__ import annotations

from vi_engine.keymaps import (
    ActionRef,
    Binding,
    KeySequence,
    KeyStroke,
    KeymapRegistry,
    KeymapResolver,
    load_default_keymaps,
)


def make_action(action_id: str) -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    binding_id: str,
    *,
    table: str = "command",
    keys: tuple[str, ...] = ("x",),
    action_id: str = "core.test",
) -> Binding:
    return Binding(
        id=binding_id,
        table=table,
        sequence=KeySequence.from_strings(*keys),
        action_id=action_id,
    )


def build_registry(bindings: list[Binding]) -> KeymapRegistry:
    registry = KeymapRegistry()
    action_ids = {binding.action_id for binding in bindings}
    for action_id in action_ids:
        registry.register_action(make_action(action_id))
    for binding in bindings:
        registry.register_binding(binding)
    return registry


def test_resolver_matches_bound_key() -> None:
    binding = make_binding("command.z", keys=("z",))
    resolver = KeymapResolver(build_registry([binding]))

    match = resolver.lookup("command", "z")

    assert match is not None
    assert match.binding.id == binding.id


def test_resolver_reports_miss() -> None:
    resolver = KeymapResolver(build_registry([make_binding("command.z", keys=("z",))]))

    assert resolver.lookup("command", "x") is None


def test_resolver_is_table_scoped() -> None:
    resolver = KeymapResolver(build_registry([make_binding("command.z", keys=("z",))]))

    assert resolver.lookup("nav", "z") is None


def test_resolver_rebuilds_after_registry_change() -> None:
    registry = build_registry([make_binding("command.x", keys=("x",))])
    resolver = KeymapResolver(registry)
    assert resolver.lookup("command", "z") is None

    registry.register_binding(make_binding("command.z", keys=("z",)))

    assert resolver.lookup("command", "z") is not None
    assert resolver.lookup("command", "x") is not None


def test_lookup_chain_prefers_earlier_tables() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(registry)
    resolver = KeymapResolver(registry)

    # DELETE lives in both the command and the insert table
    match = resolver.lookup_chain(("nav", "direction", "command"), "DELETE")
    assert match is not None
    assert match.action.id == "edit.delete_chars"

    match = resolver.lookup_chain(("insert", "command"), "DELETE")
    assert match is not None
    assert match.action.id == "insert.delete_forward"


def test_motion_metadata_is_exposed_on_match() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(registry)
    resolver = KeymapResolver(registry)

    match = resolver.lookup("direction", "ctrl+END")

    assert match is not None
    assert match.metadata["motion"] == "document_end"
    assert match.metadata["jump"] is True


def test_key_stroke_parse_round_trips_modifiers() -> None:
    stroke = KeyStroke.parse("ctrl+r")

    assert stroke.key == "r"
    assert stroke.modifiers == ("ctrl",)
    assert stroke.token == "ctrl+r"
    assert KeyStroke.parse("+").token == "+"
