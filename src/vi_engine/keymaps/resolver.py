"""Per-table keymap resolution with telemetry instrumentation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from vi_engine.runtime.telemetry import span

from .models import ActionRef, Binding
from .registry import KeymapRegistry


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    """Resolved binding paired with its action."""

    binding: Binding
    action: ActionRef

    @property
    def metadata(self):
        return self.action.metadata


class KeymapResolver:
    """Builds table-specific key indexes and resolves single keys against them."""

    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self._registry = registry
        self._logger_name = logger_name
        self._cache: Dict[str, tuple[int, Dict[str, ResolutionMatch]]] = {}

    @property
    def registry(self) -> KeymapRegistry:
        return self._registry

    def lookup(self, table: str, token: str) -> Optional[ResolutionMatch]:
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            metadata={"table": table, "token": token},
        ) as handle:
            match = self._ensure_index(table).get(token)
            if match is None:
                handle.add_metadata("status", "miss")
                return None
            handle.add_metadata("status", "match")
            handle.add_metadata("binding_id", match.binding.id)
            return match

    def lookup_chain(
        self, tables: Sequence[str], token: str
    ) -> Optional[ResolutionMatch]:
        for table in tables:
            match = self.lookup(table, token)
            if match is not None:
                return match
        return None

    def _ensure_index(self, table: str) -> Dict[str, ResolutionMatch]:
        revision = self._registry.revision()
        cached = self._cache.get(table)
        if cached and cached[0] == revision:
            return cached[1]

        candidates: Dict[str, list[ResolutionMatch]] = {}
        for binding in self._registry.iter_bindings(table):
            action = self._registry.get_action(binding.action_id)
            candidates.setdefault(binding.key_signature, []).append(
                ResolutionMatch(binding=binding, action=action)
            )

        index = {
            signature: min(
                matches, key=lambda m: (-m.binding.priority, m.binding.id)
            )
            for signature, matches in candidates.items()
        }
        self._cache[table] = (revision, index)
        return index


__all__ = [
    "KeymapResolver",
    "ResolutionMatch",
]
