"""Engine configuration and mode presentation constants."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

ENV_PREFIX = "VI_ENGINE_"


@dataclass(slots=True)
class EngineConfig:
    """Tunables for the modal engine and the reference editing surface."""

    context_mark: str = "`"
    max_macro_depth: int = 32
    indent_unit: str = "    "
    search_wraps: bool = True

    def __post_init__(self) -> None:
        if len(self.context_mark) != 1:
            raise ValueError("context_mark must be a single character")
        if self.context_mark.isalnum():
            raise ValueError("context_mark cannot be alphanumeric")
        if self.max_macro_depth < 1:
            raise ValueError("max_macro_depth must be positive")
        if not self.indent_unit or self.indent_unit.strip():
            raise ValueError("indent_unit must be non-empty whitespace")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        for item in fields(cls):
            raw = env.get(f"{ENV_PREFIX}{item.name.upper()}")
            if raw is None:
                continue
            if item.name == "max_macro_depth":
                values[item.name] = int(raw)
            elif item.name == "search_wraps":
                values[item.name] = raw.lower() in {"1", "true", "yes", "on"}
            elif item.name == "indent_unit" and raw.lower() == "tab":
                values[item.name] = "\t"
            else:
                values[item.name] = raw
        return cls(**values)  # type: ignore[arg-type]


MODE_STATUS = {
    "insert": "-- INSERT --",
    "replace": "-- REPLACE --",
    "visual": "-- VISUAL --",
    "visual_line": "-- VISUAL LINE --",
}


__all__ = ["ENV_PREFIX", "EngineConfig", "MODE_STATUS"]
