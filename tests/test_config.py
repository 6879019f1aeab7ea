from __future__ import annotations

import pytest

from vi_engine.buffer import Buffer
from vi_engine.config import EngineConfig
from vi_engine.modes import ModeManager


def test_defaults() -> None:
    config = EngineConfig()

    assert config.context_mark == "`"
    assert config.max_macro_depth == 32
    assert config.indent_unit == "    "
    assert config.search_wraps is True


def test_from_env_reads_prefixed_values() -> None:
    config = EngineConfig.from_env(
        {
            "VI_ENGINE_MAX_MACRO_DEPTH": "5",
            "VI_ENGINE_INDENT_UNIT": "tab",
            "VI_ENGINE_SEARCH_WRAPS": "off",
            "UNRELATED": "1",
        }
    )

    assert config.max_macro_depth == 5
    assert config.indent_unit == "\t"
    assert config.search_wraps is False
    assert config.context_mark == "`"


@pytest.mark.parametrize(
    "overrides",
    [
        {"context_mark": "a"},
        {"context_mark": "``"},
        {"max_macro_depth": 0},
        {"indent_unit": ""},
        {"indent_unit": "x"},
    ],
)
def test_invalid_values_are_rejected(overrides: dict) -> None:
    with pytest.raises(ValueError):
        EngineConfig(**overrides)


def test_config_reaches_mode_context() -> None:
    config = EngineConfig(indent_unit="  ")
    engine = ModeManager.create(Buffer.from_text("a", indent_unit="  "), config=config)

    engine.feed(">>")

    assert engine.context.buffer.text == "  a"
    assert engine.context.macros.max_depth == 32
