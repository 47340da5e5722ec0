from __future__ import annotations

import pytest

from crawlspace.util.live_vars import LiveVariable, live_variable_registry


def test_register_and_get_variable() -> None:
    live_variable_registry.register("test.var", getter=lambda: 1)
    var = live_variable_registry.get_variable("test.var")
    assert var is not None
    assert var.get_value() == 1


def test_register_duplicate_raises() -> None:
    live_variable_registry.register("dup.var", getter=lambda: 0)
    with pytest.raises(ValueError):
        live_variable_registry.register("dup.var", getter=lambda: 1)


def test_get_all_variables_sorted() -> None:
    live_variable_registry.register("b.var", getter=lambda: 0)
    live_variable_registry.register("a.var", getter=lambda: 0)
    names = [v.name for v in live_variable_registry.get_all_variables()]
    assert names == ["a.var", "b.var"]


def test_getter_reads_live_state() -> None:
    store: dict[str, int] = {"value": 3}
    var = LiveVariable(name="ro", description="", getter=lambda: store["value"])
    assert var.get_value() == 3
    store["value"] = 7
    assert var.get_value() == 7


def test_formatter_controls_display() -> None:
    var = LiveVariable(
        name="timer",
        description="",
        getter=lambda: 0.123456,
        formatter=lambda v: f"{v:.2f}s",
    )
    assert var.format_value() == "0.12s"
    assert LiveVariable("plain", "", lambda: 4).format_value() == "4"


def test_unregister_prefix_drops_only_matching() -> None:
    live_variable_registry.register("ai.pursuit.state", getter=lambda: "PATROL")
    live_variable_registry.register("ai.pursuit.notes", getter=lambda: "")
    live_variable_registry.register("level.rooms", getter=lambda: 0)

    live_variable_registry.unregister_prefix("ai.pursuit.")

    assert live_variable_registry.get_variable("ai.pursuit.state") is None
    assert live_variable_registry.get_variable("ai.pursuit.notes") is None
    assert live_variable_registry.get_variable("level.rooms") is not None

    # Names can be registered again once dropped.
    live_variable_registry.register("ai.pursuit.state", getter=lambda: "CHASE")
