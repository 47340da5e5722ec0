from __future__ import annotations

from collections.abc import Iterator

import pytest

from crawlspace.events import reset_event_bus_for_testing
from crawlspace.util import rng
from crawlspace.util.live_vars import live_variable_registry


@pytest.fixture(autouse=True)
def clear_live_variable_registry() -> Iterator[None]:
    """Clear the global live variable registry before and after each test."""
    live_variable_registry._variables.clear()
    yield
    live_variable_registry._variables.clear()


@pytest.fixture(autouse=True)
def fresh_event_bus() -> Iterator[None]:
    """Give every test its own global event bus."""
    reset_event_bus_for_testing()
    yield
    reset_event_bus_for_testing()


@pytest.fixture(autouse=True)
def seeded_rng() -> None:
    """Make the global RNG streams deterministic for every test."""
    rng.init("tests")
