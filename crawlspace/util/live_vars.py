from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass
class LiveVariable:
    """A value exposed for live inspection, e.g. by a debug overlay."""

    name: str
    description: str
    getter: Callable[[], Any]
    formatter: Callable[[Any], str] | None = None

    def get_value(self) -> Any:
        """Return the current value using the getter."""
        return self.getter()

    def format_value(self) -> str:
        value = self.get_value()
        if self.formatter is not None:
            return self.formatter(value)
        return str(value)


class LiveVariableRegistry:
    """Registry for all ``LiveVariable`` instances.

    Variables are read-only: the simulation owns its state and the registry
    only knows how to read it.
    """

    def __init__(self) -> None:
        self._variables: dict[str, LiveVariable] = {}

    def register(
        self,
        name: str,
        getter: Callable[[], Any],
        *,
        description: str = "",
        formatter: Callable[[Any], str] | None = None,
    ) -> None:
        """Register a new live variable."""
        if name in self._variables:
            raise ValueError(f"Live variable '{name}' already registered")
        self._variables[name] = LiveVariable(
            name=name,
            description=description,
            getter=getter,
            formatter=formatter,
        )

    def unregister_prefix(self, prefix: str) -> None:
        """Drop every variable whose name starts with ``prefix``."""
        for name in [n for n in self._variables if n.startswith(prefix)]:
            del self._variables[name]

    def get_variable(self, name: str) -> LiveVariable | None:
        """Retrieve a registered ``LiveVariable`` by name."""
        return self._variables.get(name)

    def get_all_variables(self) -> list[LiveVariable]:
        """Return all registered variables sorted by name."""
        return sorted(self._variables.values(), key=lambda v: v.name)


# Global registry instance used throughout the application
live_variable_registry = LiveVariableRegistry()
