"""Global event system for notifying collaborators outside the core.

The core never calls into rendering, scene management or UI directly. It
publishes events and whoever cares subscribes:

- ``LevelGeneratedEvent``: a new room graph replaced the old one. The world
  builder instantiates floors and walls from it.
- ``EncounterResolvedEvent``: the pursuer reached the player. The receiver
  decides the consequence (restart, game over screen, ...).

The bus is fire-and-forget: handlers run immediately and synchronously, and
a failing handler is logged without affecting the others or the publisher.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from crawlspace.environment.room_graph import RoomGraph
    from crawlspace.types import WorldPos

logger = logging.getLogger(__name__)


@dataclass
class GameEvent:
    """Base class for all game events."""

    pass


@dataclass
class LevelGeneratedEvent(GameEvent):
    """A level generation finished and its graph is now live."""

    graph: RoomGraph
    generation: int


@dataclass
class EncounterResolvedEvent(GameEvent):
    """The pursuer got within kill distance of the player.

    Attributes:
        agent_position: Where the pursuer stood when the encounter ended.
        player_position: Where the player stood.
        distance: Straight-line distance between the two.
    """

    agent_position: WorldPos
    player_position: WorldPos
    distance: float


class EventBus:
    """Simple event bus for publish/subscribe pattern."""

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable]] = {}

    def subscribe(self, event_type: type, handler: Callable) -> None:
        """Subscribe a handler to an event type."""
        if event_type not in self._handlers:
            self._handlers[event_type] = []
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type, handler: Callable) -> None:
        """Unsubscribe a handler from an event type."""
        if event_type in self._handlers:
            with suppress(ValueError):
                self._handlers[event_type].remove(handler)

    def publish(self, event: GameEvent) -> None:
        """Publish an event to all subscribed handlers."""
        event_type = type(event)
        if event_type in self._handlers:
            # Copy the handler list to allow safe subscribe/unsubscribe during dispatch
            for handler in list(self._handlers[event_type]):
                try:
                    handler(event)
                except Exception:
                    logger.exception(f"Error handling event {event_type.__name__}")


# Global event bus instance
_global_event_bus = EventBus()


def subscribe_to_event(event_type: type, handler: Callable) -> None:
    """Subscribe to an event type globally."""
    _global_event_bus.subscribe(event_type, handler)


def unsubscribe_from_event(event_type: type, handler: Callable) -> None:
    """Unsubscribe from an event type globally."""
    _global_event_bus.unsubscribe(event_type, handler)


def publish_event(event: GameEvent) -> None:
    """Publish an event globally."""
    _global_event_bus.publish(event)


def reset_event_bus_for_testing() -> None:
    """Reset the global event bus. Use only in tests."""
    global _global_event_bus
    _global_event_bus = EventBus()
