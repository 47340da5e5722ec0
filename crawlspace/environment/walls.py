"""Which sides of a room are walled off.

A room gets a wall on every side that does not lead to a connected neighbor.
Two rooms in touching cells that were never linked both keep their walls.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from crawlspace.environment.room_graph import RoomNode
    from crawlspace.types import GridStep


class WallSide(Enum):
    """Room sides, valued by the grid step that crosses them.

    North is +y on the room grid, which is +z in the world.
    """

    NORTH = (0, 1)
    SOUTH = (0, -1)
    EAST = (1, 0)
    WEST = (-1, 0)

    @property
    def step(self) -> GridStep:
        return self.value


def open_sides(room: RoomNode) -> list[WallSide]:
    """Sides of ``room`` that lead to a connected neighbor."""
    return [side for side in WallSide if room.neighbor_at(side.step) is not None]


def wall_sides(room: RoomNode) -> list[WallSide]:
    """Sides of ``room`` that need a wall."""
    return [side for side in WallSide if room.neighbor_at(side.step) is None]
