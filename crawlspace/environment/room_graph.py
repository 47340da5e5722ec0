"""Grid-indexed room graph describing a dungeon layout.

Rooms sit on an integer grid, one room per cell, and are linked by symmetric
neighbor edges. The graph is the only structure the pathfinder walks and the
only thing the world builder needs to lay out geometry.

A graph is built once by the level generator and then treated as read-only.
Regeneration replaces the whole graph rather than editing it.
"""

from __future__ import annotations

import math
from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

from crawlspace import config

if TYPE_CHECKING:
    from crawlspace.types import GridPos, GridStep, RandomSeed, WorldPos

# East, west, north, south on the room grid. Order matters: it is the
# starting order the generator shuffles.
CARDINAL_DIRECTIONS: tuple[GridStep, ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))


class RoomGraphError(ValueError):
    """Raised when building a graph would break one of its invariants."""


class RoomKind(Enum):
    ENTRANCE = auto()
    NORMAL = auto()
    OBJECTIVE = auto()


@dataclass(eq=False)
class RoomNode:
    """A single room.

    Nodes compare by identity. Coordinates are unique inside one graph, but a
    regenerated graph gets fresh nodes, and a stale node must never match a
    live one at the same coordinate.

    ``neighbors`` keeps insertion order so searches over the graph are
    reproducible from run to run.
    """

    grid_pos: GridPos
    kind: RoomKind = RoomKind.NORMAL
    neighbors: list[RoomNode] = field(default_factory=list, repr=False)

    def is_neighbor(self, other: RoomNode) -> bool:
        return any(n is other for n in self.neighbors)

    def neighbor_at(self, step: GridStep) -> RoomNode | None:
        """Return the connected neighbor one ``step`` away, if any."""
        target = (self.grid_pos[0] + step[0], self.grid_pos[1] + step[1])
        for neighbor in self.neighbors:
            if neighbor.grid_pos == target:
                return neighbor
        return None

    def __repr__(self) -> str:
        return f"RoomNode({self.grid_pos}, {self.kind.name})"


class RoomGraph:
    """Mapping from grid coordinate to room, plus the world scale.

    Attributes:
        cell_size: World units between neighboring room centers.
        floor_height: World height of room center points.
        seed: The seed the generator used for this layout, if any.
    """

    def __init__(
        self,
        cell_size: float = config.LEVEL_CELL_SIZE,
        *,
        floor_height: float = config.ROOM_FLOOR_HEIGHT,
        seed: RandomSeed = None,
    ) -> None:
        self.cell_size = cell_size
        self.floor_height = floor_height
        self.seed = seed
        self._rooms: dict[GridPos, RoomNode] = {}

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add_room(self, pos: GridPos, kind: RoomKind = RoomKind.NORMAL) -> RoomNode:
        """Create a room at ``pos``.

        Raises:
            RoomGraphError: ``pos`` is already occupied, or a second entrance
                was requested.
        """
        if pos in self._rooms:
            raise RoomGraphError(f"Grid cell {pos} already holds a room")
        if kind is RoomKind.ENTRANCE and self.entrance is not None:
            raise RoomGraphError("Graph already has an entrance")
        room = RoomNode(grid_pos=pos, kind=kind)
        self._rooms[pos] = room
        return room

    def connect(self, a: RoomNode, b: RoomNode) -> None:
        """Link two rooms in both directions. Repeated calls are no-ops."""
        if a is b:
            raise RoomGraphError(f"Cannot connect {a.grid_pos} to itself")
        if a not in self or b not in self:
            raise RoomGraphError("Both rooms must belong to this graph")
        if not a.is_neighbor(b):
            a.neighbors.append(b)
        if not b.is_neighbor(a):
            b.neighbors.append(a)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def has_room(self, pos: GridPos) -> bool:
        return pos in self._rooms

    def get(self, pos: GridPos) -> RoomNode | None:
        return self._rooms.get(pos)

    def all_rooms(self) -> list[RoomNode]:
        """Return every room in insertion order."""
        return list(self._rooms.values())

    @property
    def entrance(self) -> RoomNode | None:
        for room in self._rooms.values():
            if room.kind is RoomKind.ENTRANCE:
                return room
        return None

    @property
    def objective(self) -> RoomNode | None:
        for room in self._rooms.values():
            if room.kind is RoomKind.OBJECTIVE:
                return room
        return None

    def grid_to_world(self, pos: GridPos) -> WorldPos:
        """World position of the center of the cell at ``pos``."""
        return (pos[0] * self.cell_size, self.floor_height, pos[1] * self.cell_size)

    def world_position(self, room: RoomNode) -> WorldPos:
        return self.grid_to_world(room.grid_pos)

    def closest_room(self, world_pos: WorldPos) -> RoomNode | None:
        """Return the room whose center is nearest ``world_pos``.

        Linear scan in insertion order; the first room wins a tie. Returns
        ``None`` for an empty graph.
        """
        closest: RoomNode | None = None
        best_dist = math.inf
        for room in self._rooms.values():
            d = math.dist(self.world_position(room), world_pos)
            if d < best_dist:
                best_dist = d
                closest = room
        return closest

    def reachable_from(self, start: RoomNode) -> list[RoomNode]:
        """Breadth-first list of rooms reachable from ``start``."""
        seen: set[RoomNode] = {start}
        order: list[RoomNode] = [start]
        queue: deque[RoomNode] = deque([start])
        while queue:
            current = queue.popleft()
            for neighbor in current.neighbors:
                if neighbor not in seen:
                    seen.add(neighbor)
                    order.append(neighbor)
                    queue.append(neighbor)
        return order

    def is_connected(self) -> bool:
        """True if every room can be reached from the entrance."""
        if not self._rooms:
            return True
        start = self.entrance or next(iter(self._rooms.values()))
        return len(self.reachable_from(start)) == len(self._rooms)

    def bounds(self) -> tuple[GridPos, GridPos]:
        """Return ``((min_x, min_y), (max_x, max_y))`` over occupied cells."""
        if not self._rooms:
            raise RoomGraphError("Empty graph has no bounds")
        xs = [p[0] for p in self._rooms]
        ys = [p[1] for p in self._rooms]
        return (min(xs), min(ys)), (max(xs), max(ys))

    def __len__(self) -> int:
        return len(self._rooms)

    def __iter__(self) -> Iterator[RoomNode]:
        return iter(self._rooms.values())

    def __contains__(self, room: object) -> bool:
        return (
            isinstance(room, RoomNode) and self._rooms.get(room.grid_pos) is room
        )
