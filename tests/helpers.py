from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from crawlspace.environment.room_graph import RoomGraph, RoomKind, RoomNode
from crawlspace.game.body import Body
from crawlspace.types import GridPos, WorldPos


def graph_from_links(
    links: Sequence[tuple[GridPos, GridPos]],
    *,
    extra_rooms: Sequence[GridPos] = (),
    cell_size: float = 10.0,
) -> RoomGraph:
    """Build a graph from a list of links.

    Rooms are added in order of first appearance; the first one is the
    entrance. ``extra_rooms`` are added unlinked at the end.
    """
    graph = RoomGraph(cell_size)
    for a, b in links:
        for pos in (a, b):
            if not graph.has_room(pos):
                kind = RoomKind.ENTRANCE if len(graph) == 0 else RoomKind.NORMAL
                graph.add_room(pos, kind)
        room_a = graph.get(a)
        room_b = graph.get(b)
        assert room_a is not None and room_b is not None
        graph.connect(room_a, room_b)
    for pos in extra_rooms:
        graph.add_room(pos)
    return graph


def line_graph(length: int, *, cell_size: float = 10.0) -> RoomGraph:
    """Rooms (0, 0) .. (length - 1, 0) linked west to east."""
    if length == 1:
        graph = RoomGraph(cell_size)
        graph.add_room((0, 0), RoomKind.ENTRANCE)
        return graph
    return graph_from_links(
        [((x, 0), (x + 1, 0)) for x in range(length - 1)], cell_size=cell_size
    )


def room(graph: RoomGraph, pos: GridPos) -> RoomNode:
    node = graph.get(pos)
    assert node is not None, f"no room at {pos}"
    return node


@dataclass
class FixedLevel:
    """Stands in for LevelGenerator with a hand-built graph."""

    graph: RoomGraph | None
    generation: int = 1

    @property
    def cell_size(self) -> float:
        assert self.graph is not None
        return self.graph.cell_size

    def replace(self, graph: RoomGraph) -> None:
        self.graph = graph
        self.generation += 1


@dataclass
class ScriptedVision:
    """Vision stub whose answer the test sets directly."""

    visible: bool = False
    calls: list[tuple[WorldPos, WorldPos]] = field(default_factory=list)

    def can_see(self, body: Body, target: WorldPos) -> bool:
        self.calls.append((body.position, target))
        return self.visible


@dataclass
class CountingOcclusion:
    """Occlusion stub that records every query."""

    blocked: bool = False
    calls: list[tuple[WorldPos, WorldPos]] = field(default_factory=list)

    def __call__(self, origin: WorldPos, target: WorldPos) -> bool:
        self.calls.append((origin, target))
        return self.blocked
