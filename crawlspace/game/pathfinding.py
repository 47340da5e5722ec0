from __future__ import annotations

import math
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from crawlspace.environment.room_graph import RoomNode

RoomPath: TypeAlias = "tuple[RoomNode, ...]"


def heuristic(a: RoomNode, b: RoomNode) -> float:
    """Euclidean distance between two rooms' grid coordinates."""
    return math.dist(a.grid_pos, b.grid_pos)


def find_path(start: RoomNode, goal: RoomNode) -> RoomPath | None:
    """
    Find a route between two rooms using A*.

    Every edge costs 1. The open set is kept in insertion order and scanned
    linearly for the lowest f-score; a later node only replaces the current
    best when its score is strictly lower, so ties go to whichever node was
    discovered first.

    The search only reads neighbor links and never modifies the graph.

    Args:
        start: The room to route from.
        goal: The room to route to.

    Returns:
        The rooms from ``start`` to ``goal``, both included. ``(start,)``
        when the two are the same room. ``None`` if ``goal`` cannot be
        reached.
    """
    if start is goal:
        return (start,)

    open_list: list[RoomNode] = [start]
    open_set: set[RoomNode] = {start}
    closed: set[RoomNode] = set()
    came_from: dict[RoomNode, RoomNode] = {}
    g_score: dict[RoomNode, float] = {start: 0.0}
    f_score: dict[RoomNode, float] = {start: heuristic(start, goal)}

    while open_list:
        current = open_list[0]
        for node in open_list:
            if f_score[node] < f_score[current]:
                current = node

        if current is goal:
            return _reconstruct_path(came_from, current)

        open_list.remove(current)
        open_set.discard(current)
        closed.add(current)

        for neighbor in current.neighbors:
            if neighbor in closed:
                continue

            tentative_g = g_score[current] + 1

            if neighbor not in open_set:
                open_list.append(neighbor)
                open_set.add(neighbor)
            elif tentative_g >= g_score.get(neighbor, math.inf):
                continue

            came_from[neighbor] = current
            g_score[neighbor] = tentative_g
            f_score[neighbor] = tentative_g + heuristic(neighbor, goal)

    return None  # No path found


def _reconstruct_path(
    came_from: dict[RoomNode, RoomNode], current: RoomNode
) -> RoomPath:
    path = [current]
    while current in came_from:
        current = came_from[current]
        path.append(current)
    path.reverse()
    return tuple(path)
