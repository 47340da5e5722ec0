from .occlusion import GridOcclusion
from .room_graph import (
    CARDINAL_DIRECTIONS,
    RoomGraph,
    RoomGraphError,
    RoomKind,
    RoomNode,
)
from .walls import WallSide, open_sides, wall_sides

__all__ = [
    "CARDINAL_DIRECTIONS",
    "GridOcclusion",
    "RoomGraph",
    "RoomGraphError",
    "RoomKind",
    "RoomNode",
    "WallSide",
    "open_sides",
    "wall_sides",
]
