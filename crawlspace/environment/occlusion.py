"""Grid-raster occlusion query for a room graph.

The real game answers "is there a wall between these two points?" with a
physics raycast. For headless runs and tests this module rasterizes the
layout instead: every room cell becomes a ``tiles_per_cell`` square block of
floor tiles, and the outermost row of the block is opaque on each walled
side. A query traces a Bresenham line through the raster and reports a block
when any tile strictly between the two endpoints is opaque. The endpoint
tiles are ignored so neither the observer nor the target occludes itself.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np
import tcod.los

from crawlspace import config
from crawlspace.environment.walls import WallSide, wall_sides

if TYPE_CHECKING:
    from crawlspace.environment.room_graph import RoomGraph
    from crawlspace.types import TilePos, WorldPos


class GridOcclusion:
    """Callable occlusion query over a rasterized room graph.

    Attributes:
        transparent: Boolean array indexed ``[x, y]``; True where sight
            passes. Tile ``y`` follows world ``z``.
        tile_size: World units per tile.
    """

    def __init__(
        self,
        graph: RoomGraph,
        tiles_per_cell: int = config.OCCLUSION_TILES_PER_CELL,
    ) -> None:
        if tiles_per_cell < 3:
            # Below 3 the wall rows would swallow the whole room.
            raise ValueError(
                f"tiles_per_cell must be at least 3, got {tiles_per_cell}"
            )
        self.tiles_per_cell = tiles_per_cell
        self.tile_size = graph.cell_size / tiles_per_cell

        if len(graph) == 0:
            self._origin_cell = (0, 0)
            self.transparent = np.zeros((0, 0), dtype=bool, order="F")
            return

        (min_x, min_y), (max_x, max_y) = graph.bounds()
        self._origin_cell = (min_x, min_y)
        # World position of tile (0, 0)'s lower corner: half a cell before the
        # first room center.
        self._origin_world = (
            (min_x - 0.5) * graph.cell_size,
            (min_y - 0.5) * graph.cell_size,
        )
        width = (max_x - min_x + 1) * tiles_per_cell
        height = (max_y - min_y + 1) * tiles_per_cell
        self.transparent = np.zeros((width, height), dtype=bool, order="F")

        for room in graph:
            self._carve_room(room.grid_pos, wall_sides(room))

    def _carve_room(self, grid_pos: tuple[int, int], walls: list[WallSide]) -> None:
        n = self.tiles_per_cell
        bx = (grid_pos[0] - self._origin_cell[0]) * n
        by = (grid_pos[1] - self._origin_cell[1]) * n
        block = self.transparent[bx : bx + n, by : by + n]
        block[:, :] = True
        for side in walls:
            match side:
                case WallSide.EAST:
                    block[n - 1, :] = False
                case WallSide.WEST:
                    block[0, :] = False
                case WallSide.NORTH:
                    block[:, n - 1] = False
                case WallSide.SOUTH:
                    block[:, 0] = False

    def world_to_tile(self, pos: WorldPos) -> TilePos:
        """Raster tile containing ``pos``. May lie outside the raster."""
        if self.transparent.size == 0:
            return (-1, -1)
        tx = math.floor((pos[0] - self._origin_world[0]) / self.tile_size)
        ty = math.floor((pos[2] - self._origin_world[1]) / self.tile_size)
        return (tx, ty)

    def in_bounds(self, tile: TilePos) -> bool:
        width, height = self.transparent.shape
        return 0 <= tile[0] < width and 0 <= tile[1] < height

    def is_blocked(self, origin: WorldPos, target: WorldPos) -> bool:
        """True if opaque tiles lie strictly between ``origin`` and ``target``."""
        start = self.world_to_tile(origin)
        end = self.world_to_tile(target)
        if not (self.in_bounds(start) and self.in_bounds(end)):
            return True

        line = tcod.los.bresenham(start, end)
        for x, y in line[1:-1]:
            if not self.transparent[x, y]:
                return True
        return False

    __call__ = is_blocked
