from __future__ import annotations

from typing import NewType, TypeAlias

# =============================================================================
# SPATIAL TYPES
# =============================================================================

GridCoord: TypeAlias = int  # Always integer room-grid position

# Room grid coordinates - one unit per room cell
GridPos: TypeAlias = tuple[GridCoord, GridCoord]  # Example: (2, -1) = room 2,-1

# A unit step on the room grid
GridStep: TypeAlias = tuple[int, int]  # Example: (1, 0) = eastward step

# World coordinates - x/z is the ground plane, y is up
WorldCoord: TypeAlias = float
WorldPos: TypeAlias = tuple[WorldCoord, WorldCoord, WorldCoord]  # Example: (10.0, 1.0, 0.0)
Vector3: TypeAlias = tuple[float, float, float]

# Raster coordinates used by the occlusion grid
TilePos: TypeAlias = tuple[int, int]

# Heading around the up axis, in degrees. 0 faces +z, 90 faces +x.
Degrees = NewType("Degrees", float)

# =============================================================================
# TIME-RELATED TYPES
# =============================================================================

# Real time elapsed since the previous simulation tick, in seconds.
DeltaTime = NewType("DeltaTime", float)

# The fixed duration of one headless simulation step.
FixedTimestep = NewType("FixedTimestep", float)

# =============================================================================
# MISC
# =============================================================================

RandomSeed: TypeAlias = int | str | None
