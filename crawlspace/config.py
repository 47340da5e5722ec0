"""
Configuration constants.

Centralizes the tuning values used by level generation, vision and the
pursuit AI. Organized by functional area for easy maintenance.
"""

from crawlspace.types import FixedTimestep

# =============================================================================
# GENERAL
# =============================================================================

# Master seed for the global RNG streams. None gives a different run each time.
# RANDOM_SEED = "burrito1"
RANDOM_SEED = None

# =============================================================================
# LEVEL GENERATION
# =============================================================================

# Rooms on the main path, entrance included.
LEVEL_MAIN_PATH_LENGTH = 10

# World units between room centers.
LEVEL_CELL_SIZE = 10.0

# World height of a room's center point.
ROOM_FLOOR_HEIGHT = 1.0

# When False, every generation uses LEVEL_FIXED_SEED.
LEVEL_USE_RANDOM_SEED = True
LEVEL_FIXED_SEED = 0

# Branches
LEVEL_BRANCH_CHANCE_PER_ROOM = 0.5
LEVEL_MIN_BRANCH_LENGTH = 1
LEVEL_MAX_BRANCH_LENGTH = 3
LEVEL_MAX_BRANCHES = 4

# Hard cap on rooms, entrance included.
LEVEL_MAX_TOTAL_ROOMS = 40

# =============================================================================
# VISION
# =============================================================================

VISION_VIEW_DISTANCE = 22.0
VISION_VIEW_ANGLE = 140.0  # Full horizontal field of view in degrees

# Eye offset from the body origin: up, then along the facing.
VISION_EYE_HEIGHT = 0.15
VISION_EYE_FORWARD_OFFSET = 0.45

# Raster resolution of the reference occlusion grid.
OCCLUSION_TILES_PER_CELL = 10

# =============================================================================
# PURSUIT AI
# =============================================================================

PURSUIT_PATROL_SPEED = 2.5
PURSUIT_CHASE_SPEED = 5.0
PURSUIT_KILL_DISTANCE = 1.2

# Seconds line of sight may be lost before Chase degrades to Search.
PURSUIT_LOSE_SIGHT_DELAY = 0.25

# Distance at which a path node counts as reached.
PURSUIT_WAYPOINT_REACHED_DISTANCE = 0.25

# Exponential smoothing rates for turning toward the direction of travel.
PURSUIT_PATROL_TURN_RATE = 6.0
PURSUIT_CHASE_TURN_RATE = 10.0

# Draws allowed when picking a patrol target other than the current room.
PURSUIT_PATROL_TARGET_ATTEMPTS = 20

# =============================================================================
# SIMULATION
# =============================================================================

SIMULATION_FIXED_TIMESTEP = FixedTimestep(1 / 60)
SIMULATION_DEFAULT_TICKS = 3600
