"""Branching dungeon layout on a square room grid.

The layout is a random walk from the entrance (the main path) with short
side branches grown off it. Every new room is placed in a free cell next to
the room it grows from and linked to it, so the result is always a connected
tree rooted at the entrance.

Generation never fails: a walk that boxes itself in just stops early, and
the room budget silently truncates branches.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from crawlspace import config
from crawlspace.environment.room_graph import (
    CARDINAL_DIRECTIONS,
    RoomGraph,
    RoomKind,
    RoomNode,
)
from crawlspace.events import LevelGeneratedEvent, publish_event
from crawlspace.util import rng
from crawlspace.util.live_vars import live_variable_registry

if TYPE_CHECKING:
    from crawlspace.types import GridPos, GridStep
    from crawlspace.util.rng import RNGStream

logger = logging.getLogger(__name__)

# Draws level seeds when LevelSettings.use_random_seed is set. A seeded global
# provider reproduces these "random" levels too.
_seed_rng = rng.get("map.level_seed")


@dataclass(frozen=True)
class LevelSettings:
    """Generation parameters. All bounds are inclusive.

    Attributes:
        main_path_length: Rooms on the main path, entrance included.
        cell_size: World units between room centers.
        use_random_seed: Draw a fresh seed for every generation.
        fixed_seed: Seed used when ``use_random_seed`` is False.
        branch_chance_per_room: Probability that a main-path room sprouts
            a branch.
        min_branch_length: Shortest branch, in rooms.
        max_branch_length: Longest branch, in rooms.
        max_branches: Branches attempted at most.
        max_total_rooms: Hard cap on rooms, entrance included.
    """

    main_path_length: int = config.LEVEL_MAIN_PATH_LENGTH
    cell_size: float = config.LEVEL_CELL_SIZE
    use_random_seed: bool = config.LEVEL_USE_RANDOM_SEED
    fixed_seed: int = config.LEVEL_FIXED_SEED
    branch_chance_per_room: float = config.LEVEL_BRANCH_CHANCE_PER_ROOM
    min_branch_length: int = config.LEVEL_MIN_BRANCH_LENGTH
    max_branch_length: int = config.LEVEL_MAX_BRANCH_LENGTH
    max_branches: int = config.LEVEL_MAX_BRANCHES
    max_total_rooms: int = config.LEVEL_MAX_TOTAL_ROOMS

    def __post_init__(self) -> None:
        if self.main_path_length < 2:
            raise ValueError(
                f"main_path_length must be at least 2, got {self.main_path_length}"
            )
        if self.cell_size <= 0:
            raise ValueError(f"cell_size must be positive, got {self.cell_size}")
        if not 0.0 <= self.branch_chance_per_room <= 1.0:
            raise ValueError(
                "branch_chance_per_room must be within [0, 1], "
                f"got {self.branch_chance_per_room}"
            )
        if self.min_branch_length < 1:
            raise ValueError(
                f"min_branch_length must be at least 1, got {self.min_branch_length}"
            )
        if self.max_branch_length < self.min_branch_length:
            raise ValueError(
                f"max_branch_length ({self.max_branch_length}) must not be less "
                f"than min_branch_length ({self.min_branch_length})"
            )
        if self.max_branches < 0:
            raise ValueError(
                f"max_branches must not be negative, got {self.max_branches}"
            )
        if self.max_total_rooms < 1:
            raise ValueError(
                f"max_total_rooms must be at least 1, got {self.max_total_rooms}"
            )


class LevelGenerator:
    """Builds and owns the live room graph.

    ``graph`` is ``None`` until the first ``generate()`` call. ``generation``
    counts completed generations; anything holding rooms or paths from an
    older generation must drop them.
    """

    def __init__(self, settings: LevelSettings | None = None) -> None:
        self.settings = settings or LevelSettings()
        self.graph: RoomGraph | None = None
        self.generation = 0
        self.main_path: list[RoomNode] = []
        self.branch_count = 0

    @property
    def cell_size(self) -> float:
        return self.settings.cell_size

    def generate(self) -> RoomGraph:
        """Discard the current layout and build a new one."""
        settings = self.settings
        if settings.use_random_seed:
            seed = _seed_rng.getrandbits(32)
        else:
            seed = settings.fixed_seed
        # Private provider: the layout depends only on the seed and settings.
        stream = rng.RNGProvider(seed).get("map.level")

        graph = RoomGraph(settings.cell_size, seed=seed)
        self.main_path = self._build_main_path(graph, stream)
        self.branch_count = self._build_branches(graph, self.main_path, stream)

        if len(self.main_path) > 1:
            self.main_path[-1].kind = RoomKind.OBJECTIVE

        self.graph = graph
        self.generation += 1
        logger.info(
            f"Generated layout with {len(graph)} rooms "
            f"({len(self.main_path)} on main path, {self.branch_count} branches, "
            f"seed={seed})"
        )
        publish_event(LevelGeneratedEvent(graph=graph, generation=self.generation))
        return graph

    def _build_main_path(
        self, graph: RoomGraph, stream: RNGStream
    ) -> list[RoomNode]:
        current = graph.add_room((0, 0), RoomKind.ENTRANCE)
        main_path = [current]

        for step in range(1, self.settings.main_path_length):
            if len(graph) >= self.settings.max_total_rooms:
                break

            next_pos = _find_free_neighbor(graph, current.grid_pos, stream)
            if next_pos is None:
                logger.warning(f"Could not find a new cell for main path step {step}")
                break

            room = graph.add_room(next_pos)
            graph.connect(current, room)
            main_path.append(room)
            current = room

        return main_path

    def _build_branches(
        self, graph: RoomGraph, main_path: list[RoomNode], stream: RNGStream
    ) -> int:
        settings = self.settings
        branches_created = 0

        # The last main-path room is the objective; nothing branches off it.
        for base_room in main_path[:-1]:
            if branches_created >= settings.max_branches:
                break
            if len(graph) >= settings.max_total_rooms:
                break

            if stream.random() > settings.branch_chance_per_room:
                continue

            target_length = stream.randint(
                settings.min_branch_length, settings.max_branch_length
            )
            self._grow_branch(graph, base_room, target_length, stream)
            # Counted once attempted, even if the branch was boxed in.
            branches_created += 1

        return branches_created

    def _grow_branch(
        self,
        graph: RoomGraph,
        base_room: RoomNode,
        target_length: int,
        stream: RNGStream,
    ) -> None:
        previous = base_room
        for _ in range(target_length):
            if len(graph) >= self.settings.max_total_rooms:
                break
            next_pos = _find_free_neighbor(graph, previous.grid_pos, stream)
            if next_pos is None:
                break
            room = graph.add_room(next_pos)
            graph.connect(previous, room)
            previous = room

    def register_live_variables(self, prefix: str = "level") -> None:
        """Expose the current layout for live inspection."""
        live_variable_registry.register(
            f"{prefix}.generation",
            lambda: self.generation,
            description="Completed level generations",
        )
        live_variable_registry.register(
            f"{prefix}.rooms",
            lambda: len(self.graph) if self.graph is not None else 0,
            description="Rooms in the live layout",
        )
        live_variable_registry.register(
            f"{prefix}.seed",
            lambda: self.graph.seed if self.graph is not None else None,
            description="Seed of the live layout",
        )


def _shuffled_directions(stream: RNGStream) -> list[GridStep]:
    """Fisher-Yates shuffle of the four cardinal steps."""
    directions = list(CARDINAL_DIRECTIONS)
    for i in range(len(directions) - 1):
        j = stream.randrange(i, len(directions))
        directions[i], directions[j] = directions[j], directions[i]
    return directions


def _find_free_neighbor(
    graph: RoomGraph, pos: GridPos, stream: RNGStream
) -> GridPos | None:
    """Return a random unoccupied cell next to ``pos``, or None if boxed in."""
    for dx, dy in _shuffled_directions(stream):
        candidate = (pos[0] + dx, pos[1] + dy)
        if not graph.has_room(candidate):
            return candidate
    return None
