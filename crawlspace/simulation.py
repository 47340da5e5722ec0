"""Headless encounter: one pursuer, one player, one generated level.

Stands in for the engine scene. It plays the world-building collaborator
(rebuilding the occlusion raster on every ``LevelGeneratedEvent``) and the
scene manager (listening for ``EncounterResolvedEvent``), and steps the
controller with a fixed timestep.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from crawlspace import config
from crawlspace.environment.generators import LevelGenerator, LevelSettings
from crawlspace.environment.occlusion import GridOcclusion
from crawlspace.environment.room_graph import RoomGraph, RoomKind
from crawlspace.environment.walls import WallSide, open_sides
from crawlspace.events import (
    EncounterResolvedEvent,
    LevelGeneratedEvent,
    subscribe_to_event,
    unsubscribe_from_event,
)
from crawlspace.game.ai.pursuit import PursuitController, PursuitSettings
from crawlspace.game.ai.vision import VisionGate, VisionSettings
from crawlspace.game.body import Body
from crawlspace.types import DeltaTime, FixedTimestep, WorldPos
from crawlspace.util.live_vars import live_variable_registry

logger = logging.getLogger(__name__)

# Live variable prefixes for the single encounter.
LEVEL_VARIABLES = "level"
PURSUIT_VARIABLES = "ai.pursuit"


@dataclass(frozen=True, slots=True)
class StateChange:
    """A pursuit state the controller entered, and when."""

    tick: int
    state: str
    notes: str


class Encounter:
    """Wires a level, a pursuer and a stationary player together.

    The pursuer starts at the entrance and the player in the objective room
    (or the last room, for a layout without one).
    """

    def __init__(
        self,
        level_settings: LevelSettings | None = None,
        vision_settings: VisionSettings | None = None,
        pursuit_settings: PursuitSettings | None = None,
        *,
        tiles_per_cell: int = config.OCCLUSION_TILES_PER_CELL,
    ) -> None:
        self.tiles_per_cell = tiles_per_cell
        self.level = LevelGenerator(level_settings)
        self.occlusion: GridOcclusion | None = None
        self.agent = Body()
        self.player = Body()
        self.vision = VisionGate(self._is_blocked, vision_settings)

        self.tick = 0
        self.resolved = False
        self.history: list[StateChange] = []

        subscribe_to_event(LevelGeneratedEvent, self._on_level_generated)
        subscribe_to_event(EncounterResolvedEvent, self._on_encounter_resolved)

        self.level.generate()
        self.controller = PursuitController(
            self.level, self.agent, self.player, self.vision, pursuit_settings
        )
        self._last_state = self.controller.state.name

        self.level.register_live_variables(LEVEL_VARIABLES)
        self.controller.register_live_variables(PURSUIT_VARIABLES)

    def close(self) -> None:
        """Stop listening to the global event bus and drop live variables."""
        unsubscribe_from_event(LevelGeneratedEvent, self._on_level_generated)
        unsubscribe_from_event(EncounterResolvedEvent, self._on_encounter_resolved)
        live_variable_registry.unregister_prefix(f"{LEVEL_VARIABLES}.")
        live_variable_registry.unregister_prefix(f"{PURSUIT_VARIABLES}.")

    @property
    def graph(self) -> RoomGraph:
        assert self.level.graph is not None
        return self.level.graph

    def regenerate(self) -> None:
        """Build a new level and put both bodies back at their start rooms."""
        self.level.generate()

    def _is_blocked(self, origin: WorldPos, target: WorldPos) -> bool:
        if self.occlusion is None:
            return True
        return self.occlusion.is_blocked(origin, target)

    def _on_level_generated(self, event: LevelGeneratedEvent) -> None:
        if event.graph is not self.level.graph:
            return
        graph = event.graph
        self.occlusion = GridOcclusion(graph, self.tiles_per_cell)

        rooms = graph.all_rooms()
        entrance = graph.entrance or rooms[0]
        goal = graph.objective or rooms[-1]
        self.agent.position = graph.world_position(entrance)
        self.player.position = graph.world_position(goal)
        self.resolved = False
        logger.debug(
            f"Placed pursuer at {entrance.grid_pos} and player at {goal.grid_pos}"
        )

    def _on_encounter_resolved(self, event: EncounterResolvedEvent) -> None:
        if self.resolved:
            return
        self.resolved = True
        logger.info(
            f"Player caught on tick {self.tick} (distance {event.distance:.2f})"
        )

    def step(self, delta_time: DeltaTime) -> None:
        """Advance one tick unless the encounter is already over."""
        if self.resolved:
            return
        self.tick += 1
        self.controller.update(delta_time)

        state = self.controller.state.name
        if state != self._last_state:
            self.history.append(StateChange(self.tick, state, self.controller.notes))
            self._last_state = state

    def run(
        self,
        ticks: int = config.SIMULATION_DEFAULT_TICKS,
        timestep: FixedTimestep = config.SIMULATION_FIXED_TIMESTEP,
    ) -> int:
        """Step up to ``ticks`` times. Returns the number of ticks taken."""
        start = self.tick
        for _ in range(ticks):
            if self.resolved:
                break
            self.step(DeltaTime(timestep))
        return self.tick - start


_ROOM_GLYPHS = {
    RoomKind.ENTRANCE: "E",
    RoomKind.NORMAL: "#",
    RoomKind.OBJECTIVE: "O",
}


def render_layout(graph: RoomGraph) -> str:
    """ASCII picture of a layout, north up.

    Rooms are ``E`` (entrance), ``O`` (objective) and ``#``; ``-`` and ``|``
    mark connections.
    """
    if len(graph) == 0:
        return "(empty)"

    (min_x, min_y), (max_x, max_y) = graph.bounds()
    width = (max_x - min_x) * 2 + 1
    height = (max_y - min_y) * 2 + 1
    canvas = [[" "] * width for _ in range(height)]

    for room in graph:
        cx = (room.grid_pos[0] - min_x) * 2
        # Row 0 is the northmost row.
        cy = (max_y - room.grid_pos[1]) * 2
        canvas[cy][cx] = _ROOM_GLYPHS[room.kind]
        # Each link is drawn once, from its west or south end.
        for side in open_sides(room):
            match side:
                case WallSide.EAST:
                    canvas[cy][cx + 1] = "-"
                case WallSide.NORTH:
                    canvas[cy - 1][cx] = "|"

    return "\n".join("".join(row).rstrip() for row in canvas)
