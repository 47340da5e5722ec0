"""Pursuit AI: Patrol, Chase and Search.

The pursuer wanders the dungeon room to room until it sees the player,
then runs straight at them. When sight is lost for longer than a short
grace period it walks to the room the player was last seen in, and gives up
and resumes patrolling if the player isn't there.

Transitions:

    PATROL --sees player--> CHASE
    CHASE  --sight lost for lose_sight_delay--> SEARCH
    SEARCH --sees player--> CHASE
    SEARCH --no last-known room / no route / route walked--> PATROL

Patrol and Search walk room-graph paths. Chase ignores the graph and steers
at the player's live position.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from enum import Enum, auto
from typing import TYPE_CHECKING

from crawlspace import config
from crawlspace.events import EncounterResolvedEvent, publish_event
from crawlspace.game.pathfinding import find_path
from crawlspace.util import rng
from crawlspace.util.live_vars import live_variable_registry

if TYPE_CHECKING:
    from crawlspace.environment.generators import LevelGenerator
    from crawlspace.environment.room_graph import RoomGraph, RoomNode
    from crawlspace.game.ai.vision import VisionGate
    from crawlspace.game.body import Body, Tracked
    from crawlspace.game.pathfinding import RoomPath
    from crawlspace.types import DeltaTime, GridPos

logger = logging.getLogger(__name__)

_rng = rng.get("npc.ai.pursuit")


class PursuitState(Enum):
    PATROL = auto()
    CHASE = auto()
    SEARCH = auto()


@dataclass(frozen=True)
class PursuitSettings:
    """Tuning for the pursuer.

    Attributes:
        patrol_speed: Speed while walking paths (Patrol and Search).
        chase_speed: Speed while steering straight at the player.
        kill_distance: The encounter ends when the player is this close.
        lose_sight_delay: Seconds without sight before Chase becomes Search.
        waypoint_reached_distance: How close counts as reaching a path node.
        patrol_turn_rate: Turn smoothing rate while following paths.
        chase_turn_rate: Turn smoothing rate while chasing.
        patrol_target_attempts: Draws allowed when picking a patrol target
            other than the current room.
    """

    patrol_speed: float = config.PURSUIT_PATROL_SPEED
    chase_speed: float = config.PURSUIT_CHASE_SPEED
    kill_distance: float = config.PURSUIT_KILL_DISTANCE
    lose_sight_delay: float = config.PURSUIT_LOSE_SIGHT_DELAY
    waypoint_reached_distance: float = config.PURSUIT_WAYPOINT_REACHED_DISTANCE
    patrol_turn_rate: float = config.PURSUIT_PATROL_TURN_RATE
    chase_turn_rate: float = config.PURSUIT_CHASE_TURN_RATE
    patrol_target_attempts: int = config.PURSUIT_PATROL_TARGET_ATTEMPTS

    def __post_init__(self) -> None:
        for name in ("patrol_speed", "chase_speed", "waypoint_reached_distance"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        for name in ("kill_distance", "lose_sight_delay"):
            if getattr(self, name) < 0:
                raise ValueError(
                    f"{name} must not be negative, got {getattr(self, name)}"
                )
        if self.patrol_target_attempts < 1:
            raise ValueError(
                "patrol_target_attempts must be at least 1, "
                f"got {self.patrol_target_attempts}"
            )


@dataclass(frozen=True, slots=True)
class PursuitSnapshot:
    """Read-only view of the controller for inspectors and tests.

    Room fields are grid coordinates, or None when unknown.
    """

    state: str
    can_see_player: bool
    agent_room: GridPos | None
    player_room: GridPos | None
    last_known_room: GridPos | None
    path_length: int
    path_index: int
    lost_sight_timer: float
    encounters_resolved: int
    notes: str


class PursuitController:
    """Drives one pursuer body through the live level.

    Collaborators are passed in, never looked up. ``player`` and ``vision``
    may be None (for example while a scene is still being wired); the
    controller then skips its ticks and records why.

    Call ``update()`` once per simulation tick.
    """

    def __init__(
        self,
        level: LevelGenerator | None,
        body: Body,
        player: Tracked | None,
        vision: VisionGate | None,
        settings: PursuitSettings | None = None,
    ) -> None:
        self.level = level
        self.body = body
        self.player = player
        self.vision = vision
        self.settings = settings or PursuitSettings()

        self.state = PursuitState.PATROL
        self.path: RoomPath | None = None
        self.path_index = 0
        self.last_known_room: RoomNode | None = None
        self.lost_sight_timer = 0.0

        self.can_see_player = False
        self.encounters_resolved = 0
        self.notes = "Pursuit started."

        self._level_generation = level.generation if level is not None else 0
        self._in_kill_range = False
        self._reported_problem: str | None = None

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def update(self, delta_time: DeltaTime) -> None:
        """Advance the pursuer by one tick."""
        graph = self._live_graph()
        if graph is None:
            return

        # Line of sight is evaluated once per tick so every decision below
        # sees the same answer.
        assert self.vision is not None and self.player is not None
        can_see = self.vision.can_see(self.body, self.player.position)
        self.can_see_player = can_see

        match self.state:
            case PursuitState.PATROL:
                self._patrol(graph, can_see, delta_time)
            case PursuitState.CHASE:
                self._chase(graph, can_see, delta_time)
            case PursuitState.SEARCH:
                self._search(graph, can_see, delta_time)

        self._check_kill()

    def _live_graph(self) -> RoomGraph | None:
        """Return the graph to act on this tick, or None to skip the tick."""
        if self.level is None or self.player is None or self.vision is None:
            missing = [
                name
                for name, ref in (
                    ("level", self.level),
                    ("player", self.player),
                    ("vision", self.vision),
                )
                if ref is None
            ]
            self._report_problem(f"Missing reference(s): {'/'.join(missing)}.")
            return None

        graph = self.level.graph
        if graph is None or len(graph) == 0:
            self._report_problem("No rooms yet. Waiting for level generation.")
            return None
        self._reported_problem = None

        if self.level.generation != self._level_generation:
            # Rooms from the old layout are dead; drop everything that
            # points into it. A new level is a new encounter, so the kill
            # signal is armed again.
            self._level_generation = self.level.generation
            self._clear_path()
            self.last_known_room = None
            self._in_kill_range = False
            self._note("Level regenerated, path invalidated.")

        return graph

    def _report_problem(self, message: str) -> None:
        self.notes = message
        if message != self._reported_problem:
            logger.warning(f"Pursuit tick skipped: {message}")
            self._reported_problem = message

    # ------------------------------------------------------------------
    # States
    # ------------------------------------------------------------------

    def _patrol(self, graph: RoomGraph, can_see: bool, delta_time: DeltaTime) -> None:
        if can_see:
            self._enter_chase("PATROL -> CHASE (saw player).")
            return

        if self._path_exhausted():
            self._set_new_patrol_path(graph)

        self._follow_path(graph, self.settings.patrol_speed, delta_time)

    def _set_new_patrol_path(self, graph: RoomGraph) -> None:
        rooms = graph.all_rooms()
        current_room = graph.closest_room(self.body.position)
        if current_room is None:
            self._note("Patrol: no current room.")
            return

        # Pick a random different room; keep the last draw if every attempt
        # lands on the current room (e.g. a one-room level).
        target = current_room
        for _ in range(self.settings.patrol_target_attempts):
            target = _rng.choice(rooms)
            if target is not current_room:
                break

        self.path = find_path(current_room, target)
        self.path_index = 0
        length = len(self.path) if self.path is not None else "none"
        self._note(f"New PATROL path to {target.grid_pos}. Length: {length}")

    def _chase(self, graph: RoomGraph, can_see: bool, delta_time: DeltaTime) -> None:
        assert self.player is not None
        player_room = graph.closest_room(self.player.position)

        if can_see:
            self.lost_sight_timer = 0.0
            self.last_known_room = player_room
            self.body.move_towards(
                self.player.position,
                self.settings.chase_speed,
                delta_time,
                turn_rate=self.settings.chase_turn_rate,
            )
            self.notes = "CHASE (direct), line of sight held."
            return

        self.lost_sight_timer += delta_time

        # Grace period: corners flicker sight on and off.
        if self.lost_sight_timer < self.settings.lose_sight_delay:
            self.notes = "CHASE, line of sight just lost (grace period)."
            return

        if self.last_known_room is None:
            self.last_known_room = player_room

        self.state = PursuitState.SEARCH
        self._clear_path()
        self._note("CHASE -> SEARCH (lost sight, heading to last known room).")

    def _search(self, graph: RoomGraph, can_see: bool, delta_time: DeltaTime) -> None:
        if can_see:
            self._enter_chase("SEARCH -> CHASE (player seen).")
            return

        if self.last_known_room is None:
            self._enter_patrol("SEARCH: no last known room -> PATROL.")
            return

        if self._path_exhausted():
            agent_room = graph.closest_room(self.body.position)
            if agent_room is None:
                self._enter_patrol("SEARCH: no current room -> PATROL.")
                return

            self.path = find_path(agent_room, self.last_known_room)
            self.path_index = 0
            if not self.path:
                self._enter_patrol("SEARCH: no path to last known room -> PATROL.")
                return
            self._note(f"SEARCH: path to last known room. Length: {len(self.path)}")

        self._follow_path(graph, self.settings.patrol_speed, delta_time)

        if self._path_exhausted():
            self._enter_patrol("SEARCH: reached last known room, no player -> PATROL.")

    def _enter_chase(self, note: str) -> None:
        self.state = PursuitState.CHASE
        self.lost_sight_timer = 0.0
        self._clear_path()
        self._note(note)

    def _enter_patrol(self, note: str) -> None:
        self.state = PursuitState.PATROL
        self._clear_path()
        self._note(note)

    # ------------------------------------------------------------------
    # Path following
    # ------------------------------------------------------------------

    def _clear_path(self) -> None:
        self.path = None
        self.path_index = 0

    def _path_exhausted(self) -> bool:
        return self.path is None or self.path_index >= len(self.path)

    def _follow_path(
        self, graph: RoomGraph, speed: float, delta_time: DeltaTime
    ) -> None:
        if self.path is None or self.path_index >= len(self.path):
            return

        node = self.path[self.path_index]
        # Room center at the body's own height.
        cx, _, cz = graph.world_position(node)
        target = (cx, self.body.position[1], cz)

        moved = self.body.move_towards(
            target, speed, delta_time, turn_rate=self.settings.patrol_turn_rate
        )
        if not moved:
            self.path_index += 1
            return

        if self.body.distance_to(target) < self.settings.waypoint_reached_distance:
            self.path_index += 1

    # ------------------------------------------------------------------
    # Kill check
    # ------------------------------------------------------------------

    def _check_kill(self) -> None:
        assert self.player is not None
        distance = self.body.distance_to(self.player.position)
        if distance > self.settings.kill_distance:
            self._in_kill_range = False
            return

        # One signal per entry into range, not one per tick spent in it.
        if self._in_kill_range:
            return
        self._in_kill_range = True
        self.encounters_resolved += 1
        logger.info(f"Encounter resolved at distance {distance:.2f}")
        publish_event(
            EncounterResolvedEvent(
                agent_position=self.body.position,
                player_position=self.player.position,
                distance=distance,
            )
        )

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def _note(self, message: str) -> None:
        self.notes = message
        logger.debug(message)

    def debug_snapshot(self) -> PursuitSnapshot:
        """Capture the controller's current state."""
        graph = self.level.graph if self.level is not None else None
        agent_room = player_room = None
        if graph is not None:
            room = graph.closest_room(self.body.position)
            agent_room = room.grid_pos if room is not None else None
            if self.player is not None:
                room = graph.closest_room(self.player.position)
                player_room = room.grid_pos if room is not None else None

        return PursuitSnapshot(
            state=self.state.name,
            can_see_player=self.can_see_player,
            agent_room=agent_room,
            player_room=player_room,
            last_known_room=(
                self.last_known_room.grid_pos
                if self.last_known_room is not None
                else None
            ),
            path_length=len(self.path) if self.path is not None else 0,
            path_index=self.path_index,
            lost_sight_timer=self.lost_sight_timer,
            encounters_resolved=self.encounters_resolved,
            notes=self.notes,
        )

    def register_live_variables(self, prefix: str = "ai.pursuit") -> None:
        """Expose the snapshot fields as read-only live variables."""
        for field_name in (f.name for f in fields(PursuitSnapshot)):
            live_variable_registry.register(
                f"{prefix}.{field_name}",
                lambda field_name=field_name: getattr(
                    self.debug_snapshot(), field_name
                ),
                description=f"Pursuit {field_name.replace('_', ' ')}",
            )
