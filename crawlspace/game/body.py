"""Kinematic bodies moved by the AI.

The engine owns real physics; the core only needs a position it can push
along the ground plane and a heading it can turn. Movement never changes
height: every step is flattened onto the x/z plane.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol

from crawlspace.types import Degrees, DeltaTime, Vector3, WorldPos

# Offsets shorter than this are treated as "already there".
_MIN_OFFSET_SQ = 0.0001


class Tracked(Protocol):
    """Anything the AI can follow: it only needs a world position."""

    @property
    def position(self) -> WorldPos: ...


@dataclass
class Body:
    """A position on the map and a heading around the up axis.

    Attributes:
        position: World position; y is up.
        yaw: Heading in degrees. 0 faces +z, 90 faces +x.
    """

    position: WorldPos = (0.0, 0.0, 0.0)
    yaw: Degrees = Degrees(0.0)

    @property
    def forward(self) -> Vector3:
        """Unit vector the body is facing."""
        rad = math.radians(self.yaw)
        return (math.sin(rad), 0.0, math.cos(rad))

    def flat_offset_to(self, target: WorldPos) -> Vector3:
        """Offset from the body to ``target`` with the vertical part dropped."""
        return (target[0] - self.position[0], 0.0, target[2] - self.position[2])

    def distance_to(self, target: WorldPos) -> float:
        return math.dist(self.position, target)

    def move_towards(
        self,
        target: WorldPos,
        speed: float,
        delta_time: DeltaTime,
        *,
        turn_rate: float,
    ) -> bool:
        """Step toward ``target`` on the ground plane and turn to face it.

        The step never carries the body past the target.

        Returns:
            False if the body was already on top of the target and did not
            move, True otherwise.
        """
        dx, _, dz = self.flat_offset_to(target)
        dist_sq = dx * dx + dz * dz
        if dist_sq < _MIN_OFFSET_SQ:
            return False

        dist = math.sqrt(dist_sq)
        step = min(speed * delta_time, dist)
        x, y, z = self.position
        self.position = (x + dx / dist * step, y, z + dz / dist * step)
        self.turn_towards((dx, 0.0, dz), turn_rate, delta_time)
        return True

    def turn_towards(
        self, direction: Vector3, turn_rate: float, delta_time: DeltaTime
    ) -> None:
        """Exponentially ease the heading toward ``direction``.

        Each call closes ``min(1, turn_rate * delta_time)`` of the remaining
        angle, taking the short way round.
        """
        if direction[0] == 0.0 and direction[2] == 0.0:
            return
        desired = math.degrees(math.atan2(direction[0], direction[2]))
        # Signed difference wrapped into [-180, 180).
        diff = (desired - self.yaw + 180.0) % 360.0 - 180.0
        t = min(1.0, max(0.0, turn_rate * delta_time))
        self.yaw = Degrees((self.yaw + diff * t + 180.0) % 360.0 - 180.0)

    def face(self, direction: Vector3) -> None:
        """Snap the heading to ``direction``."""
        if direction[0] == 0.0 and direction[2] == 0.0:
            return
        self.yaw = Degrees(math.degrees(math.atan2(direction[0], direction[2])))
