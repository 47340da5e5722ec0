"""Line-of-sight gate for the pursuer.

Sight is a cone: the target must be within ``view_distance`` and within half
the ``view_angle`` of the observer's facing. Only then is the external
occlusion query asked whether a wall is in the way.

No facing-independent "hearing" radius: a player standing behind the
pursuer is never seen, however close.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

from crawlspace import config

if TYPE_CHECKING:
    from crawlspace.game.body import Body
    from crawlspace.types import Vector3, WorldPos

# (origin, target) -> True when geometry other than the target blocks the ray.
OcclusionQuery: TypeAlias = "Callable[[WorldPos, WorldPos], bool]"


@dataclass(frozen=True, slots=True)
class Pose:
    """Where an observer looks from, and which way."""

    position: WorldPos
    forward: Vector3


@dataclass(frozen=True)
class VisionSettings:
    """Vision cone configuration.

    Attributes:
        view_distance: Maximum sight distance in world units.
        view_angle: Full horizontal field of view in degrees.
        eye_height: How far above the body origin the eye sits.
        eye_forward_offset: How far in front of the body origin the eye sits.
    """

    view_distance: float = config.VISION_VIEW_DISTANCE
    view_angle: float = config.VISION_VIEW_ANGLE
    eye_height: float = config.VISION_EYE_HEIGHT
    eye_forward_offset: float = config.VISION_EYE_FORWARD_OFFSET

    def __post_init__(self) -> None:
        if self.view_distance <= 0:
            raise ValueError(
                f"view_distance must be positive, got {self.view_distance}"
            )
        if not 0 < self.view_angle <= 360:
            raise ValueError(
                f"view_angle must be within (0, 360], got {self.view_angle}"
            )

    @property
    def half_fov(self) -> float:
        return self.view_angle * 0.5


def angle_between(a: Vector3, b: Vector3) -> float:
    """Unsigned angle between two vectors in degrees.

    Zero-length input yields 0.
    """
    len_a = math.hypot(*a)
    len_b = math.hypot(*b)
    if len_a < 1e-9 or len_b < 1e-9:
        return 0.0
    dot = (a[0] * b[0] + a[1] * b[1] + a[2] * b[2]) / (len_a * len_b)
    return math.degrees(math.acos(max(-1.0, min(1.0, dot))))


def can_observe(
    origin: Pose,
    target: WorldPos,
    max_range: float,
    half_fov_degrees: float,
    occlusion_query: OcclusionQuery,
) -> bool:
    """Check whether ``target`` is visible from ``origin``.

    Args:
        origin: Eye position and facing of the observer.
        target: The point to look at.
        max_range: Targets farther than this are never visible.
        half_fov_degrees: Targets further off-axis than this are never
            visible.
        occlusion_query: Asked only when both gates pass; returns True
            when something other than the target blocks the line.

    Returns:
        True if the target passes the range and angle gates and the
        occlusion query reports a clear line.
    """
    to_target = (
        target[0] - origin.position[0],
        target[1] - origin.position[1],
        target[2] - origin.position[2],
    )
    if math.hypot(*to_target) > max_range:
        return False

    if angle_between(origin.forward, to_target) > half_fov_degrees:
        return False

    return not occlusion_query(origin.position, target)


class VisionGate:
    """Binds vision settings and an occlusion query to a body's eye."""

    def __init__(
        self,
        occlusion_query: OcclusionQuery,
        settings: VisionSettings | None = None,
    ) -> None:
        self.occlusion_query = occlusion_query
        self.settings = settings or VisionSettings()

    def eye_pose(self, body: Body) -> Pose:
        """Eye position lifted and pushed forward out of the body."""
        fx, fy, fz = body.forward
        x, y, z = body.position
        offset = self.settings.eye_forward_offset
        return Pose(
            position=(
                x + fx * offset,
                y + fy * offset + self.settings.eye_height,
                z + fz * offset,
            ),
            forward=body.forward,
        )

    def can_see(self, body: Body, target: WorldPos) -> bool:
        return can_observe(
            self.eye_pose(body),
            target,
            self.settings.view_distance,
            self.settings.half_fov,
            self.occlusion_query,
        )
