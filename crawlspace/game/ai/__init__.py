"""Pursuer decision making.

- VisionGate: range, field-of-view and occlusion test for sighting the player
- PursuitController: Patrol / Chase / Search state machine
"""

from .pursuit import PursuitController, PursuitSettings, PursuitSnapshot, PursuitState
from .vision import OcclusionQuery, Pose, VisionGate, VisionSettings, can_observe

__all__ = [
    "OcclusionQuery",
    "Pose",
    "PursuitController",
    "PursuitSettings",
    "PursuitSnapshot",
    "PursuitState",
    "VisionGate",
    "VisionSettings",
    "can_observe",
]
