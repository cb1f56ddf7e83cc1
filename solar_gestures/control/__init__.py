"""Gesture -> store actions, orbital mechanics and camera trajectory."""
from .gesture_actions import GestureActionConfig, apply_gesture
from .orbits import Orbit, BODIES, body_position, body_positions
from .trajectory import (
    TrajectoryController, TrajectoryConfig, CameraPose, ControllerOutput, FOCUS_VIEWS,
)

__all__ = [
    "GestureActionConfig",
    "apply_gesture",
    "Orbit",
    "BODIES",
    "body_position",
    "body_positions",
    "TrajectoryController",
    "TrajectoryConfig",
    "CameraPose",
    "ControllerOutput",
    "FOCUS_VIEWS",
]
