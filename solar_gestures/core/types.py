"""
Shared domain types for the Solar Gestures system.

Centralizes enums, contract constants, and data containers used across
modules to eliminate circular imports and ensure type consistency.
"""

from enum import Enum
from typing import NamedTuple, Optional, Sequence

import numpy as np


# =============================================================================
# Contract Constants
# =============================================================================

MAX_ZOOM = 1.0          # closest / most scattered view
MIN_ZOOM = -0.5         # furthest view
DEFAULT_ZOOM = 0.2
ZOOM_STEP = 0.015       # per OPEN / PINCH tick
PINCH_THRESHOLD = 0.05  # normalized thumb-index distance
POINTING_GAIN = 4.0
SMOOTHING_RATE = 0.05   # per tick

NUM_LANDMARKS = 21


def clamp_zoom(level: float) -> float:
    """Clamp a zoom level into [MIN_ZOOM, MAX_ZOOM]."""
    return max(MIN_ZOOM, min(MAX_ZOOM, level))


# =============================================================================
# Gesture / Focus Enums
# =============================================================================

class GestureLabel(Enum):
    """Discrete gesture vocabulary, one value current at any instant."""
    IDLE = "IDLE"
    POINT = "POINT"
    PINCH = "PINCH"
    TWO = "TWO"
    THREE = "THREE"
    OPEN = "OPEN"

    @classmethod
    def from_string(cls, name: str) -> 'GestureLabel':
        """Convert a string gesture name to GestureLabel, safely."""
        try:
            return cls(name.upper())
        except (ValueError, AttributeError):
            return cls.IDLE


class FocusTarget(Enum):
    """Which rendered body the camera is tracking."""
    NONE = "NONE"
    SATURN = "SATURN"
    EARTH = "EARTH"
    MOON = "MOON"


# =============================================================================
# Landmark Containers
# =============================================================================

class Landmark(NamedTuple):
    """A single landmark point with normalized coordinates."""
    x: float  # 0.0 to 1.0, normalized by image width
    y: float  # 0.0 to 1.0, normalized by image height
    z: float = 0.0  # Depth relative to wrist


class PointingDirection(NamedTuple):
    """Manual rotation derived from the index fingertip while pointing."""
    x: float  # pitch, from the fingertip's vertical offset
    y: float  # roll, from the fingertip's horizontal offset


class LandmarkFrame:
    """One detector output: normalized landmarks for a single hand.

    Wraps an (N, 3) float array. A complete frame has 21 points; shorter
    frames can still be constructed so callers can degrade gracefully.
    """

    __slots__ = ("points", "handedness", "timestamp_ms")

    def __init__(self, points, handedness: str = "unknown",
                 timestamp_ms: Optional[int] = None):
        arr = np.asarray(points, dtype=np.float64)
        if arr.ndim == 1:
            arr = arr.reshape(-1, 3)
        if arr.ndim != 2 or arr.shape[1] not in (2, 3):
            raise ValueError(f"Expected (N, 2) or (N, 3) landmarks, got {arr.shape}")
        if arr.shape[1] == 2:
            arr = np.hstack([arr, np.zeros((arr.shape[0], 1))])
        self.points = arr
        self.handedness = handedness
        self.timestamp_ms = timestamp_ms

    @classmethod
    def from_landmarks(cls, landmarks: Sequence, handedness: str = "unknown",
                       timestamp_ms: Optional[int] = None) -> 'LandmarkFrame':
        """Build a frame from objects exposing x, y and optionally z."""
        rows = [[lm.x, lm.y, getattr(lm, "z", 0.0) or 0.0] for lm in landmarks]
        return cls(np.array(rows, dtype=np.float64).reshape(-1, 3),
                   handedness=handedness, timestamp_ms=timestamp_ms)

    def __len__(self) -> int:
        return self.points.shape[0]

    @property
    def is_complete(self) -> bool:
        return len(self) >= NUM_LANDMARKS

    def get(self, index: int) -> Landmark:
        """Get landmark by index."""
        x, y, z = self.points[index]
        return Landmark(float(x), float(y), float(z))

    def xy(self, index: int) -> np.ndarray:
        return self.points[index, :2]

    def __repr__(self):
        return f"LandmarkFrame({len(self)} points, {self.handedness})"


# =============================================================================
# Classification Output
# =============================================================================

class GestureResult:
    """Container for gesture classification output.

    Uses __slots__ to keep per-frame allocations small.
    """

    __slots__ = ("label", "direction", "pinch_distance", "finger_states")

    def __init__(self, label: GestureLabel,
                 direction: Optional[PointingDirection] = None,
                 pinch_distance: Optional[float] = None,
                 finger_states: Optional[dict] = None):
        self.label = label
        self.direction = direction
        self.pinch_distance = pinch_distance
        self.finger_states = finger_states or {}

    @staticmethod
    def idle() -> 'GestureResult':
        return GestureResult(GestureLabel.IDLE)

    def __eq__(self, other):
        if not isinstance(other, GestureResult):
            return NotImplemented
        return self.label == other.label and self.direction == other.direction

    def __hash__(self):
        return hash((self.label, self.direction))

    def __repr__(self):
        if self.direction is not None:
            return (f"GestureResult({self.label.value}, "
                    f"dir=({self.direction.x:.2f}, {self.direction.y:.2f}))")
        return f"GestureResult({self.label.value})"


# =============================================================================
# Gesture -> Focus Mapping
# =============================================================================

GESTURE_FOCUS_MAP = {
    GestureLabel.THREE: FocusTarget.MOON,
    GestureLabel.TWO: FocusTarget.EARTH,
    GestureLabel.POINT: FocusTarget.SATURN,
    GestureLabel.PINCH: FocusTarget.NONE,
}
