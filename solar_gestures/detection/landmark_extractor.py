"""
21-point hand landmark geometry for gesture classification.

Finger extension uses the distance-from-wrist ratio between a fingertip and
its PIP joint, which holds under in-plane hand rotation (a plain
``tip.y < pip.y`` test does not).
"""

import logging
import numpy as np

from solar_gestures.core.types import LandmarkFrame, PointingDirection

logger = logging.getLogger(__name__)

# MediaPipe hand landmark indices
WRIST = 0
THUMB_CMC = 1
THUMB_MCP = 2
THUMB_IP = 3
THUMB_TIP = 4
INDEX_MCP = 5
INDEX_PIP = 6
INDEX_DIP = 7
INDEX_TIP = 8
MIDDLE_MCP = 9
MIDDLE_PIP = 10
MIDDLE_DIP = 11
MIDDLE_TIP = 12
RING_MCP = 13
RING_PIP = 14
RING_DIP = 15
RING_TIP = 16
PINKY_MCP = 17
PINKY_PIP = 18
PINKY_DIP = 19
PINKY_TIP = 20

# (tip, proximal joint) per non-thumb finger, in classification order
FINGER_TIP_PIP = {
    "index":  (INDEX_TIP, INDEX_PIP),
    "middle": (MIDDLE_TIP, MIDDLE_PIP),
    "ring":   (RING_TIP, RING_PIP),
    "pinky":  (PINKY_TIP, PINKY_PIP),
}

HAND_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 4),          # Thumb
    (0, 5), (5, 6), (6, 7), (7, 8),          # Index
    (5, 9), (9, 10), (10, 11), (11, 12),     # Middle
    (9, 13), (13, 14), (14, 15), (15, 16),   # Ring
    (13, 17), (17, 18), (18, 19), (19, 20),  # Pinky
    (0, 17),                                 # Palm base
]

# Tip must be this much further from the wrist than its PIP joint
DEFAULT_EXTENSION_MARGIN = 0.10


class LandmarkExtractor:
    """Extracts geometric features from a LandmarkFrame."""

    def __init__(self, extension_margin: float = DEFAULT_EXTENSION_MARGIN):
        self._extension_ratio_sq = (1.0 + extension_margin) ** 2

    # =========================================================================
    # Finger State Detection
    # =========================================================================

    def is_extended(self, frame: LandmarkFrame, tip_idx: int, pip_idx: int) -> bool:
        """True when the tip is unambiguously further from the wrist than its PIP.

        Compares squared 2-D distances so no square root is needed.
        """
        wrist = frame.xy(WRIST)
        tip_sq = float(np.sum((frame.xy(tip_idx) - wrist) ** 2))
        pip_sq = float(np.sum((frame.xy(pip_idx) - wrist) ** 2))
        return tip_sq > pip_sq * self._extension_ratio_sq

    def get_finger_states(self, frame: LandmarkFrame) -> dict:
        """Determine which of the four non-thumb fingers are extended.

        Returns:
            dict with finger names -> bool (True = extended)
        """
        return {
            finger: self.is_extended(frame, tip, pip)
            for finger, (tip, pip) in FINGER_TIP_PIP.items()
        }

    # =========================================================================
    # Distances & Directions
    # =========================================================================

    def get_pinch_distance(self, frame: LandmarkFrame) -> float:
        """2-D Euclidean distance between thumb tip and index tip."""
        return float(np.linalg.norm(frame.xy(THUMB_TIP) - frame.xy(INDEX_TIP)))

    def get_pointing_direction(self, frame: LandmarkFrame, gain: float) -> PointingDirection:
        """Index fingertip offset from the frame center, scaled by ``gain``.

        Vertical offset drives pitch (x), horizontal offset drives roll (y).
        """
        tip_x, tip_y = frame.xy(INDEX_TIP)
        return PointingDirection(
            x=float((tip_y - 0.5) * gain),
            y=float((tip_x - 0.5) * gain),
        )
