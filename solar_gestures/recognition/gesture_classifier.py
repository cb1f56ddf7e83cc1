"""
Static Gesture Classifier
==========================

Rule-based gesture recognition from single-frame hand landmark geometry.

Rules are priority-ordered and mutually exclusive; the first match wins:

    THREE  index, middle, ring extended; pinky curled
    TWO    index, middle extended; ring, pinky curled
    POINT  index extended; middle, ring, pinky curled
    OPEN   all four fingers extended
    PINCH  none of the shapes above, thumb tip near index tip
    IDLE   fallback

Shape rules run before the pinch test so that a pointing hand whose thumb
happens to touch the index finger is still reported as POINT.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from solar_gestures.core.types import (
    GestureLabel, GestureResult, LandmarkFrame,
    PINCH_THRESHOLD, POINTING_GAIN,
)
from solar_gestures.detection.landmark_extractor import (
    LandmarkExtractor, DEFAULT_EXTENSION_MARGIN,
)

logger = logging.getLogger(__name__)


@dataclass
class GestureClassifierConfig:
    """Gesture classifier configuration."""
    # Thumb-index distance (normalized) below which the hand is pinching
    pinch_threshold: float = PINCH_THRESHOLD
    # Relative margin a fingertip must exceed its PIP distance from the wrist by
    extension_margin: float = DEFAULT_EXTENSION_MARGIN
    # Scale from fingertip offset to manual rotation
    pointing_gain: float = POINTING_GAIN
    # Enable detailed logging
    debug: bool = False

    @classmethod
    def from_dict(cls, config: dict) -> "GestureClassifierConfig":
        """Create config from dictionary."""
        return cls(
            pinch_threshold=config.get("pinch_threshold", PINCH_THRESHOLD),
            extension_margin=config.get("extension_margin", DEFAULT_EXTENSION_MARGIN),
            pointing_gain=config.get("pointing_gain", POINTING_GAIN),
            debug=config.get("debug", False),
        )


class GestureClassifier:
    """
    Pure, total gesture classifier.

    Holds only configuration; every call depends on its argument alone, so
    identical frames always produce identical results. Absent or incomplete
    frames classify as IDLE instead of raising.

    Example:
        >>> classifier = GestureClassifier()
        >>> result = classifier.classify(frame)
        >>> result.label, result.direction
        (<GestureLabel.POINT: 'POINT'>, PointingDirection(x=-0.4, y=0.2))
    """

    def __init__(self, config: Optional[GestureClassifierConfig] = None):
        self.config = config or GestureClassifierConfig()
        self._extractor = LandmarkExtractor(self.config.extension_margin)

    def classify(self, frame) -> GestureResult:
        """
        Classify hand gesture from landmarks.

        Args:
            frame: LandmarkFrame, an (N, 2|3) array-like of points, or None
                   when no hand is present

        Returns:
            GestureResult with label and, for POINT, the pointing direction
        """
        frame = self._as_frame(frame)
        if frame is None or not frame.is_complete:
            return GestureResult.idle()

        fingers = self._extractor.get_finger_states(frame)
        pinch_distance = self._extractor.get_pinch_distance(frame)

        if self.config.debug:
            logger.debug("Finger states: %s, pinch=%.3f", fingers, pinch_distance)

        index, middle = fingers["index"], fingers["middle"]
        ring, pinky = fingers["ring"], fingers["pinky"]

        direction = None
        if index and middle and ring and not pinky:
            label = GestureLabel.THREE
        elif index and middle and not ring and not pinky:
            label = GestureLabel.TWO
        elif index and not middle and not ring and not pinky:
            label = GestureLabel.POINT
            direction = self._extractor.get_pointing_direction(
                frame, self.config.pointing_gain
            )
        elif index and middle and ring and pinky:
            label = GestureLabel.OPEN
        elif pinch_distance < self.config.pinch_threshold:
            label = GestureLabel.PINCH
        else:
            label = GestureLabel.IDLE

        return GestureResult(
            label,
            direction=direction,
            pinch_distance=pinch_distance,
            finger_states=fingers,
        )

    @staticmethod
    def _as_frame(frame) -> Optional[LandmarkFrame]:
        if frame is None or isinstance(frame, LandmarkFrame):
            return frame
        try:
            return LandmarkFrame(frame)
        except (ValueError, TypeError) as e:
            logger.debug("Unreadable landmark input (%s), treating as no hand", e)
            return None
