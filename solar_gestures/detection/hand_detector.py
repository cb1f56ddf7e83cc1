"""
Hand Detection Module - MediaPipe Tasks API
============================================

Wraps the MediaPipe HandLandmarker in VIDEO running mode and converts its
output into LandmarkFrame objects. Only the first hand is reported.
"""

import logging
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np
import mediapipe as mp
from mediapipe.tasks import python
from mediapipe.tasks.python import vision

from solar_gestures.core.types import LandmarkFrame

logger = logging.getLogger(__name__)

# Model download URL
HAND_LANDMARKER_MODEL_URL = "https://storage.googleapis.com/mediapipe-models/hand_landmarker/hand_landmarker/float16/1/hand_landmarker.task"
DEFAULT_MODEL_PATH = Path(__file__).parent.parent.parent / "models" / "hand_landmarker.task"


@dataclass
class HandDetectorConfig:
    """Configuration for hand detector."""
    model_path: str = ""
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    min_presence_confidence: float = 0.5
    download_model: bool = True

    @classmethod
    def from_dict(cls, d: dict) -> "HandDetectorConfig":
        """Create config from dictionary."""
        return cls(
            model_path=d.get("model_path", ""),
            min_detection_confidence=d.get("min_detection_confidence", 0.5),
            min_tracking_confidence=d.get("min_tracking_confidence", 0.5),
            min_presence_confidence=d.get("min_presence_confidence", 0.5),
            download_model=d.get("download_model", True),
        )


def download_model(url: str, save_path: Path) -> bool:
    """Download the hand landmarker model if not present."""
    if save_path.exists():
        logger.info("Model already exists at %s", save_path)
        return True

    try:
        save_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Downloading hand landmarker model to %s...", save_path)
        urllib.request.urlretrieve(url, save_path)
        logger.info("Model download complete!")
        return True
    except OSError as e:
        logger.error("Failed to download model: %s", e)
        return False


class HandDetector:
    """
    Single-hand landmark detector using MediaPipe HandLandmarker.

    Example:
        >>> detector = HandDetector(HandDetectorConfig())
        >>> detector.start()
        >>> frame = detector.detect(rgb_image, timestamp_ms)  # RGB format!
        >>> detector.stop()
    """

    def __init__(self, config: Optional[HandDetectorConfig] = None):
        self.config = config or HandDetectorConfig()
        self._landmarker: Optional[vision.HandLandmarker] = None
        self._last_timestamp_ms = -1

    def start(self) -> bool:
        """Initialize the hand landmarker. Returns False on failure."""
        model_path = Path(self.config.model_path or DEFAULT_MODEL_PATH)

        if not model_path.exists():
            if not self.config.download_model:
                logger.error("Hand landmarker model not found at %s", model_path)
                return False
            if not download_model(HAND_LANDMARKER_MODEL_URL, model_path):
                logger.error("Could not download hand landmarker model")
                return False

        try:
            options = vision.HandLandmarkerOptions(
                base_options=python.BaseOptions(model_asset_path=str(model_path)),
                running_mode=vision.RunningMode.VIDEO,
                num_hands=1,
                min_hand_detection_confidence=self.config.min_detection_confidence,
                min_hand_presence_confidence=self.config.min_presence_confidence,
                min_tracking_confidence=self.config.min_tracking_confidence,
            )
            self._landmarker = vision.HandLandmarker.create_from_options(options)
        except (RuntimeError, ValueError) as e:
            logger.error("Failed to initialize HandLandmarker: %s", e)
            self._landmarker = None
            return False

        logger.info("HandLandmarker initialized with model: %s", model_path)
        return True

    def stop(self) -> None:
        """Release resources. Safe to call repeatedly."""
        if self._landmarker is not None:
            self._landmarker.close()
            self._landmarker = None
            logger.info("HandLandmarker stopped")

    @property
    def is_ready(self) -> bool:
        return self._landmarker is not None

    def detect(self, rgb_image: np.ndarray, timestamp_ms: int) -> Optional[LandmarkFrame]:
        """
        Detect one hand in an RGB image.

        Args:
            rgb_image: RGB image as numpy array (H, W, 3)
            timestamp_ms: Monotonic timestamp in milliseconds

        Returns:
            LandmarkFrame for the first detected hand, or None
        """
        if self._landmarker is None:
            return None

        # VIDEO mode rejects non-increasing timestamps
        if timestamp_ms <= self._last_timestamp_ms:
            timestamp_ms = self._last_timestamp_ms + 1
        self._last_timestamp_ms = timestamp_ms

        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=np.ascontiguousarray(rgb_image))
        result = self._landmarker.detect_for_video(mp_image, timestamp_ms)

        if not result.hand_landmarks:
            return None

        handedness = "unknown"
        if result.handedness and result.handedness[0]:
            handedness = result.handedness[0][0].category_name

        return LandmarkFrame.from_landmarks(
            result.hand_landmarks[0],
            handedness=handedness,
            timestamp_ms=timestamp_ms,
        )

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False
