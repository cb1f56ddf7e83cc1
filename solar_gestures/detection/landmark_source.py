"""
Landmark source: camera capture + hand detection behind one small interface.

    source.open()              acquire camera and model (once, outside the tick)
    ret, frame = source.read() per tick; ret False = no new camera frame,
                               frame None = no hand in view
    source.close()             idempotent release

An acquisition failure is reported once; afterwards the source behaves as
a permanent "no hand".
"""

import time
import logging
from typing import Optional, Tuple

import cv2
import numpy as np

from solar_gestures.capture.camera_manager import CameraManager, CameraConfig
from solar_gestures.core.types import LandmarkFrame
from solar_gestures.detection.hand_detector import HandDetector, HandDetectorConfig
from solar_gestures.utils.logger import log_timing

logger = logging.getLogger(__name__)


class LandmarkSourceError(RuntimeError):
    """Camera or landmark model could not be acquired."""


class LandmarkSource:
    """Yields at most one LandmarkFrame per tick from the live camera."""

    def __init__(self, camera_config: Optional[CameraConfig] = None,
                 detector_config: Optional[HandDetectorConfig] = None,
                 max_stale_reads: int = 30):
        self._camera = CameraManager(camera_config)
        self._detector = HandDetector(detector_config)
        self._last_frame_id = None
        self._last_image: Optional[np.ndarray] = None
        self._max_stale_reads = max_stale_reads
        self._stale_reads = 0
        self._opened = False
        self._failed = False
        self._start_time = time.monotonic()

    @log_timing
    def open(self, strict: bool = False) -> bool:
        """Acquire the camera and the landmark model.

        Args:
            strict: raise LandmarkSourceError instead of returning False

        Returns:
            True when the source is ready to produce frames
        """
        if self._opened:
            return True

        if not self._camera.open():
            return self._fail("camera unavailable", strict)
        if not self._detector.start():
            self._camera.stop()
            return self._fail("hand landmark model unavailable", strict)

        self._opened = True
        self._failed = False
        self._start_time = time.monotonic()
        self._stale_reads = 0
        logger.info("Landmark source ready")
        return True

    def _fail(self, reason: str, strict: bool) -> bool:
        self._failed = True
        logger.error("Landmark source failed: %s", reason)
        if strict:
            raise LandmarkSourceError(reason)
        return False

    def read(self) -> Tuple[bool, Optional[LandmarkFrame]]:
        """Return (ret, frame) for this tick without blocking.

        ret is False when no new camera frame is available since the last
        call. Before open() succeeds, or once the camera has produced nothing
        new for more than ``max_stale_reads`` calls, it reports (True, None).
        """
        if not self._opened:
            return True, None

        frame_id, image = self._camera.read()
        if image is None or frame_id == self._last_frame_id:
            self._stale_reads += 1
            if self._stale_reads <= self._max_stale_reads:
                return False, None
            if self._stale_reads == self._max_stale_reads + 1:
                logger.warning("No new camera frame for %d reads, reporting no hand",
                               self._max_stale_reads)
            return True, None
        self._stale_reads = 0
        self._last_frame_id = frame_id
        self._last_image = image

        rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
        timestamp_ms = int((time.monotonic() - self._start_time) * 1000)
        return True, self._detector.detect(rgb, timestamp_ms)

    @property
    def last_image(self) -> Optional[np.ndarray]:
        """Most recent BGR camera image, for the preview window."""
        return self._last_image

    @property
    def is_ready(self) -> bool:
        return self._opened

    @property
    def failed(self) -> bool:
        return self._failed

    @property
    def resolution(self) -> tuple:
        return self._camera.resolution

    def close(self):
        """Release camera and model. Safe to call repeatedly."""
        if not self._opened and not self._camera.is_open:
            return
        self._opened = False
        self._detector.stop()
        self._camera.stop()
        logger.info("Landmark source closed")

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, *args):
        self.close()
