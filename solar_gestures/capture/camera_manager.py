"""
Threaded camera capture that always holds the newest frame, so the tick
loop never blocks on the device.
"""

import time
import threading
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import cv2
import numpy as np

logger = logging.getLogger(__name__)


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    device_id: int = 0
    width: int = 320
    height: int = 240
    fps: int = 30
    backend: str = "auto"
    buffer_size: int = 1  # Minimal buffering for low latency
    flip_horizontal: bool = False  # Mirrors landmarks too; mirror the preview instead
    warmup_frames: int = 5
    threaded: bool = True

    @classmethod
    def from_dict(cls, config: dict) -> "CameraConfig":
        """Create config from dictionary (YAML parsed)."""
        return cls(
            device_id=config.get("device_id", 0),
            width=config.get("width", 320),
            height=config.get("height", 240),
            fps=config.get("fps", 30),
            backend=config.get("backend", "auto"),
            buffer_size=config.get("buffer_size", 1),
            flip_horizontal=config.get("flip_horizontal", False),
            warmup_frames=config.get("warmup_frames", 5),
            threaded=config.get("threaded", True),
        )


class CameraManager:
    """Camera capture with optional background acquisition thread."""

    def __init__(self, config: Optional[CameraConfig] = None):
        self.config = config or CameraConfig()

        self._cap = None
        self._frame = None
        self._frame_id = 0
        self._lock = threading.Lock()
        self._running = False
        self._thread = None

    def open(self) -> bool:
        """Open the camera device. Returns False if it is unavailable."""
        backend_map = {
            "v4l2": cv2.CAP_V4L2,
            "gstreamer": cv2.CAP_GSTREAMER,
            "auto": cv2.CAP_ANY,
        }
        backend = backend_map.get(self.config.backend, cv2.CAP_ANY)

        self._cap = cv2.VideoCapture(self.config.device_id, backend)
        if not self._cap.isOpened():
            logger.error("Failed to open camera %d with backend %s",
                         self.config.device_id, self.config.backend)
            self._cap.release()
            self._cap = None
            return False

        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.width)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.height)
        self._cap.set(cv2.CAP_PROP_FPS, self.config.fps)
        self._cap.set(cv2.CAP_PROP_BUFFERSIZE, self.config.buffer_size)

        actual_w = int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        actual_h = int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        actual_fps = self._cap.get(cv2.CAP_PROP_FPS)
        logger.info(
            "Camera opened: %dx%d @ %.0f FPS (requested %dx%d @ %d)",
            actual_w, actual_h, actual_fps,
            self.config.width, self.config.height, self.config.fps,
        )

        # Let auto-exposure settle
        for _ in range(self.config.warmup_frames):
            self._cap.read()

        if self.config.threaded:
            self.start_async()
        return True

    def start_async(self):
        """Start threaded frame capture."""
        if self._running or self._cap is None:
            return
        self._running = True
        self._thread = threading.Thread(target=self._capture_loop, daemon=True)
        self._thread.start()
        logger.info("Async capture started")

    def _capture_loop(self):
        """Background capture thread - always holds the latest frame."""
        while self._running:
            ret, frame = self._cap.read()
            if ret and frame is not None:
                if self.config.flip_horizontal:
                    frame = cv2.flip(frame, 1)
                with self._lock:
                    self._frame = frame
                    self._frame_id += 1
            else:
                time.sleep(0.001)

    def read(self) -> Tuple[Optional[int], Optional[np.ndarray]]:
        """Get the latest frame without blocking.

        Returns:
            tuple: (frame_id, BGR image) or (None, None) if no frame yet
        """
        if not self.config.threaded:
            return self.read_sync()
        with self._lock:
            if self._frame is not None:
                return self._frame_id, self._frame.copy()
            return None, None

    def read_sync(self) -> Tuple[Optional[int], Optional[np.ndarray]]:
        """Synchronous frame read (for non-threaded mode)."""
        if self._cap is None:
            return None, None
        ret, frame = self._cap.read()
        if ret and frame is not None:
            if self.config.flip_horizontal:
                frame = cv2.flip(frame, 1)
            self._frame_id += 1
            return self._frame_id, frame
        return None, None

    @property
    def resolution(self) -> tuple:
        return (self.config.width, self.config.height)

    @property
    def is_open(self) -> bool:
        return self._cap is not None and self._cap.isOpened()

    def stop(self):
        """Stop async capture and release camera. Safe to call repeatedly."""
        self._running = False
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=2.0)
        self._thread = None
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.info("Camera stopped")

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, *args):
        self.stop()
