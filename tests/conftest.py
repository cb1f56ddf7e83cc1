"""
Shared fixtures: synthetic hands, fake landmark sources and clocks.
"""

import numpy as np
import pytest

from solar_gestures.core.types import LandmarkFrame

# Finger column x positions: index, middle, ring, pinky
FINGER_X = {"index": 0.44, "middle": 0.48, "ring": 0.52, "pinky": 0.56}
WRIST_XY = (0.5, 0.8)
EXTENDED_TIP_Y = 0.4
CURLED_TIP_Y = 0.6


def create_mock_hand(extended=(), pinch=False, angle_deg=0.0,
                     handedness="Right") -> LandmarkFrame:
    """
    Build a 21-point hand in normalized image coordinates.

    Args:
        extended: names of the extended fingers (index/middle/ring/pinky)
        pinch: place the thumb tip on top of the index tip
        angle_deg: rotate the whole hand about the wrist

    Returns:
        LandmarkFrame
    """
    pts = np.zeros((21, 3))
    pts[0, :2] = WRIST_XY

    # Thumb CMC, MCP, IP, TIP
    pts[1, :2] = (0.45, 0.75)
    pts[2, :2] = (0.41, 0.71)
    pts[3, :2] = (0.38, 0.68)
    pts[4, :2] = (0.35, 0.65)

    for base, finger in zip((5, 9, 13, 17), ("index", "middle", "ring", "pinky")):
        x = FINGER_X[finger]
        tip_y = EXTENDED_TIP_Y if finger in extended else CURLED_TIP_Y
        pts[base, :2] = (x, 0.6)        # MCP
        pts[base + 1, :2] = (x, 0.5)    # PIP
        pts[base + 2, :2] = (x, 0.45)   # DIP
        pts[base + 3, :2] = (x, tip_y)  # TIP

    if pinch:
        pts[4, :2] = pts[8, :2] + (0.01, 0.01)

    if angle_deg:
        theta = np.radians(angle_deg)
        rot = np.array([[np.cos(theta), -np.sin(theta)],
                        [np.sin(theta), np.cos(theta)]])
        wrist = np.array(WRIST_XY)
        pts[:, :2] = (pts[:, :2] - wrist) @ rot.T + wrist

    return LandmarkFrame(pts, handedness=handedness)


@pytest.fixture
def make_hand():
    return create_mock_hand


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start=100.0, step=1 / 60):
        self.now = start
        self.step = step

    def __call__(self):
        value = self.now
        self.now += self.step
        return value


class FakeSource:
    """Scripted landmark source: yields (ret, frame) pairs in order, then
    repeats the last one."""

    def __init__(self, script=None):
        self._script = list(script or [(True, None)])
        self._index = 0
        self.is_ready = True
        self.close_calls = 0
        self.read_calls = 0
        self.last_image = None

    def open(self, strict=False):
        return self.is_ready

    def read(self):
        self.read_calls += 1
        item = self._script[min(self._index, len(self._script) - 1)]
        self._index += 1
        if isinstance(item, Exception):
            raise item
        return item

    def close(self):
        self.close_calls += 1
        self.is_ready = False


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def fake_source_factory():
    return FakeSource
