"""
Camera trajectory controller.

Once per tick, computes a target camera pose from the focus target, zoom
level and elapsed time, then moves the rendered pose toward it by
exponential smoothing:

    actual += (target - actual) * smoothing_rate

Position, look-at point and Saturn's manual rotation are smoothed
independently. Focus changes apply on the next tick; the gradual visual
transition comes only from the smoothing lag.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import numpy as np

from solar_gestures.core.store import StoreSnapshot
from solar_gestures.core.types import FocusTarget, SMOOTHING_RATE
from solar_gestures.control.orbits import BODIES, Orbit, body_position, body_positions

logger = logging.getLogger(__name__)

_DEFAULT_FORWARD = np.array([0.0, 0.0, -1.0])


@dataclass(frozen=True)
class FocusView:
    """Which body a focus target follows and where the camera sits relative to it."""
    body: str
    camera_offset: Tuple[float, float, float]


FOCUS_VIEWS: Dict[FocusTarget, FocusView] = {
    FocusTarget.SATURN: FocusView("saturn", (5.0, 4.0, 9.0)),   # slightly above the rings
    FocusTarget.EARTH: FocusView("earth", (2.0, 1.0, 4.0)),
    FocusTarget.MOON: FocusView("moon", (1.0, 0.5, 2.0)),
}


@dataclass
class TrajectoryConfig:
    """Trajectory controller configuration."""
    smoothing_rate: float = SMOOTHING_RATE
    # Overview camera (focus NONE)
    base_distance: float = 60.0       # z at zoom 0
    far_extra_distance: float = 30.0  # added at MIN_ZOOM
    min_distance: float = 4.0         # z at MAX_ZOOM
    camera_height: float = 20.0
    initial_position: Tuple[float, float, float] = (0.0, 20.0, 60.0)

    @classmethod
    def from_dict(cls, config: dict) -> "TrajectoryConfig":
        """Create config from dictionary."""
        return cls(
            smoothing_rate=config.get("smoothing_rate", SMOOTHING_RATE),
            base_distance=config.get("base_distance", 60.0),
            far_extra_distance=config.get("far_extra_distance", 30.0),
            min_distance=config.get("min_distance", 4.0),
            camera_height=config.get("camera_height", 20.0),
            initial_position=tuple(config.get("initial_position", (0.0, 20.0, 60.0))),
        )


@dataclass
class CameraPose:
    """Camera position and the world point it looks at."""
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    look_at: np.ndarray = field(default_factory=lambda: np.zeros(3))

    @property
    def forward(self) -> np.ndarray:
        """Unit view direction; -Z when position and look-at coincide."""
        d = self.look_at - self.position
        n = float(np.linalg.norm(d))
        if n < 1e-9:
            return _DEFAULT_FORWARD.copy()
        return d / n

    def copy(self) -> "CameraPose":
        return CameraPose(self.position.copy(), self.look_at.copy())


class ControllerOutput:
    """Per-tick outbound data for scene placement."""

    __slots__ = ("elapsed", "focus_target", "camera", "target",
                 "saturn_rotation", "body_positions")

    def __init__(self, elapsed: float, focus_target: FocusTarget,
                 camera: CameraPose, target: CameraPose,
                 saturn_rotation: Tuple[float, float],
                 body_positions: Dict[str, np.ndarray]):
        self.elapsed = elapsed
        self.focus_target = focus_target
        self.camera = camera
        self.target = target
        self.saturn_rotation = saturn_rotation
        self.body_positions = body_positions

    def __repr__(self):
        x, y, z = self.camera.position
        return (f"ControllerOutput({self.focus_target.value}, "
                f"camera=({x:.2f}, {y:.2f}, {z:.2f}))")


class TrajectoryController:
    """
    Owns the rendered camera pose and Saturn's manual rotation across ticks.

    Example:
        >>> controller = TrajectoryController()
        >>> out = controller.update(elapsed, store.snapshot())
        >>> renderer.place_camera(out.camera.position, out.camera.look_at)
    """

    def __init__(self, config: Optional[TrajectoryConfig] = None,
                 bodies: Dict[str, Orbit] = BODIES):
        self.config = config or TrajectoryConfig()
        self._bodies = bodies
        self._camera = CameraPose()
        self._saturn_rotation = (0.0, 0.0)
        self._last_focus = FocusTarget.NONE
        self.reset()

    # -------------------------------------------------------------------------
    # Targets
    # -------------------------------------------------------------------------

    def target_camera_distance(self, zoom_level: float) -> float:
        """Overview camera z for a zoom level.

        Below zoom 0 the camera backs away linearly past the base distance;
        from 0 up it interpolates from the base distance to the minimum.
        """
        cfg = self.config
        if zoom_level < 0:
            return cfg.base_distance + (abs(zoom_level) / 0.5) * cfg.far_extra_distance
        return cfg.base_distance + (cfg.min_distance - cfg.base_distance) * zoom_level

    def compute_target(self, focus_target: FocusTarget, elapsed: float,
                       zoom_level: float) -> CameraPose:
        """Target camera pose for one tick."""
        view = FOCUS_VIEWS.get(focus_target)
        if view is None:
            position = np.array([
                0.0, self.config.camera_height, self.target_camera_distance(zoom_level)
            ])
            return CameraPose(position, np.zeros(3))

        body = body_position(view.body, elapsed, self._bodies)
        return CameraPose(body + np.asarray(view.camera_offset), body)

    # -------------------------------------------------------------------------
    # Per-tick update
    # -------------------------------------------------------------------------

    def update(self, elapsed: float, snapshot: StoreSnapshot) -> ControllerOutput:
        """Advance the rendered pose one tick toward this tick's target."""
        rate = self.config.smoothing_rate
        focus = snapshot.focus_target

        if focus != self._last_focus:
            logger.debug("Trajectory focus: %s -> %s",
                         self._last_focus.value, focus.value)
            self._last_focus = focus

        target = self.compute_target(focus, elapsed, snapshot.zoom_level)

        previous_forward = self._camera.forward
        self._camera.position = self._camera.position + (
            target.position - self._camera.position) * rate

        if focus == FocusTarget.NONE:
            # Start from where the camera currently faces so leaving a
            # focused view does not snap the orientation.
            current_look = self._camera.position + previous_forward
        else:
            current_look = self._camera.look_at
        self._camera.look_at = current_look + (target.look_at - current_look) * rate

        if focus == FocusTarget.SATURN:
            rx, ry = self._saturn_rotation
            tx, ty = snapshot.rotation
            self._saturn_rotation = (rx + (tx - rx) * rate, ry + (ty - ry) * rate)

        return ControllerOutput(
            elapsed=elapsed,
            focus_target=focus,
            camera=self._camera.copy(),
            target=target,
            saturn_rotation=self._saturn_rotation,
            body_positions=body_positions(elapsed, self._bodies),
        )

    @property
    def camera(self) -> CameraPose:
        return self._camera.copy()

    @property
    def saturn_rotation(self) -> Tuple[float, float]:
        return self._saturn_rotation

    def reset(self):
        """Return to the startup overview pose."""
        self._camera = CameraPose(
            np.asarray(self.config.initial_position, dtype=np.float64),
            np.zeros(3),
        )
        self._saturn_rotation = (0.0, 0.0)
        self._last_focus = FocusTarget.NONE
