"""
Interaction store: the single mutable source of truth for zoom level,
gesture label, focus target, and the manual rotation override.

One instance is created at startup and injected into the pipeline and any
renderer. Readers pull an immutable snapshot once per tick.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Tuple

from solar_gestures.core.types import (
    DEFAULT_ZOOM, GestureLabel, FocusTarget, clamp_zoom,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreSnapshot:
    """Read-only view of the store at one instant."""
    zoom_level: float = DEFAULT_ZOOM
    gesture: GestureLabel = GestureLabel.IDLE
    focus_target: FocusTarget = FocusTarget.NONE
    rotation: Tuple[float, float] = (0.0, 0.0)

    def to_dict(self) -> dict:
        """Convert to the dict format expected by Dashboard.render()."""
        return {
            "zoom_level": self.zoom_level,
            "gesture": self.gesture.value,
            "focus_target": self.focus_target.value,
            "rotation": self.rotation,
        }


class InteractionStore:
    """Process-wide interaction state with clamped zoom.

    Every mutator takes the store lock, so each one is a single atomic
    update from a reader's point of view. ``transaction()`` holds the same
    (re-entrant) lock across several mutations, which lets a tick publish
    all of its writes at once when rendering runs on another thread.
    """

    def __init__(self, zoom_level: float = DEFAULT_ZOOM):
        self._lock = threading.RLock()
        self._initial_zoom = clamp_zoom(zoom_level)
        self._zoom_level = self._initial_zoom
        self._gesture = GestureLabel.IDLE
        self._focus_target = FocusTarget.NONE
        self._rotation = (0.0, 0.0)

    # -------------------------------------------------------------------------
    # Zoom
    # -------------------------------------------------------------------------

    def set_zoom(self, level: float):
        with self._lock:
            self._zoom_level = clamp_zoom(level)

    def increase_zoom(self, delta: float):
        """Add ``delta`` to the current zoom, re-clamped."""
        with self._lock:
            self._zoom_level = clamp_zoom(self._zoom_level + delta)

    def decrease_zoom(self, delta: float):
        """Subtract ``delta`` from the current zoom, re-clamped."""
        with self._lock:
            self._zoom_level = clamp_zoom(self._zoom_level - delta)

    # -------------------------------------------------------------------------
    # Overwrites
    # -------------------------------------------------------------------------

    def set_gesture(self, label: GestureLabel):
        with self._lock:
            self._gesture = label

    def set_focus_target(self, target: FocusTarget):
        with self._lock:
            self._focus_target = target

    def set_rotation(self, x: float, y: float):
        with self._lock:
            self._rotation = (float(x), float(y))

    # -------------------------------------------------------------------------
    # Reads (each takes the lock; use snapshot() for several fields at once)
    # -------------------------------------------------------------------------

    @property
    def zoom_level(self) -> float:
        with self._lock:
            return self._zoom_level

    @property
    def gesture(self) -> GestureLabel:
        with self._lock:
            return self._gesture

    @property
    def focus_target(self) -> FocusTarget:
        with self._lock:
            return self._focus_target

    @property
    def rotation(self) -> Tuple[float, float]:
        with self._lock:
            return self._rotation

    def snapshot(self) -> StoreSnapshot:
        """Consistent copy of all fields."""
        with self._lock:
            return StoreSnapshot(
                zoom_level=self._zoom_level,
                gesture=self._gesture,
                focus_target=self._focus_target,
                rotation=self._rotation,
            )

    @contextmanager
    def transaction(self):
        """Hold the store lock across a group of mutations."""
        with self._lock:
            yield self

    def reset(self):
        """Restore startup defaults."""
        with self._lock:
            self._zoom_level = self._initial_zoom
            self._gesture = GestureLabel.IDLE
            self._focus_target = FocusTarget.NONE
            self._rotation = (0.0, 0.0)
        logger.debug("Interaction store reset")
