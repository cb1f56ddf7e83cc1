"""
Gesture actions: turns a classification result into interaction store
mutations.

    THREE  focus MOON
    TWO    focus EARTH
    POINT  focus SATURN, rotation = pointing direction
    OPEN   zoom += step
    PINCH  focus NONE, zoom -= step
    IDLE   label only

Kept separate from the classifier so that classification stays pure.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from solar_gestures.core.store import InteractionStore
from solar_gestures.core.types import (
    GestureLabel, GestureResult, GESTURE_FOCUS_MAP, ZOOM_STEP,
)

logger = logging.getLogger(__name__)


@dataclass
class GestureActionConfig:
    """Per-tick zoom increment for OPEN / PINCH."""
    zoom_step: float = ZOOM_STEP

    @classmethod
    def from_dict(cls, config: dict) -> "GestureActionConfig":
        return cls(zoom_step=config.get("zoom_step", ZOOM_STEP))


def apply_gesture(store: InteractionStore, result: GestureResult,
                  config: Optional[GestureActionConfig] = None):
    """Apply one tick's gesture to the store.

    The label is always written; the remaining writes depend on the label.
    Callers wanting all writes to land together wrap this in
    ``store.transaction()``.
    """
    config = config or GestureActionConfig()
    label = result.label

    store.set_gesture(label)

    focus = GESTURE_FOCUS_MAP.get(label)
    if focus is not None:
        store.set_focus_target(focus)

    if label == GestureLabel.POINT and result.direction is not None:
        store.set_rotation(result.direction.x, result.direction.y)
    elif label == GestureLabel.OPEN:
        store.increase_zoom(config.zoom_step)
    elif label == GestureLabel.PINCH:
        store.decrease_zoom(config.zoom_step)

    logger.debug("Applied %s (zoom=%.3f, focus=%s)",
                 label.value, store.zoom_level, store.focus_target.value)
