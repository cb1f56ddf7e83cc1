"""Core types, interaction store, event bus and tick pipeline."""
from .types import (
    GestureLabel, FocusTarget, GestureResult, LandmarkFrame, Landmark,
    PointingDirection, MAX_ZOOM, MIN_ZOOM, DEFAULT_ZOOM,
)
from .store import InteractionStore, StoreSnapshot
from .events import EventBus, Events

__all__ = [
    "GestureLabel",
    "FocusTarget",
    "GestureResult",
    "LandmarkFrame",
    "Landmark",
    "PointingDirection",
    "MAX_ZOOM",
    "MIN_ZOOM",
    "DEFAULT_ZOOM",
    "InteractionStore",
    "StoreSnapshot",
    "EventBus",
    "Events",
]
