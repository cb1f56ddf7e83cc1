"""
Lightweight event bus for decoupled notifications.

The tick pipeline publishes transitions (gesture changed, focus changed,
hand lost, ...) so that logging and UI code can react without the core
depending on them. State itself is never pushed through the bus; consumers
read the interaction store once per tick.

Usage:
    bus = EventBus()
    bus.subscribe(Events.GESTURE_CHANGED, my_handler)
    bus.emit(Events.GESTURE_CHANGED, previous="IDLE", current="POINT")
"""

import time
import logging
import threading
from collections import defaultdict
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class EventBus:
    """Thread-safe publish/subscribe event bus.

    Synchronous dispatch with priority ordering. One bus is created per
    application and handed to the components that publish on it.
    """

    def __init__(self, max_history: int = 100):
        self._listeners = defaultdict(list)  # event_name -> [(priority, callback)]
        self._lock = threading.Lock()
        self._event_history = []
        self._max_history = max_history
        self._enabled = True

    def subscribe(self, event_name: str, callback: Callable, priority: int = 0):
        """Register a listener for an event.

        Args:
            event_name: Event to listen for
            callback: Function to call. Receives **kwargs from emit().
            priority: Higher priority callbacks run first (default 0)
        """
        with self._lock:
            self._listeners[event_name].append((priority, callback))
            self._listeners[event_name].sort(key=lambda x: -x[0])
        logger.debug("Subscribed to '%s': %s (priority=%d)",
                     event_name, getattr(callback, "__name__", repr(callback)), priority)

    def unsubscribe(self, event_name: str, callback: Callable):
        """Remove a listener for an event."""
        with self._lock:
            self._listeners[event_name] = [
                (p, cb) for p, cb in self._listeners[event_name] if cb is not callback
            ]

    def emit(self, event_name: str, **kwargs):
        """Emit an event to all registered listeners.

        Handler errors are logged and do not interrupt the tick.
        """
        if not self._enabled:
            return

        with self._lock:
            listeners = list(self._listeners.get(event_name, []))
            self._event_history.append({
                "event": event_name,
                "time": time.time(),
                "data": dict(kwargs),
            })
            if len(self._event_history) > self._max_history:
                self._event_history = self._event_history[-self._max_history:]

        for priority, callback in listeners:
            try:
                callback(**kwargs)
            except Exception as e:
                logger.error("Event handler error [%s -> %s]: %s",
                             event_name, getattr(callback, "__name__", callback), e)

    def set_enabled(self, enabled: bool):
        self._enabled = enabled

    def clear(self, event_name: Optional[str] = None):
        """Remove all listeners, optionally for a specific event."""
        with self._lock:
            if event_name:
                self._listeners.pop(event_name, None)
            else:
                self._listeners.clear()

    @property
    def listener_count(self) -> int:
        """Total number of registered listeners."""
        with self._lock:
            return sum(len(cbs) for cbs in self._listeners.values())

    def get_history(self, last_n: int = 10) -> list:
        """Get recent event history."""
        with self._lock:
            return self._event_history[-last_n:]

    def events_named(self, event_name: str) -> list:
        """History entries for a single event name, oldest first."""
        with self._lock:
            return [e for e in self._event_history if e["event"] == event_name]


# =============================================================================
# Standard Event Names (constants to avoid typos)
# =============================================================================

class Events:
    """Standard event names used throughout the system."""

    # Pipeline events
    HAND_DETECTED = "hand_detected"
    HAND_LOST = "hand_lost"
    GESTURE_CHANGED = "gesture_changed"
    FOCUS_CHANGED = "focus_changed"
    ZOOM_LIMIT_REACHED = "zoom_limit_reached"

    # System events
    SOURCE_FAILED = "source_failed"

    # Lifecycle
    SYSTEM_STARTED = "system_started"
    SYSTEM_SHUTDOWN = "system_shutdown"
