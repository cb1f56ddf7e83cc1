"""
Structured logging with gesture transition logging.
"""

import os
import logging
import logging.handlers
import time
from functools import wraps


def setup_logging(level="INFO", log_file=None, max_size_mb=10, backup_count=3):
    """Configure structured logging for the application."""
    # Compact console format
    console_format = "%(asctime)s  %(levelname)-5s  %(message)s"
    # Verbose format for log file
    file_format = "%(asctime)s [%(levelname)-7s] %(name)-25s | %(message)s"
    date_format = "%H:%M:%S"

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    root_logger.handlers.clear()

    console = logging.StreamHandler()
    console.setLevel(root_logger.level)
    console.setFormatter(logging.Formatter(console_format, datefmt=date_format))
    root_logger.addHandler(console)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(file_format, datefmt=date_format))
        root_logger.addHandler(file_handler)

    return root_logger


class GestureLogger:
    """Records gesture and focus transitions published on the event bus."""

    def __init__(self, max_history: int = 500):
        self.logger = logging.getLogger("gesture_events")
        self._history = []
        self._max_history = max_history
        self._total = 0

    def _record(self, entry: dict):
        self._total += 1
        self._history.append(entry)
        if len(self._history) > self._max_history:
            self._history = self._history[-self._max_history:]

    def log_gesture(self, previous=None, current=None, zoom_level=None, **_):
        """Handler for Events.GESTURE_CHANGED."""
        self._record({
            "timestamp": time.time(),
            "kind": "gesture",
            "previous": previous,
            "current": current,
            "zoom_level": zoom_level,
        })
        self.logger.info(
            "Gesture: %-6s -> %-6s | Zoom: %s",
            previous, current,
            f"{zoom_level:+.3f}" if zoom_level is not None else "N/A",
        )

    def log_focus(self, previous=None, current=None, **_):
        """Handler for Events.FOCUS_CHANGED."""
        self._record({
            "timestamp": time.time(),
            "kind": "focus",
            "previous": previous,
            "current": current,
        })
        self.logger.info("Focus:   %-6s -> %s", previous, current)

    def get_history(self, last_n=None):
        """Get recent transition history."""
        if last_n:
            return self._history[-last_n:]
        return self._history.copy()

    @property
    def total_transitions(self):
        return self._total


def log_timing(func):
    """Decorator to log function execution time."""
    logger = logging.getLogger(func.__module__)

    @wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed = (time.perf_counter() - start) * 1000
        logger.debug("%s took %.2fms", func.__name__, elapsed)
        return result

    return wrapper
