"""OpenCV preview overlay."""
from .dashboard import Dashboard, gesture_caption, status_text, zoom_fraction

__all__ = ["Dashboard", "gesture_caption", "status_text", "zoom_fraction"]
