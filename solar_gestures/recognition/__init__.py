"""Rule-based static gesture classification."""
from .gesture_classifier import GestureClassifier, GestureClassifierConfig

__all__ = ["GestureClassifier", "GestureClassifierConfig"]
