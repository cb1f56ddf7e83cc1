"""MediaPipe hand landmark detection and the per-tick landmark source.

Only the landmark geometry is exported here; import ``hand_detector`` and
``landmark_source`` directly so the classifier does not pull in MediaPipe
and OpenCV.
"""
from .landmark_extractor import LandmarkExtractor

__all__ = ["LandmarkExtractor"]
