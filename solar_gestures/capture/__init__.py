"""Camera frame acquisition."""
from .camera_manager import CameraManager, CameraConfig

__all__ = ["CameraManager", "CameraConfig"]
