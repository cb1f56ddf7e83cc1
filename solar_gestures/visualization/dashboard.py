"""
Preview overlay: hand landmarks, gesture caption, interaction status,
zoom bar and tick rate drawn on top of the camera image.
"""

import logging
from typing import Optional

import cv2
import numpy as np

from solar_gestures.core.store import StoreSnapshot
from solar_gestures.core.types import (
    FocusTarget, GestureLabel, LandmarkFrame, MAX_ZOOM, MIN_ZOOM,
)
from solar_gestures.detection.landmark_extractor import INDEX_TIP, THUMB_TIP, HAND_CONNECTIONS

logger = logging.getLogger(__name__)

SCATTER_ZOOM = 0.85

GESTURE_CAPTIONS = {
    GestureLabel.POINT: "POINT (SATURN)",
    GestureLabel.TWO: "PEACE (EARTH)",
    GestureLabel.THREE: "THREE (MOON)",
    GestureLabel.OPEN: "OPEN (ZOOM IN)",
    GestureLabel.PINCH: "PINCH (ZOOM OUT)",
}

GESTURE_STATUS = {
    GestureLabel.POINT: "Controlling Saturn",
    GestureLabel.TWO: "Visiting Earth",
    GestureLabel.THREE: "Visiting Moon",
    GestureLabel.OPEN: "Zooming In...",
    GestureLabel.PINCH: "Zooming Out...",
}

# BGR
GESTURE_COLORS = {
    GestureLabel.THREE: (204, 204, 204),
    GestureLabel.TWO: (231, 208, 79),
    GestureLabel.POINT: (255, 255, 0),
    GestureLabel.OPEN: (0, 255, 255),
    GestureLabel.PINCH: (0, 0, 255),
    GestureLabel.IDLE: (255, 255, 255),
}


def gesture_caption(label: GestureLabel) -> str:
    """Short caption naming the gesture and what it drives."""
    return GESTURE_CAPTIONS.get(label, label.value)


def status_text(snapshot: StoreSnapshot) -> str:
    """Human-readable interaction status for the current store state."""
    text = GESTURE_STATUS.get(snapshot.gesture, "Ready")
    if snapshot.gesture == GestureLabel.IDLE and snapshot.focus_target != FocusTarget.NONE:
        text = f"Locked on {snapshot.focus_target.value.title()}"
    if snapshot.zoom_level > SCATTER_ZOOM and snapshot.focus_target == FocusTarget.NONE:
        text = "SCATTERING"
    return text


def zoom_fraction(zoom_level: float) -> float:
    """Zoom level normalised over [MIN_ZOOM, MAX_ZOOM] to [0, 1]."""
    fraction = (zoom_level - MIN_ZOOM) / (MAX_ZOOM - MIN_ZOOM)
    return min(1.0, max(0.0, fraction))


class Dashboard:
    """Renders the preview overlay for the gesture controller."""

    def __init__(self, config: Optional[dict] = None):
        config = config or {}
        self._show_landmarks = config.get("show_landmarks", True)
        self._show_fps = config.get("show_fps", True)
        self._show_zoom_bar = config.get("show_zoom_bar", True)
        self._mirror = config.get("mirror", False)

        colors = config.get("colors", {})
        self._color_text = tuple(colors.get("text", [255, 255, 255]))
        self._color_landmark = tuple(colors.get("landmark", [0, 255, 0]))
        self._color_bar = tuple(colors.get("zoom_bar", [0, 200, 255]))
        self._color_warn = tuple(colors.get("warning", [0, 0, 255]))

        dash_cfg = config.get("dashboard", {})
        self._dash_opacity = dash_cfg.get("opacity", 0.6)
        self._dash_height = dash_cfg.get("height", 70)

    def render(self, frame: np.ndarray, state: dict) -> np.ndarray:
        """Render the overlay (on a mirrored copy when ``mirror`` is set).

        Args:
            frame: BGR image to draw on
            state: dict with current system state:
                - zoom_level, gesture, focus_target, rotation (store snapshot)
                - frame: LandmarkFrame or None
                - hand_detected: bool
                - fps: float

        Returns:
            Frame with overlay
        """
        if self._mirror:
            frame = cv2.flip(frame, 1)
        h, w = frame.shape[:2]
        snapshot = StoreSnapshot(
            zoom_level=state.get("zoom_level", 0.0),
            gesture=GestureLabel.from_string(state.get("gesture", "IDLE")),
            focus_target=FocusTarget(state.get("focus_target", "NONE")),
            rotation=tuple(state.get("rotation", (0.0, 0.0))),
        )

        landmarks = state.get("frame")
        if (self._show_landmarks and isinstance(landmarks, LandmarkFrame)
                and landmarks.is_complete):
            self._draw_hand(frame, landmarks, snapshot.gesture)

        self._draw_status_bar(frame, w, snapshot, state)

        if self._show_zoom_bar:
            self._draw_zoom_bar(frame, h, snapshot.zoom_level)

        self._draw_caption(frame, h, snapshot.gesture)

        if not state.get("hand_detected", True):
            self._draw_no_hand_warning(frame, w, h)

        return frame

    def _draw_hand(self, frame, landmarks: LandmarkFrame, gesture: GestureLabel):
        """Draw landmark dots, skeleton and the thumb-index line."""
        h, w = frame.shape[:2]
        xy = landmarks.points[:, :2].copy()
        if self._mirror:
            xy[:, 0] = 1.0 - xy[:, 0]
        pixels = (xy * np.array([w, h])).astype(int)
        pts = [tuple(p) for p in pixels.tolist()]

        for a, b in HAND_CONNECTIONS:
            cv2.line(frame, pts[a], pts[b], (90, 90, 90), 1)
        for p in pts:
            cv2.circle(frame, p, 3, self._color_landmark, -1)

        color = GESTURE_COLORS.get(gesture, self._color_text)
        cv2.line(frame, pts[THUMB_TIP], pts[INDEX_TIP], color, 2)

    def _draw_status_bar(self, frame, w, snapshot: StoreSnapshot, state: dict):
        """Draw top bar with status text and FPS."""
        overlay = frame.copy()
        cv2.rectangle(overlay, (0, 0), (w, self._dash_height), (20, 20, 20), -1)
        cv2.addWeighted(overlay, self._dash_opacity, frame, 1 - self._dash_opacity, 0, frame)

        text = status_text(snapshot)
        color = self._color_warn if text == "SCATTERING" else self._color_text
        cv2.putText(
            frame, text,
            (15, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7, color, 2,
        )

        if self._show_fps:
            fps = state.get("fps", 0.0)
            cv2.putText(
                frame, f"FPS: {fps:.1f}",
                (15, 58), cv2.FONT_HERSHEY_SIMPLEX, 0.5, self._color_text, 1,
            )

    def _draw_zoom_bar(self, frame, h, zoom_level: float):
        """Draw horizontal zoom bar with a tick at zoom 0."""
        bar_x, bar_w, bar_h = 15, 160, 10
        bar_y = h - 60

        cv2.rectangle(frame, (bar_x, bar_y), (bar_x + bar_w, bar_y + bar_h), (60, 60, 60), -1)
        fill_w = int(zoom_fraction(zoom_level) * bar_w)
        cv2.rectangle(frame, (bar_x, bar_y), (bar_x + fill_w, bar_y + bar_h), self._color_bar, -1)

        zero_x = bar_x + int(zoom_fraction(0.0) * bar_w)
        cv2.line(frame, (zero_x, bar_y - 2), (zero_x, bar_y + bar_h + 2), (160, 160, 160), 1)
        cv2.rectangle(frame, (bar_x, bar_y), (bar_x + bar_w, bar_y + bar_h), (200, 200, 200), 1)

        cv2.putText(
            frame, f"{round(zoom_level * 100)}%",
            (bar_x + bar_w + 10, bar_y + bar_h), cv2.FONT_HERSHEY_SIMPLEX, 0.5, self._color_bar, 1,
        )

    def _draw_caption(self, frame, h, gesture: GestureLabel):
        cv2.putText(
            frame, gesture_caption(gesture),
            (15, h - 20), cv2.FONT_HERSHEY_SIMPLEX, 0.6,
            GESTURE_COLORS.get(gesture, self._color_text), 2,
        )

    def _draw_no_hand_warning(self, frame, w, h):
        """Draw 'show hand' hint."""
        text = "Show hand to control"
        text_size = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, 0.6, 2)[0]
        x = (w - text_size[0]) // 2
        cv2.putText(
            frame, text, (x, h // 2),
            cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 150, 255), 2,
        )
