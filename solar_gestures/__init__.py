"""
Solar Gestures
==============

Hand gesture control for an interactive solar-system viewer.
Turns per-frame hand landmarks into discrete gestures and turns those
gestures into a smoothed camera trajectory and zoom level.

Modules:
    - core: Shared types, interaction store, event bus, tick pipeline
    - capture: Camera frame acquisition
    - detection: MediaPipe hand landmarks and landmark geometry
    - recognition: Rule-based gesture classification
    - control: Gesture actions and camera trajectory controller
    - utils: Configuration, logging, performance monitoring
    - visualization: Camera preview dashboard
"""

__version__ = "1.0.0"
__author__ = "HCI Team"
