#!/usr/bin/env python3
"""
Solar Gestures - hand-gesture camera control for a solar-system viewer.
Application entry point wiring config, landmark source and pipeline.

Usage:
    python main.py                       # Camera preview with overlay
    python main.py --mode headless       # No window, status in the log
    python main.py --mode benchmark      # Fixed number of ticks, then report
    python main.py --camera 1 --debug    # Other device, verbose logging
"""

import time
import signal
import argparse
import logging

import cv2

from solar_gestures import __version__
from solar_gestures.capture.camera_manager import CameraConfig
from solar_gestures.control.gesture_actions import GestureActionConfig
from solar_gestures.control.trajectory import TrajectoryConfig, TrajectoryController
from solar_gestures.core.events import EventBus, Events
from solar_gestures.core.pipeline import Pipeline, PipelineResult
from solar_gestures.core.store import InteractionStore
from solar_gestures.core.types import DEFAULT_ZOOM
from solar_gestures.detection.hand_detector import HandDetectorConfig
from solar_gestures.detection.landmark_source import LandmarkSource
from solar_gestures.recognition.gesture_classifier import (
    GestureClassifier, GestureClassifierConfig,
)
from solar_gestures.utils.config import Config
from solar_gestures.utils.logger import GestureLogger, setup_logging
from solar_gestures.utils.performance_monitor import PerformanceMonitor
from solar_gestures.visualization.dashboard import Dashboard, status_text

logger = logging.getLogger(__name__)

MODES = ("preview", "headless", "benchmark")


class SolarGestureApp:
    """Builds the gesture -> camera pipeline from config and drives it.

    All collaborators are created once here and injected; nothing below
    this class reaches for global state.
    """

    def __init__(self, config: Config, mode: str = "preview", source=None):
        self._config = config
        self._mode = mode

        # --- Event Bus ---
        self._bus = EventBus()

        # --- Landmark source ---
        self._source = source or LandmarkSource(
            CameraConfig.from_dict(config.camera),
            HandDetectorConfig.from_dict(config.mediapipe),
            max_stale_reads=config.get("camera.max_stale_reads", 30),
        )

        # --- Core ---
        self._store = InteractionStore(
            zoom_level=config.get("interaction.initial_zoom", DEFAULT_ZOOM)
        )
        self._classifier = GestureClassifier(GestureClassifierConfig.from_dict(config.gestures))
        self._controller = TrajectoryController(TrajectoryConfig.from_dict(config.trajectory))

        # --- Performance / logging ---
        self._perf = PerformanceMonitor(
            window_size=config.get("performance.metrics_window", 100)
        )
        self._gesture_logger = GestureLogger()
        self._dashboard = Dashboard(config.visualization)

        # --- Build Pipeline ---
        self._pipeline = Pipeline(
            source=self._source,
            store=self._store,
            classifier=self._classifier,
            controller=self._controller,
            action_config=GestureActionConfig.from_dict(config.gestures),
            event_bus=self._bus,
            performance_monitor=self._perf,
        )

        # --- Wire Event Callbacks ---
        self._bus.subscribe(Events.GESTURE_CHANGED, self._gesture_logger.log_gesture)
        self._bus.subscribe(Events.FOCUS_CHANGED, self._gesture_logger.log_focus)
        self._bus.subscribe(Events.ZOOM_LIMIT_REACHED, self._on_zoom_limit)
        self._bus.subscribe(Events.SOURCE_FAILED, self._on_source_failed)
        self._bus.subscribe(Events.HAND_DETECTED, lambda **_: logger.info("Hand detected"))
        self._bus.subscribe(Events.HAND_LOST, lambda **_: logger.info("Hand lost"))

        logger.info("SolarGestureApp initialized (mode=%s)", mode)

    def _on_zoom_limit(self, zoom_level=None, **_):
        logger.info("Zoom limit reached: %+.3f", zoom_level)

    def _on_source_failed(self, error=None, **_):
        logger.warning("Landmark source failed (%s); continuing with no hand", error)

    # -------------------------------------------------------------------------
    # Run modes
    # -------------------------------------------------------------------------

    def start(self, max_ticks=None) -> int:
        """Acquire the source and run the selected mode until stopped.

        A source that cannot be acquired is reported and the loop runs
        anyway, reading as "no hand" throughout.

        Returns:
            Number of ticks executed
        """
        if not self._source.open():
            logger.error("Landmark source unavailable. Check camera connection and model file.")
        if self._source.is_ready and hasattr(self._source, "resolution"):
            logger.info("Camera resolution: %dx%d", *self._source.resolution)

        logger.info("Starting main loop (mode=%s)", self._mode)

        if self._mode == "benchmark":
            ticks = self._run_benchmark_mode(max_ticks or self._config.get("performance.benchmark_ticks", 300))
        elif self._mode == "headless":
            ticks = self._run_headless_mode(max_ticks)
        else:
            ticks = self._run_preview_mode(max_ticks)

        self._shutdown()
        return ticks

    def _run_preview_mode(self, max_ticks):
        window_name = self._config.get("visualization.window_name", "Solar Gestures")
        interval = self._tick_interval()

        def on_tick(result: PipelineResult):
            image = getattr(self._source, "last_image", None)
            if image is not None and self._config.get("visualization.enabled", True):
                with self._perf.measure("render"):
                    state = result.to_dashboard_dict()
                    state["fps"] = self._perf.fps
                    frame = self._dashboard.render(image.copy(), state)
                    cv2.imshow(window_name, frame)

            key = cv2.waitKey(1) & 0xFF
            if key == ord("q"):
                return False
            if key == ord("p"):
                self._perf.print_report()
            elif key == ord("r"):
                self._store.reset()
                self._controller.reset()
                logger.info("Store and camera reset")
            return True

        try:
            return self._pipeline.run(max_ticks=max_ticks, on_tick=on_tick, tick_interval=interval)
        finally:
            cv2.destroyAllWindows()

    def _run_headless_mode(self, max_ticks):
        report_every = self._config.get("performance.report_interval_ticks", 150)
        interval = self._tick_interval()

        def on_tick(result: PipelineResult):
            if result.tick_id % report_every == 0:
                logger.info("Tick %d | %s | zoom %+.3f | %.1f FPS",
                            result.tick_id, status_text(result.snapshot),
                            result.snapshot.zoom_level, self._perf.fps)
            return True

        return self._pipeline.run(max_ticks=max_ticks, on_tick=on_tick, tick_interval=interval)

    def _run_benchmark_mode(self, ticks: int):
        """Run a fixed number of ticks as fast as possible."""
        logger.info("=== BENCHMARK MODE ===")
        logger.info("Running %d-tick benchmark...", ticks)

        def on_tick(result: PipelineResult):
            if result.tick_id % 50 == 0:
                logger.info("Benchmark progress: %d/%d (FPS: %.1f)",
                            result.tick_id, ticks, self._perf.fps)
            return True

        return self._pipeline.run(max_ticks=ticks, on_tick=on_tick)

    def _tick_interval(self) -> float:
        target_fps = self._config.get("performance.target_fps", 0)
        return 1.0 / target_fps if target_fps else 0.0

    def _shutdown(self):
        """Clean shutdown of all modules."""
        logger.info("Shutting down...")
        self._pipeline.stop()

        self._perf.print_report()
        logger.info("Gesture transitions: %d", self._gesture_logger.total_transitions)
        logger.info("Shutdown complete.")

    def handle_signal(self, signum, frame):
        """Handle SIGINT/SIGTERM for graceful shutdown."""
        logger.info("Signal %d received, shutting down...", signum)
        self._pipeline.stop()

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def pipeline(self) -> Pipeline:
        return self._pipeline

    @property
    def store(self) -> InteractionStore:
        return self._store

    @property
    def event_bus(self) -> EventBus:
        return self._bus

    @property
    def gesture_logger(self) -> GestureLogger:
        return self._gesture_logger


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Solar Gestures - hand-gesture camera control"
    )
    parser.add_argument(
        "--mode", choices=MODES, default="preview",
        help="Operating mode"
    )
    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to config.yaml"
    )
    parser.add_argument(
        "--camera", type=int, default=None,
        help="Camera device ID"
    )
    parser.add_argument(
        "--ticks", type=int, default=None,
        help="Stop after this many ticks"
    )
    parser.add_argument(
        "--debug", action="store_true",
        help="Verbose logging"
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    # Load configuration
    config = Config()
    config.load(config_path=args.config)

    if args.camera is not None:
        config.set("camera.device_id", args.camera)
    if args.debug:
        config.set("logging.level", "DEBUG")
        config.set("gestures.debug", True)

    # Setup logging
    log_cfg = config.get_section("logging")
    setup_logging(
        level=log_cfg.get("level", "INFO"),
        log_file=log_cfg.get("file"),
        max_size_mb=log_cfg.get("max_size_mb", 10),
        backup_count=log_cfg.get("backup_count", 3),
    )

    logger.info("=" * 60)
    logger.info("  SOLAR GESTURES")
    logger.info("  Version: %s", __version__)
    logger.info("  Mode: %s", args.mode)
    logger.info("=" * 60)

    app = SolarGestureApp(config, mode=args.mode)

    # Register signal handlers
    signal.signal(signal.SIGINT, app.handle_signal)
    signal.signal(signal.SIGTERM, app.handle_signal)

    start = time.monotonic()
    ticks = app.start(max_ticks=args.ticks)
    logger.info("Ran %d ticks in %.1fs", ticks, time.monotonic() - start)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
