"""
Tick pipeline: one classify -> mutate -> read -> smooth cycle per call.

Architecture:
    LandmarkSource -> GestureClassifier -> apply_gesture (store transaction)
    -> InteractionStore.snapshot() -> TrajectoryController

Ticks never overlap and never block: the source hands over whatever it
has, a missing camera frame skips classification but still advances the
smoothing, and an unavailable source reads as "no hand".
"""

import time
import logging
from typing import Callable, Optional

from solar_gestures.core.events import EventBus, Events
from solar_gestures.core.store import InteractionStore, StoreSnapshot
from solar_gestures.core.types import GestureResult, LandmarkFrame, MAX_ZOOM, MIN_ZOOM
from solar_gestures.control.gesture_actions import GestureActionConfig, apply_gesture
from solar_gestures.control.trajectory import ControllerOutput, TrajectoryController
from solar_gestures.recognition.gesture_classifier import GestureClassifier
from solar_gestures.utils.performance_monitor import PerformanceMonitor

logger = logging.getLogger(__name__)


class PipelineResult:
    """Result of a single pipeline tick."""

    __slots__ = (
        "tick_id", "elapsed", "frame_ready", "hand_detected", "frame",
        "gesture_result", "snapshot", "output",
    )

    def __init__(self, tick_id: int, elapsed: float):
        self.tick_id = tick_id
        self.elapsed = elapsed
        self.frame_ready = False
        self.hand_detected = False
        self.frame: Optional[LandmarkFrame] = None
        self.gesture_result: Optional[GestureResult] = None
        self.snapshot: Optional[StoreSnapshot] = None
        self.output: Optional[ControllerOutput] = None

    def to_dashboard_dict(self) -> dict:
        """Flatten into the dict format expected by Dashboard.render()."""
        state = self.snapshot.to_dict() if self.snapshot else {}
        state["hand_detected"] = self.hand_detected
        state["frame"] = self.frame
        return state


class Pipeline:
    """Composable per-tick gesture -> camera pipeline.

    The landmark source only needs ``read() -> (ret, frame)``, ``close()``
    and an ``is_ready`` flag, so tests can drive the pipeline with scripted
    frames and a fake clock.
    """

    def __init__(
        self,
        source,
        store: InteractionStore,
        classifier: Optional[GestureClassifier] = None,
        controller: Optional[TrajectoryController] = None,
        action_config: Optional[GestureActionConfig] = None,
        event_bus: Optional[EventBus] = None,
        performance_monitor: Optional[PerformanceMonitor] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._source = source
        self._store = store
        self._classifier = classifier or GestureClassifier()
        self._controller = controller or TrajectoryController()
        self._action_config = action_config or GestureActionConfig()
        self._bus = event_bus or EventBus()
        self._perf = performance_monitor or PerformanceMonitor()
        self._clock = clock

        # State
        self._start_time: Optional[float] = None
        self._tick_count = 0
        self._hand_present = False
        self._source_dead = False
        self._running = False
        self._in_tick = False
        self._release_pending = False
        self._released = False
        self._last_snapshot = store.snapshot()

    # -------------------------------------------------------------------------
    # Tick
    # -------------------------------------------------------------------------

    def tick(self) -> PipelineResult:
        """Execute one full pipeline iteration."""
        now = self._clock()
        if self._start_time is None:
            self._start_time = now
        elapsed = now - self._start_time

        self._in_tick = True
        try:
            result = self._run_tick(elapsed)
        finally:
            self._in_tick = False
            if self._release_pending:
                self._release()
        return result

    def _run_tick(self, elapsed: float) -> PipelineResult:
        self._tick_count += 1
        result = PipelineResult(self._tick_count, elapsed)

        with self._perf.measure("total"):
            # --- 1. Landmark source ---
            with self._perf.measure("source"):
                ret, frame = self._read_source()
            result.frame_ready = ret
            result.frame = frame

            # --- 2. Classification + store writes ---
            if ret:
                with self._perf.measure("classification"):
                    gesture_result = self._classifier.classify(frame)
                result.gesture_result = gesture_result
                result.hand_detected = isinstance(frame, LandmarkFrame) and frame.is_complete

                with self._perf.measure("store"):
                    with self._store.transaction():
                        apply_gesture(self._store, gesture_result, self._action_config)
            else:
                self._perf.record_skip()

            # --- 3. Read + smooth ---
            snapshot = self._store.snapshot()
            result.snapshot = snapshot
            with self._perf.measure("trajectory"):
                result.output = self._controller.update(elapsed, snapshot)

        self._publish_transitions(result)
        self._last_snapshot = snapshot
        self._perf.tick()
        return result

    def _read_source(self):
        """Read (ret, frame); unavailable or failing sources mean no hand."""
        if self._source is None or self._source_dead or not self._source.is_ready:
            return True, None
        try:
            return self._source.read()
        except (RuntimeError, OSError, ValueError) as e:
            # Reported once; from here on the source reads as absent
            self._source_dead = True
            logger.error("Landmark source error, continuing without input: %s", e)
            self._bus.emit(Events.SOURCE_FAILED, error=str(e))
            return True, None

    def _publish_transitions(self, result: PipelineResult):
        previous, current = self._last_snapshot, result.snapshot

        if result.frame_ready and result.hand_detected != self._hand_present:
            self._hand_present = result.hand_detected
            self._bus.emit(Events.HAND_DETECTED if self._hand_present else Events.HAND_LOST)

        if current.gesture != previous.gesture:
            self._bus.emit(Events.GESTURE_CHANGED,
                           previous=previous.gesture.value,
                           current=current.gesture.value,
                           zoom_level=current.zoom_level)

        if current.focus_target != previous.focus_target:
            self._bus.emit(Events.FOCUS_CHANGED,
                           previous=previous.focus_target.value,
                           current=current.focus_target.value)

        if (current.zoom_level != previous.zoom_level
                and current.zoom_level in (MIN_ZOOM, MAX_ZOOM)):
            self._bus.emit(Events.ZOOM_LIMIT_REACHED, zoom_level=current.zoom_level)

    # -------------------------------------------------------------------------
    # Loop control
    # -------------------------------------------------------------------------

    def run(self, max_ticks: Optional[int] = None,
            on_tick: Optional[Callable[[PipelineResult], Optional[bool]]] = None,
            tick_interval: float = 0.0) -> int:
        """Tick until stop() is called, ``max_ticks`` is reached, or
        ``on_tick`` returns False. Releases the source on exit.

        Returns:
            Number of ticks executed by this call
        """
        if self._released:
            logger.warning("Pipeline already stopped; not starting")
            return 0

        self._running = True
        self._bus.emit(Events.SYSTEM_STARTED)
        executed = 0
        try:
            while self._running and (max_ticks is None or executed < max_ticks):
                result = self.tick()
                executed += 1
                if on_tick is not None and on_tick(result) is False:
                    break
                if tick_interval > 0:
                    time.sleep(tick_interval)
        finally:
            self.stop()
        return executed

    def stop(self):
        """Stop scheduling ticks and release the source. Idempotent.

        Called from inside a tick (e.g. a signal handler), the release waits
        until that tick has finished its store writes.
        """
        self._running = False
        if self._in_tick:
            self._release_pending = True
            return
        self._release()

    def _release(self):
        self._release_pending = False
        if self._released:
            return
        self._released = True
        if self._source is not None:
            self._source.close()
        self._bus.emit(Events.SYSTEM_SHUTDOWN, ticks=self._tick_count)
        logger.info("Pipeline stopped after %d ticks", self._tick_count)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def store(self) -> InteractionStore:
        return self._store

    @property
    def controller(self) -> TrajectoryController:
        return self._controller

    @property
    def event_bus(self) -> EventBus:
        return self._bus

    @property
    def performance(self) -> PerformanceMonitor:
        return self._perf

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_stopped(self) -> bool:
        return self._released
