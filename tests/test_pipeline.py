"""
Tests for the tick pipeline, driven by scripted landmark sources
"""

import pytest

from solar_gestures.core.events import EventBus, Events
from solar_gestures.core.pipeline import Pipeline
from solar_gestures.core.store import InteractionStore
from solar_gestures.core.types import DEFAULT_ZOOM, MAX_ZOOM, FocusTarget, GestureLabel, LandmarkFrame
from solar_gestures.utils.performance_monitor import PerformanceMonitor

OPEN = ("index", "middle", "ring", "pinky")


@pytest.fixture
def bus():
    return EventBus(max_history=1000)


@pytest.fixture
def build(fake_source_factory, fake_clock, bus):
    """Factory: pipeline over a scripted source."""
    def _build(script=None, store=None):
        source = fake_source_factory(script)
        pipeline = Pipeline(
            source=source,
            store=store or InteractionStore(),
            event_bus=bus,
            performance_monitor=PerformanceMonitor(),
            clock=fake_clock,
        )
        return pipeline, source
    return _build


class TestTick:

    def test_no_hand_is_idle(self, build):
        pipeline, _ = build([(True, None)])
        result = pipeline.tick()
        assert result.gesture_result.label == GestureLabel.IDLE
        assert not result.hand_detected
        assert pipeline.store.zoom_level == DEFAULT_ZOOM

    def test_elapsed_from_clock(self, build, fake_clock):
        pipeline, _ = build()
        assert pipeline.tick().elapsed == 0.0
        assert pipeline.tick().elapsed == pytest.approx(fake_clock.step)

    def test_two_fingers_visit_earth(self, build, make_hand):
        pipeline, _ = build([(True, make_hand(extended=("index", "middle")))])
        result = pipeline.tick()
        assert result.snapshot.gesture == GestureLabel.TWO
        assert result.snapshot.focus_target == FocusTarget.EARTH
        assert result.output.focus_target == FocusTarget.EARTH

    def test_open_hand_saturates_zoom(self, build, make_hand, bus):
        pipeline, _ = build([(True, make_hand(extended=OPEN))])
        for _ in range(60):
            pipeline.tick()
        assert pipeline.store.zoom_level == MAX_ZOOM
        assert len(bus.events_named(Events.ZOOM_LIMIT_REACHED)) == 1

    def test_point_drives_saturn_rotation(self, build, make_hand):
        pipeline, _ = build([(True, make_hand(extended=("index",)))])
        result = pipeline.tick()
        assert result.snapshot.focus_target == FocusTarget.SATURN
        assert result.snapshot.rotation == pytest.approx((-0.4, -0.24))
        assert result.output.saturn_rotation == pytest.approx((-0.02, -0.012))

    def test_no_new_frame_skips_store_but_smooths(self, build, make_hand):
        hand = make_hand(extended=OPEN)
        pipeline, _ = build([(True, hand), (False, None)])
        first = pipeline.tick()
        second = pipeline.tick()

        assert not second.frame_ready
        assert second.gesture_result is None
        assert second.snapshot == first.snapshot
        # Camera still moves toward the zoomed-in overview
        assert second.output.camera.position[2] < first.output.camera.position[2]
        assert pipeline.performance.get_report()["skipped_ticks"] == 1

    def test_hand_loss_returns_to_idle(self, build, make_hand):
        pipeline, _ = build([(True, make_hand(extended=("index", "middle"))), (True, None)])
        pipeline.tick()
        result = pipeline.tick()
        assert result.snapshot.gesture == GestureLabel.IDLE
        # Focus is kept after the hand leaves
        assert result.snapshot.focus_target == FocusTarget.EARTH

    def test_incomplete_frame_is_idle_without_hand(self, build, make_hand):
        partial = LandmarkFrame(make_hand(extended=("index",)).points[:10])
        pipeline, _ = build([(True, partial)])
        result = pipeline.tick()
        assert result.frame_ready
        assert not result.hand_detected
        assert result.snapshot.gesture == GestureLabel.IDLE
        assert result.to_dashboard_dict()["frame"] is partial


class TestEvents:

    def test_transitions_published(self, build, make_hand, bus):
        pipeline, _ = build([
            (True, None),
            (True, make_hand(extended=("index", "middle"))),
            (True, make_hand(extended=("index", "middle"))),
            (True, None),
        ])
        for _ in range(4):
            pipeline.tick()

        names = [e["event"] for e in bus.get_history(100)]
        assert names.count(Events.HAND_DETECTED) == 1
        assert names.count(Events.HAND_LOST) == 1
        assert names.count(Events.FOCUS_CHANGED) == 1

        gestures = bus.events_named(Events.GESTURE_CHANGED)
        assert [(e["data"]["previous"], e["data"]["current"]) for e in gestures] == [
            ("IDLE", "TWO"), ("TWO", "IDLE"),
        ]

    def test_focus_event_payload(self, build, make_hand, bus):
        pipeline, _ = build([(True, make_hand(extended=("index", "middle", "ring")))])
        pipeline.tick()
        event = bus.events_named(Events.FOCUS_CHANGED)[0]
        assert event["data"] == {"previous": "NONE", "current": "MOON"}


class TestSourceFailures:

    def test_unready_source_reads_as_no_hand(self, build):
        pipeline, source = build([(True, None)])
        source.is_ready = False
        result = pipeline.tick()
        assert source.read_calls == 0
        assert result.gesture_result.label == GestureLabel.IDLE

    def test_source_error_reported_once(self, build, bus):
        pipeline, source = build([RuntimeError("camera unplugged")])
        for _ in range(5):
            result = pipeline.tick()

        assert source.read_calls == 1
        assert len(bus.events_named(Events.SOURCE_FAILED)) == 1
        assert result.snapshot.gesture == GestureLabel.IDLE

    def test_no_source(self, bus, fake_clock):
        pipeline = Pipeline(None, InteractionStore(), event_bus=bus, clock=fake_clock)
        assert pipeline.tick().gesture_result.label == GestureLabel.IDLE
        pipeline.stop()


class TestLoopControl:

    def test_run_max_ticks(self, build):
        pipeline, source = build()
        assert pipeline.run(max_ticks=5) == 5
        assert pipeline.tick_count == 5
        assert source.close_calls == 1
        assert pipeline.is_stopped

    def test_on_tick_can_stop(self, build):
        pipeline, _ = build()
        assert pipeline.run(max_ticks=10, on_tick=lambda result: False) == 1

    def test_stop_is_idempotent(self, build, bus):
        pipeline, source = build()
        pipeline.tick()
        pipeline.stop()
        pipeline.stop()
        assert source.close_calls == 1
        assert len(bus.events_named(Events.SYSTEM_SHUTDOWN)) == 1

    def test_run_after_stop_does_nothing(self, build):
        pipeline, _ = build()
        pipeline.stop()
        assert pipeline.run(max_ticks=3) == 0

    def test_stop_inside_tick_finishes_tick(self, build, make_hand, bus):
        pipeline, source = build([(True, make_hand(extended=("index", "middle")))])
        closed_during_tick = []

        def stop_now(**_):
            pipeline.stop()
            closed_during_tick.append(source.close_calls)

        bus.subscribe(Events.GESTURE_CHANGED, stop_now)
        executed = pipeline.run(max_ticks=10)

        assert executed == 1
        assert closed_during_tick == [0]
        assert source.close_calls == 1
        snap = pipeline.store.snapshot()
        assert snap.gesture == GestureLabel.TWO
        assert snap.focus_target == FocusTarget.EARTH

    def test_lifecycle_events(self, build, bus):
        pipeline, _ = build()
        pipeline.run(max_ticks=2)
        names = [e["event"] for e in bus.get_history(100)]
        assert names[0] == Events.SYSTEM_STARTED
        assert names[-1] == Events.SYSTEM_SHUTDOWN
