"""
Tests for application wiring and the command line
"""

import pytest

from solar_gestures.app import SolarGestureApp, parse_args
from solar_gestures.core.types import FocusTarget, GestureLabel
from solar_gestures.utils.config import Config


@pytest.fixture
def config(tmp_path):
    Config.reset()
    cfg = Config().load(
        config_path=str(tmp_path / "missing.yaml"),
        overrides={"performance": {"target_fps": 0}},
    )
    yield cfg
    Config.reset()


class TestArgs:

    def test_defaults(self):
        args = parse_args([])
        assert args.mode == "preview"
        assert args.ticks is None
        assert not args.debug

    def test_options(self):
        args = parse_args(["--mode", "benchmark", "--ticks", "10", "--camera", "2", "--debug"])
        assert args.mode == "benchmark"
        assert args.ticks == 10
        assert args.camera == 2
        assert args.debug

    def test_rejects_unknown_mode(self):
        with pytest.raises(SystemExit):
            parse_args(["--mode", "demo"])


class TestSolarGestureApp:

    def test_headless_run(self, config, fake_source_factory, make_hand):
        source = fake_source_factory([(True, make_hand(extended=("index", "middle")))])
        app = SolarGestureApp(config, mode="headless", source=source)
        assert app.start(max_ticks=3) == 3
        assert app.store.focus_target == FocusTarget.EARTH
        assert app.store.gesture == GestureLabel.TWO
        assert source.close_calls == 1
        assert app.gesture_logger.total_transitions == 2

    def test_benchmark_run(self, config, fake_source_factory):
        source = fake_source_factory()
        app = SolarGestureApp(config, mode="benchmark", source=source)
        assert app.start(max_ticks=5) == 5
        assert app.pipeline.is_stopped

    def test_unavailable_source_still_runs(self, config, fake_source_factory):
        source = fake_source_factory()
        source.is_ready = False
        app = SolarGestureApp(config, mode="headless", source=source)
        assert app.start(max_ticks=4) == 4
        assert source.read_calls == 0

    def test_signal_stops_pipeline(self, config, fake_source_factory):
        source = fake_source_factory()
        app = SolarGestureApp(config, mode="headless", source=source)
        app.handle_signal(2, None)
        app.handle_signal(2, None)
        assert source.close_calls == 1

    def test_initial_zoom_from_config(self, tmp_path, fake_source_factory):
        Config.reset()
        cfg = Config().load(config_path=str(tmp_path / "missing.yaml"),
                            overrides={"interaction": {"initial_zoom": -0.2}})
        app = SolarGestureApp(cfg, mode="headless", source=fake_source_factory())
        assert app.store.zoom_level == -0.2
        Config.reset()
