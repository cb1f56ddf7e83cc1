"""
Tests for Camera and Landmark Source Modules
=============================================
"""

from unittest.mock import MagicMock, Mock, patch

import numpy as np
import pytest

from solar_gestures.capture.camera_manager import CameraConfig, CameraManager
from solar_gestures.detection.hand_detector import HandDetector, HandDetectorConfig
from solar_gestures.detection.landmark_source import LandmarkSource, LandmarkSourceError


class TestCameraConfig:
    """Test suite for CameraConfig."""

    def test_default_values(self):
        config = CameraConfig()
        assert config.device_id == 0
        assert config.width == 320
        assert config.height == 240
        assert config.threaded is True

    def test_from_dict(self):
        config = CameraConfig.from_dict({
            "device_id": 1,
            "width": 640,
            "height": 480,
            "fps": 60,
            "threaded": False,
        })
        assert config.device_id == 1
        assert config.width == 640
        assert config.fps == 60
        assert config.threaded is False

    def test_from_dict_partial(self):
        config = CameraConfig.from_dict({"width": 800})
        assert config.width == 800
        assert config.height == 240


class TestCameraManager:
    """Test suite for CameraManager with a mocked OpenCV capture."""

    @pytest.fixture
    def mock_cv2(self):
        with patch("solar_gestures.capture.camera_manager.cv2") as mock:
            mock_cap = MagicMock()
            mock_cap.isOpened.return_value = True
            mock_cap.read.return_value = (True, np.zeros((240, 320, 3), dtype=np.uint8))
            mock_cap.get.return_value = 30.0
            mock.VideoCapture.return_value = mock_cap
            yield mock

    @pytest.fixture
    def sync_config(self):
        return CameraConfig(warmup_frames=0, threaded=False, flip_horizontal=False)

    def test_open_success(self, mock_cv2, sync_config):
        camera = CameraManager(sync_config)
        assert camera.open() is True
        assert camera.is_open
        camera.stop()

    def test_open_failure(self, mock_cv2, sync_config):
        mock_cv2.VideoCapture.return_value.isOpened.return_value = False
        camera = CameraManager(sync_config)
        assert camera.open() is False
        assert not camera.is_open

    def test_sync_read_increments_id(self, mock_cv2, sync_config):
        camera = CameraManager(sync_config)
        camera.open()
        first_id, image = camera.read()
        second_id, _ = camera.read()
        assert image.shape == (240, 320, 3)
        assert second_id == first_id + 1
        camera.stop()

    def test_read_before_open(self, sync_config):
        assert CameraManager(sync_config).read() == (None, None)

    def test_stop_is_idempotent(self, mock_cv2, sync_config):
        camera = CameraManager(sync_config)
        camera.open()
        camera.stop()
        camera.stop()
        mock_cv2.VideoCapture.return_value.release.assert_called_once()

    def test_resolution_property(self):
        assert CameraManager(CameraConfig(width=800, height=600)).resolution == (800, 600)

    def test_context_manager(self, mock_cv2, sync_config):
        with CameraManager(sync_config) as camera:
            assert camera.is_open
        assert not camera.is_open


class TestHandDetector:

    def test_config_from_dict(self):
        config = HandDetectorConfig.from_dict({"min_detection_confidence": 0.7})
        assert config.min_detection_confidence == 0.7
        assert config.download_model is True

    def test_missing_model_without_download(self, tmp_path):
        config = HandDetectorConfig(model_path=str(tmp_path / "missing.task"), download_model=False)
        detector = HandDetector(config)
        assert detector.start() is False
        assert not detector.is_ready

    def test_detect_when_not_started(self):
        assert HandDetector().detect(np.zeros((10, 10, 3), dtype=np.uint8), 0) is None


class TestLandmarkSource:
    """LandmarkSource with stubbed camera and detector."""

    @pytest.fixture
    def source(self, make_hand):
        src = LandmarkSource()
        camera = Mock()
        camera.open.return_value = True
        camera.is_open = False
        camera.read.return_value = (1, np.zeros((240, 320, 3), dtype=np.uint8))
        detector = Mock()
        detector.start.return_value = True
        detector.detect.return_value = make_hand(extended=("index",))
        src._camera = camera
        src._detector = detector
        return src

    def test_read_before_open_is_no_hand(self, source):
        assert source.read() == (True, None)
        source._camera.read.assert_not_called()

    def test_new_frame(self, source):
        assert source.open() is True
        ret, frame = source.read()
        assert ret is True
        assert frame is not None
        assert source.last_image is not None

    def test_same_frame_not_reprocessed(self, source):
        source.open()
        source.read()
        assert source.read() == (False, None)
        assert source._detector.detect.call_count == 1

    def test_stalled_camera_reports_no_hand(self, source):
        source._max_stale_reads = 3
        source.open()
        assert source.read()[0] is True
        assert [source.read() for _ in range(3)] == [(False, None)] * 3
        assert source.read() == (True, None)
        assert source.read() == (True, None)
        assert source._detector.detect.call_count == 1

    def test_new_frame_clears_stall(self, source):
        source._max_stale_reads = 1
        source.open()
        source.read()
        source.read()
        assert source.read() == (True, None)
        source._camera.read.return_value = (2, np.zeros((240, 320, 3), dtype=np.uint8))
        ret, frame = source.read()
        assert ret is True
        assert frame is not None
        assert source.read() == (False, None)

    def test_no_camera_frame_yet(self, source):
        source._camera.read.return_value = (None, None)
        source.open()
        assert source.read() == (False, None)

    def test_camera_failure(self, source):
        source._camera.open.return_value = False
        assert source.open() is False
        assert source.failed
        assert source.read() == (True, None)

    def test_camera_failure_strict(self, source):
        source._camera.open.return_value = False
        with pytest.raises(LandmarkSourceError):
            source.open(strict=True)

    def test_model_failure_releases_camera(self, source):
        source._detector.start.return_value = False
        assert source.open() is False
        source._camera.stop.assert_called_once()

    def test_close_is_idempotent(self, source):
        source.open()
        source.close()
        source.close()
        source._detector.stop.assert_called_once()
        assert not source.is_ready
