"""
Pytest configuration and shared fixtures.
"""

import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from camera.base import Camera  # noqa: E402
from detection.base import QRDetector  # noqa: E402
from models.config import MonitorConfig  # noqa: E402
from models.detection import BoundingBox, QRDetection  # noqa: E402
from tracking.tracker import PresenceTracker  # noqa: E402


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start=None):
        self.now = start or datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, ms=0, seconds=0):
        self.now += timedelta(milliseconds=ms, seconds=seconds)
        return self.now


class FakeCamera(Camera):
    name = "test-camera"

    def __init__(self):
        self.released = False

    def read(self):
        return True, None

    def release(self):
        self.released = True


class ScriptedDetector(QRDetector):
    """Detector returning whatever payloads the test sets, or raising."""

    def __init__(self, *payloads):
        self.payloads = list(payloads)
        self.error = None
        self.calls = 0
        self.cameras = []

    def show(self, *payloads):
        self.payloads = list(payloads)
        self.error = None

    def fail(self, error):
        self.error = error

    def detect(self, frame):
        return self._detections()

    def detect_from_camera(self, camera):
        self.calls += 1
        self.cameras.append(camera)
        if self.error is not None:
            raise self.error
        return self._detections()

    def _detections(self):
        return [
            QRDetection(content=p, bbox=BoundingBox(0, 0, 10, 10))
            for p in self.payloads
        ]


def item_payload(item_id, item_name):
    return '{"item_id": "%s", "item_name": "%s"}' % (item_id, item_name)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def camera():
    return FakeCamera()


@pytest.fixture
def detector():
    return ScriptedDetector()


@pytest.fixture
def make_tracker(camera, detector, clock):
    """Factory for trackers with background scanning disabled by default."""
    created = []

    def _make(scan_interval_ms=0, grace_period_ms=None, detect_timeout_ms=None):
        config = MonitorConfig(
            scan_interval_ms=scan_interval_ms,
            grace_period_ms=grace_period_ms,
            detect_timeout_ms=detect_timeout_ms,
        )
        tracker = PresenceTracker(camera, detector, config, clock=clock)
        created.append(tracker)
        return tracker

    yield _make

    for tracker in created:
        tracker.stop(timeout=2)


@pytest.fixture
def valid_config():
    """Return a valid configuration dictionary."""
    return {
        "camera": {
            "name": "shelf-camera",
            "backend": "opencv",
            "device_id": 0,
            "resolution": [1280, 720],
            "fps": 30,
        },
        "detection": {
            "backend": "opencv",
        },
        "monitor": {
            "scan_interval_ms": 1000,
            "grace_period_ms": 2000,
        },
        "web": {
            "enabled": True,
            "port": 5000,
        },
        "log_path": "logs/test.log",
        "log_level": "INFO",
    }
