"""
Tests for application startup and shutdown in main().
"""

import pytest

import main
from conftest import FakeCamera


@pytest.fixture
def startup(monkeypatch, valid_config):
    """Patch main() collaborators so no real camera, logging or signals are touched."""
    camera = FakeCamera()
    monkeypatch.setattr(main.sys, "argv", ["main.py", "--no-web"])
    monkeypatch.setattr(main, "load_config", lambda path: valid_config)
    monkeypatch.setattr(main, "setup_logging", lambda path, level: None)
    monkeypatch.setattr(main.signal, "signal", lambda signum, handler: None)
    monkeypatch.setattr(main, "create_camera", lambda cfg: camera)
    return camera


class TestStartupFailure:
    """The camera is released even when later startup steps fail."""

    def test_detector_failure_releases_camera(self, startup, monkeypatch):
        def broken_detector(cfg):
            raise RuntimeError("detector unavailable")

        monkeypatch.setattr(main, "create_detector", broken_detector)

        with pytest.raises(RuntimeError, match="detector unavailable"):
            main.main()

        assert startup.released is True

    def test_context_failure_releases_camera(self, startup, monkeypatch):
        def broken_context(config, camera, detector):
            raise RuntimeError("wiring failed")

        monkeypatch.setattr(main, "create_detector", lambda cfg: object())
        monkeypatch.setattr(main, "build_context", broken_context)

        with pytest.raises(RuntimeError, match="wiring failed"):
            main.main()

        assert startup.released is True

    def test_camera_failure_propagates(self, startup, monkeypatch):
        def broken_camera(cfg):
            raise RuntimeError("Failed to open camera device 0")

        monkeypatch.setattr(main, "create_camera", broken_camera)

        with pytest.raises(RuntimeError, match="Failed to open camera"):
            main.main()

    def test_invalid_config_exits(self, startup, monkeypatch, valid_config):
        valid_config["log_level"] = "VERBOSE"

        with pytest.raises(SystemExit):
            main.main()

        assert startup.released is False
