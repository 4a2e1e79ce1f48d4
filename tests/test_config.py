"""
Smoke tests for configuration loading and validation.
"""

import pytest
import yaml

from main import load_config, validate_config
from models.config import Config, ConfigError, MonitorConfig


class TestValidateConfig:
    """Tests for validate_config function."""

    def test_valid_config_passes(self, valid_config):
        """A complete valid config passes validation."""
        is_valid, error = validate_config(valid_config)

        assert is_valid is True
        assert error is None

    @pytest.mark.parametrize("section", ["camera", "detection", "monitor", "log_path", "log_level"])
    def test_missing_section(self, valid_config, section):
        del valid_config[section]

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert section in error

    def test_invalid_log_level(self, valid_config):
        valid_config["log_level"] = "VERBOSE"

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "log_level" in error

    def test_negative_scan_interval(self, valid_config):
        valid_config["monitor"]["scan_interval_ms"] = -1

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "scan_interval_ms" in error

    def test_null_durations_allowed(self, valid_config):
        valid_config["monitor"] = {"scan_interval_ms": None, "grace_period_ms": None}

        is_valid, _ = validate_config(valid_config)

        assert is_valid is True

    def test_zero_durations_allowed(self, valid_config):
        valid_config["monitor"] = {"scan_interval_ms": 0, "grace_period_ms": 0}

        is_valid, _ = validate_config(valid_config)

        assert is_valid is True

    def test_non_integer_duration(self, valid_config):
        valid_config["monitor"]["grace_period_ms"] = "2s"

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "grace_period_ms" in error

    def test_invalid_detection_backend(self, valid_config):
        valid_config["detection"]["backend"] = "zbar"

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "detection.backend" in error

    def test_unknown_detection_setting_rejected(self, valid_config):
        """Settings the detector does not read are rejected, not silently ignored."""
        valid_config["detection"]["min_confidence"] = 1.5

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "min_confidence" in error

    def test_detection_config_has_backend_only(self, valid_config):
        assert Config.from_dict(valid_config).detection.to_dict() == {"backend": "opencv"}

    def test_invalid_port(self, valid_config):
        valid_config["web"]["port"] = 70000

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "web.port" in error


class TestLoadConfig:
    """Config layering: default.yaml < config.yaml < explicit path."""

    def _write(self, path, data):
        path.write_text(yaml.safe_dump(data))

    def test_layering(self, tmp_path):
        self._write(tmp_path / "default.yaml", {
            "monitor": {"scan_interval_ms": 1000, "grace_period_ms": 2000},
            "log_level": "INFO",
        })
        self._write(tmp_path / "config.yaml", {"monitor": {"grace_period_ms": 500}})
        self._write(tmp_path / "site.yaml", {"log_level": "DEBUG"})

        cfg = load_config(str(tmp_path / "site.yaml"))

        assert cfg["monitor"] == {"scan_interval_ms": 1000, "grace_period_ms": 500}
        assert cfg["log_level"] == "DEBUG"

    def test_local_override_path_applied_once(self, tmp_path):
        self._write(tmp_path / "default.yaml", {"log_level": "INFO"})
        self._write(tmp_path / "config.yaml", {"log_level": "WARNING"})

        cfg = load_config(str(tmp_path / "config.yaml"))

        assert cfg["log_level"] == "WARNING"

    def test_missing_files_give_empty_config(self, tmp_path):
        assert load_config(str(tmp_path / "config.yaml")) == {}

    def test_invalid_yaml_exits(self, tmp_path):
        (tmp_path / "default.yaml").write_text("monitor: [unclosed")

        with pytest.raises(SystemExit):
            load_config(str(tmp_path / "config.yaml"))


class TestMonitorConfig:
    """Tri-state timing values."""

    def test_defaults_when_absent(self):
        cfg = Config.from_dict({}).monitor

        assert cfg.scan_interval_ms is None
        assert cfg.monitoring_enabled is True
        assert cfg.scan_interval == 1.0
        assert cfg.grace_period == 2.0
        assert cfg.detect_timeout == 5.0
        assert cfg.auto_checkout is False

    def test_zero_disables(self):
        cfg = MonitorConfig(scan_interval_ms=0, grace_period_ms=0, detect_timeout_ms=0)

        assert cfg.monitoring_enabled is False
        assert cfg.scan_interval == 0.0
        assert cfg.grace_period == 0.0
        assert cfg.detect_timeout is None

    def test_custom_values(self):
        cfg = MonitorConfig.from_dict({"scan_interval_ms": 250, "grace_period_ms": 750, "auto_checkout": True})

        assert cfg.scan_interval == 0.25
        assert cfg.grace_period == 0.75
        assert cfg.auto_checkout is True

    @pytest.mark.parametrize("field", ["scan_interval_ms", "grace_period_ms", "detect_timeout_ms"])
    def test_negative_rejected(self, field):
        with pytest.raises(ConfigError):
            MonitorConfig(**{field: -5}).validate()

    def test_round_trip_omits_unset_values(self):
        cfg = MonitorConfig(grace_period_ms=0)

        assert cfg.to_dict() == {"auto_checkout": False, "grace_period_ms": 0}

    def test_full_config_from_dict(self, valid_config):
        cfg = Config.from_dict(valid_config)

        assert cfg.camera.device_id == 0
        assert cfg.camera.resolution == [1280, 720]
        assert cfg.monitor.scan_interval_ms == 1000
        assert cfg.web.port == 5000
        assert cfg.log_path == "logs/test.log"
