"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


DEFAULT_SCAN_INTERVAL_MS = 1000
DEFAULT_GRACE_PERIOD_MS = 2000
DEFAULT_DETECT_TIMEOUT_MS = 5000


class ConfigError(ValueError):
    """Raised when a configuration value is outside its valid range."""


@dataclass
class CameraConfig:
    """Camera configuration."""
    name: str = "shelf-camera"
    backend: str = "opencv"
    device_id: Union[int, str] = 0
    resolution: List[int] = field(default_factory=lambda: [1280, 720])
    fps: int = 30

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CameraConfig":
        """Adapter: Create from config dictionary."""
        return cls(
            name=d.get("name", "shelf-camera"),
            backend=d.get("backend", "opencv"),
            device_id=d.get("device_id", 0),
            resolution=d.get("resolution", [1280, 720]),
            fps=d.get("fps", 30),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "backend": self.backend,
            "device_id": self.device_id,
            "resolution": self.resolution,
            "fps": self.fps,
        }


@dataclass
class DetectionConfig:
    """QR detection configuration."""
    backend: str = "opencv"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DetectionConfig":
        return cls(
            backend=d.get("backend", "opencv"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "backend": self.backend,
        }


def _check_non_negative(name: str, value: Optional[int]) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer, got: {value!r}")
    if value < 0:
        raise ConfigError(f"{name} must be non-negative, got: {value}")


@dataclass
class MonitorConfig:
    """
    Presence monitoring configuration.

    ``scan_interval_ms`` and ``grace_period_ms`` are tri-state:
    - None: use the default (1000 ms scan interval, 2000 ms grace period)
    - 0: scanning disabled / no grace period (disappearance is immediate)
    - positive: custom value
    Negative values are rejected by validate().
    """
    scan_interval_ms: Optional[int] = None
    grace_period_ms: Optional[int] = None
    detect_timeout_ms: Optional[int] = None
    auto_checkout: bool = False

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "MonitorConfig":
        return cls(
            scan_interval_ms=d.get("scan_interval_ms"),
            grace_period_ms=d.get("grace_period_ms"),
            detect_timeout_ms=d.get("detect_timeout_ms"),
            auto_checkout=bool(d.get("auto_checkout", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"auto_checkout": self.auto_checkout}
        if self.scan_interval_ms is not None:
            d["scan_interval_ms"] = self.scan_interval_ms
        if self.grace_period_ms is not None:
            d["grace_period_ms"] = self.grace_period_ms
        if self.detect_timeout_ms is not None:
            d["detect_timeout_ms"] = self.detect_timeout_ms
        return d

    def validate(self) -> None:
        """Raise ConfigError if any duration is negative or not an integer."""
        _check_non_negative("scan_interval_ms", self.scan_interval_ms)
        _check_non_negative("grace_period_ms", self.grace_period_ms)
        _check_non_negative("detect_timeout_ms", self.detect_timeout_ms)

    @property
    def monitoring_enabled(self) -> bool:
        return self.scan_interval_ms is None or self.scan_interval_ms > 0

    @property
    def scan_interval(self) -> float:
        """Scan interval in seconds (0.0 when monitoring is disabled)."""
        if self.scan_interval_ms is None:
            return DEFAULT_SCAN_INTERVAL_MS / 1000.0
        return self.scan_interval_ms / 1000.0

    @property
    def grace_period(self) -> float:
        """Grace period in seconds."""
        if self.grace_period_ms is None:
            return DEFAULT_GRACE_PERIOD_MS / 1000.0
        return self.grace_period_ms / 1000.0

    @property
    def detect_timeout(self) -> Optional[float]:
        """Detector call timeout in seconds; None means wait indefinitely."""
        if self.detect_timeout_ms is None:
            return DEFAULT_DETECT_TIMEOUT_MS / 1000.0
        if self.detect_timeout_ms == 0:
            return None
        return self.detect_timeout_ms / 1000.0


@dataclass
class WebConfig:
    """HTTP API configuration."""
    enabled: bool = True
    host: str = "0.0.0.0"
    port: int = 5000

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WebConfig":
        return cls(
            enabled=d.get("enabled", True),
            host=d.get("host", "0.0.0.0"),
            port=d.get("port", 5000),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "host": self.host,
            "port": self.port,
        }


@dataclass
class Config:
    """
    Complete application configuration.

    This is a typed representation of the YAML config structure.
    """
    camera: CameraConfig = field(default_factory=CameraConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    web: WebConfig = field(default_factory=WebConfig)
    log_path: str = "logs/shelf_keeper.log"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create Config from raw dictionary (e.g., from load_config)."""
        return cls(
            camera=CameraConfig.from_dict(d.get("camera", {}) or {}),
            detection=DetectionConfig.from_dict(d.get("detection", {}) or {}),
            monitor=MonitorConfig.from_dict(d.get("monitor", {}) or {}),
            web=WebConfig.from_dict(d.get("web", {}) or {}),
            log_path=d.get("log_path", "logs/shelf_keeper.log"),
            log_level=d.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to dictionary (for saving or passing to existing code)."""
        return {
            "camera": self.camera.to_dict(),
            "detection": self.detection.to_dict(),
            "monitor": self.monitor.to_dict(),
            "web": self.web.to_dict(),
            "log_path": self.log_path,
            "log_level": self.log_level,
        }
