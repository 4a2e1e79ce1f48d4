"""
Typed models for the shelf keeper application.
"""

from .detection import BoundingBox, QRDetection
from .detected_code import DetectedCode, ItemQRData
from .inventory import InventoryItem, InventorySnapshot, ItemState, TransitionResult
from .presence_event import PresenceEvent, PresenceKind
from .config import (
    Config,
    ConfigError,
    CameraConfig,
    DetectionConfig,
    MonitorConfig,
    WebConfig,
)

__all__ = [
    # Detection
    "BoundingBox",
    "QRDetection",
    # Presence
    "DetectedCode",
    "ItemQRData",
    "PresenceEvent",
    "PresenceKind",
    # Inventory
    "InventoryItem",
    "InventorySnapshot",
    "ItemState",
    "TransitionResult",
    # Config
    "Config",
    "ConfigError",
    "CameraConfig",
    "DetectionConfig",
    "MonitorConfig",
    "WebConfig",
]
