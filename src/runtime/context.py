from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Optional

from camera.base import Camera
from commands.dispatcher import CommandDispatcher
from detection.base import QRDetector
from inventory.ledger import InventoryLedger
from models.config import Config
from tracking.tracker import PresenceTracker

from .services import PresenceInventoryBridge


@dataclass
class RuntimeContext:
    """Holds runtime state and service references; avoids global singletons."""

    config: Config
    camera: Camera
    detector: QRDetector
    tracker: PresenceTracker
    ledger: InventoryLedger
    bridge: Optional[PresenceInventoryBridge] = None
    start_time: float = field(default_factory=time.time)
    dispatcher: Optional[CommandDispatcher] = None

    def start(self) -> None:
        self.tracker.start()

    def close(self) -> None:
        """Stop the tracker. The ledger holds no external resources."""
        self.tracker.stop()
        logging.info("Shelf keeper closed")

    def uptime_seconds(self) -> int:
        return int(time.time() - self.start_time)


def build_context(config: Config, camera: Camera, detector: QRDetector) -> RuntimeContext:
    """Wire tracker, ledger and (optionally) the auto check-in/out bridge."""
    tracker = PresenceTracker(camera, detector, config.monitor)
    ledger = InventoryLedger()
    bridge = None
    if config.monitor.auto_checkout:
        bridge = PresenceInventoryBridge(ledger).attach(tracker)

    ctx = RuntimeContext(
        config=config,
        camera=camera,
        detector=detector,
        tracker=tracker,
        ledger=ledger,
        bridge=bridge,
    )
    ctx.dispatcher = CommandDispatcher(ledger, tracker=tracker)
    return ctx
