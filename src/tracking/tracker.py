"""
Presence tracking for QR codes on the shelf.

This module polls a QR detector at a fixed cadence and keeps a debounced
view of which payloads are currently visible. Transient misses (glare,
occlusion, a flaky decode) are absorbed by a grace period: a code that stops
being detected is only reported as gone once it has stayed missing for the
whole grace period.

Note: Inventory changes are NOT made here. Register a listener (see
`runtime.services.PresenceInventoryBridge`) to react to events.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from camera.base import Camera
from detection.base import DetectorError, QRDetector
from models.config import MonitorConfig
from models.detected_code import DetectedCode, ItemQRData
from models.detection import QRDetection
from models.presence_event import PresenceEvent, PresenceKind
from models.timestamps import utc_now


PresenceListener = Callable[[PresenceEvent], None]

# How often a waiting scan checks whether the tracker was stopped
_CANCEL_POLL_SECONDS = 0.05


class PresenceTracker:
    """
    Tracks visible QR codes with debounced appearance/disappearance.

    This tracker is responsible for:
    - Polling the detector on a background thread (unless disabled)
    - Diffing each scan against the visible set under a single lock
    - Applying the grace period before confirming a disappearance
    - Notifying listeners of confirmed transitions

    Timing behavior (see MonitorConfig):
    - scan_interval: seconds between polls; 0 disables the background thread
    - grace_period: seconds a code may go undetected; 0 removes it on the
      first scan that misses it
    """

    def __init__(
        self,
        camera: Camera,
        detector: QRDetector,
        config: Optional[MonitorConfig] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the presence tracker.

        Args:
            camera: Camera handed to the detector on every scan
            detector: QR detector used to decode the camera
            config: Monitor settings; validated here (negative values raise
                    ConfigError)
            clock: Source of "now"; tests inject a manual clock
        """
        self.config = config or MonitorConfig()
        self.config.validate()

        self.camera = camera
        self.detector = detector
        self.clock = clock

        self.scan_interval = self.config.scan_interval
        self.grace_period = timedelta(seconds=self.config.grace_period)
        self.detect_timeout = self.config.detect_timeout

        self.visible_codes: Dict[str, DetectedCode] = {}
        self._lock = threading.Lock()
        # Serializes whole scans (background loop vs. on-demand scans)
        self._scan_lock = threading.Lock()

        self._listeners: List[PresenceListener] = []
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="qr-detect")

        logging.info(
            f"Presence tracker initialized (scan_interval={self.scan_interval}s, "
            f"grace_period={self.grace_period.total_seconds()}s)"
        )

    @property
    def monitoring_enabled(self) -> bool:
        return self.config.monitoring_enabled

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def is_stopped(self) -> bool:
        return self._stop_event.is_set()

    def add_listener(self, listener: PresenceListener) -> None:
        """Register a callback invoked with each confirmed PresenceEvent."""
        self._listeners.append(listener)

    def start(self) -> bool:
        """
        Start periodic scanning in a background thread.

        Returns:
            True if a thread was started; False when monitoring is disabled,
            already running, or the tracker has been stopped.
        """
        if not self.monitoring_enabled:
            logging.info("QR code monitoring explicitly disabled (scan_interval_ms=0)")
            return False
        if self._stop_event.is_set():
            logging.warning("Presence tracker already stopped; not restarting")
            return False
        if self.is_running:
            return False

        self._thread = threading.Thread(target=self._run, name="presence-tracker", daemon=True)
        self._thread.start()
        logging.info(f"Starting QR code monitoring with interval: {self.scan_interval}s")
        return True

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Stop scanning. Idempotent.

        No scan starts after this call. A scan already past its detector call
        finishes normally; one still waiting on the detector is aborted
        without touching state. Blocks until the background thread exits.
        """
        already_stopped = self._stop_event.is_set()
        self._stop_event.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)
        self._executor.shutdown(wait=False)
        if not already_stopped:
            logging.info("QR code monitoring stopped")

    def _run(self) -> None:
        while not self._stop_event.wait(self.scan_interval):
            self.scan_once()
        logging.debug("QR code monitoring loop exited")

    def scan_once(self) -> Optional[List[PresenceEvent]]:
        """
        Perform one poll-compare-update cycle.

        Returns:
            The confirmed events from this cycle, or None if the scan was
            aborted (detector failure, timeout, or tracker stopped). An
            aborted scan leaves the visible set exactly as it was.
        """
        with self._scan_lock:
            if self._stop_event.is_set():
                return None

            try:
                detections = self._detect()
            except Exception as e:
                logging.warning(f"Failed to scan QR codes: {e}")
                return None

            now = self.clock()
            with self._lock:
                events = self._apply_detections(detections, now)
                events.extend(self._expire_missing(detections, now))

        self._notify(events)
        return events

    def _detect(self) -> List[QRDetection]:
        """Run the detector, honoring the timeout and stop signal."""
        future = self._executor.submit(self.detector.detect_from_camera, self.camera)
        remaining = self.detect_timeout
        while True:
            step = _CANCEL_POLL_SECONDS if remaining is None else min(_CANCEL_POLL_SECONDS, remaining)
            done, _ = wait([future], timeout=step)
            if done:
                return future.result()
            if self._stop_event.is_set():
                future.cancel()
                raise DetectorError("scan cancelled")
            if remaining is not None:
                remaining -= step
                if remaining <= 0:
                    future.cancel()
                    raise DetectorError(f"detector timed out after {self.detect_timeout}s")

    def _apply_detections(self, detections: List[QRDetection], now: datetime) -> List[PresenceEvent]:
        """Insert new codes and refresh existing ones. Caller holds the lock."""
        events: List[PresenceEvent] = []
        for detection in detections:
            content = detection.content
            code = self.visible_codes.get(content)

            if code is None:
                item = ItemQRData.parse(content)
                code = DetectedCode(
                    content=content,
                    item_id=item.item_id if item else "",
                    item_name=item.item_name if item else "",
                    first_seen=now,
                    last_seen=now,
                )
                self.visible_codes[content] = code
                logging.debug(f"QR code appeared: {code.describe()}")
                events.append(self._event(PresenceKind.APPEARED, code, now))
                continue

            code.last_seen = now
            if code.pending_removal:
                # Reappeared inside the grace window; the timer restarts from scratch
                code.pending_removal = False
                code.disappeared_at = None
        return events

    def _expire_missing(self, detections: List[QRDetection], now: datetime) -> List[PresenceEvent]:
        """Start or finish the grace period for codes absent from this scan. Caller holds the lock."""
        seen = {d.content for d in detections}
        events: List[PresenceEvent] = []
        to_remove: List[str] = []

        for content, code in self.visible_codes.items():
            if content in seen:
                continue

            if not self.grace_period:
                to_remove.append(content)
            elif not code.pending_removal:
                code.pending_removal = True
                code.disappeared_at = now
            elif now - code.disappeared_at >= self.grace_period:
                to_remove.append(content)

        for content in to_remove:
            code = self.visible_codes.pop(content)
            logging.debug(f"QR code disappeared: {code.describe()}")
            events.append(self._event(PresenceKind.DISAPPEARED, code, now))
        return events

    @staticmethod
    def _event(kind: PresenceKind, code: DetectedCode, now: datetime) -> PresenceEvent:
        return PresenceEvent(
            kind=kind,
            content=code.content,
            item_id=code.item_id,
            item_name=code.item_name,
            timestamp=now,
        )

    def _notify(self, events: List[PresenceEvent]) -> None:
        for event in events:
            for listener in self._listeners:
                try:
                    listener(event)
                except Exception as e:
                    logging.warning(f"Presence listener error: {e}")

    def get_visible_codes(self) -> List[DetectedCode]:
        """Snapshot of the visible set (copies), sorted by content."""
        with self._lock:
            return [
                DetectedCode(**vars(code))
                for _, code in sorted(self.visible_codes.items())
            ]

    def get_code(self, content: str) -> Optional[DetectedCode]:
        with self._lock:
            code = self.visible_codes.get(content)
            return DetectedCode(**vars(code)) if code is not None else None
