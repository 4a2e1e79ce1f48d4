"""
QR detection interfaces.

A detector decodes QR codes from a camera. Backends:
- OpenCV QRCodeDetector (multi-code)
- OpenCV QRCodeDetectorAruco
"""

from __future__ import annotations

from typing import List

import numpy as np

from camera.base import Camera
from models.detection import QRDetection


class DetectorError(RuntimeError):
    """Raised when a detector cannot produce detections (e.g. no frame)."""


class QRDetector:
    """Detector interface returning decoded QR codes in pixel-space."""

    def detect(self, frame: np.ndarray) -> List[QRDetection]:
        raise NotImplementedError

    def detect_from_camera(self, camera: Camera) -> List[QRDetection]:
        """Grab one frame from the camera and decode it."""
        ok, frame = camera.read()
        if not ok or frame is None:
            raise DetectorError("failed to read frame from camera")
        return self.detect(frame)
