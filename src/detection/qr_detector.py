"""
OpenCV QR code detector.

Uses detectAndDecodeMulti so several codes on the shelf are decoded from a
single frame, falling back to single-code decoding when the multi pass finds
nothing.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

import cv2
import numpy as np

from models.detection import BoundingBox, QRDetection

from .base import QRDetector


class OpenCVQRDetector(QRDetector):
    def __init__(self, backend: str = "opencv"):
        self.backend = backend
        if backend == "opencv_aruco":
            self._detector = cv2.QRCodeDetectorAruco()
        else:
            self._detector = cv2.QRCodeDetector()
        logging.info(f"QR detector initialized (backend={backend})")

    def detect(self, frame: np.ndarray) -> List[QRDetection]:
        detections: List[QRDetection] = []

        ok, decoded_info, points, _ = self._detector.detectAndDecodeMulti(frame)
        if ok and decoded_info and points is not None:
            for text, quad in zip(decoded_info, points):
                if not text:
                    continue
                detections.append(_to_detection(text, quad))
            return detections

        try:
            result = self._detector.detectAndDecode(frame)
        except cv2.error:
            return detections
        if len(result) == 3:
            text, points, _ = result
        else:
            text, points = result
        if text and points is not None:
            detections.append(_to_detection(text, points[0]))

        return detections


def _to_detection(text: str, quad) -> QRDetection:
    quad_points = [(float(x), float(y)) for x, y in quad]
    return QRDetection(content=text, bbox=BoundingBox.from_points(quad_points))


def create_detector(detection_cfg: Dict[str, Any]) -> QRDetector:
    return OpenCVQRDetector(backend=detection_cfg.get("backend", "opencv"))
