"""
OpenCV camera backend.

Supports:
- USB webcams (device_id as int, e.g. 0)
- RTSP/IP cameras (device_id as str URL, e.g. "rtsp://...")
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Optional, Tuple, Union

import cv2
import numpy as np

from ..base import Camera


class OpenCVCamera(Camera):
    """
    OpenCV-based capture used as the shelf camera.

    read() is called from the tracker's scan thread and, through the
    scan_now command, from request threads, so access to the underlying
    VideoCapture is serialized.
    """

    def __init__(
        self,
        name: str = "shelf-camera",
        device_id: Union[int, str] = 0,
        resolution: Tuple[int, int] = (1280, 720),
        fps: int = 30,
        max_retries: int = 3,
    ) -> None:
        self.name = name
        self.device_id = device_id
        self.resolution = resolution
        self.fps = fps
        self.max_retries = max_retries

        self._cap: Optional[cv2.VideoCapture] = None
        self._lock = threading.Lock()

        self._open()
        logging.info(f"Camera '{name}' initialized (backend=opencv, id={device_id}, res={resolution}, fps={fps})")

    def _open(self) -> None:
        for attempt in range(self.max_retries):
            if attempt > 0:
                wait_time = min(2 ** attempt, 10)
                logging.info(
                    f"Retrying camera open (attempt {attempt + 1}/{self.max_retries}) after {wait_time}s"
                )
                time.sleep(wait_time)

            cap = cv2.VideoCapture(self.device_id)
            if cap.isOpened():
                # Only USB cameras accept capture properties
                if isinstance(self.device_id, int):
                    cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.resolution[0])
                    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.resolution[1])
                    cap.set(cv2.CAP_PROP_FPS, self.fps)
                    # One-frame buffer so each scan sees the current shelf
                    cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)
                self._cap = cap
                return
            cap.release()
            logging.warning(f"Failed to open camera device {self.device_id}")

        raise RuntimeError(f"Failed to open camera device {self.device_id} after {self.max_retries} attempts")

    def read(self) -> Tuple[bool, Optional[np.ndarray]]:
        with self._lock:
            if self._cap is None or not self._cap.isOpened():
                logging.warning("Camera not opened, attempting to reopen")
                try:
                    self._open()
                except RuntimeError:
                    return False, None

            ret, frame = self._cap.read()
            if not ret:
                return False, None
            return True, frame

    def release(self) -> None:
        with self._lock:
            if self._cap is not None:
                self._cap.release()
                self._cap = None
                logging.info(f"Camera '{self.name}' released")
