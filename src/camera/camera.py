"""
Camera factory.

This is the single entrypoint the rest of the project should use to create a camera.
"""

from __future__ import annotations

from typing import Any, Dict

from .base import Camera
from .backends.opencv import OpenCVCamera


def create_camera(camera_cfg: Dict[str, Any]) -> Camera:
    backend = camera_cfg.get("backend", "opencv")
    if backend != "opencv":
        raise ValueError(f"Unsupported camera backend: {backend}")

    return OpenCVCamera(
        name=camera_cfg.get("name", "shelf-camera"),
        device_id=camera_cfg.get("device_id", 0),
        resolution=tuple(camera_cfg.get("resolution", [1280, 720])),
        fps=int(camera_cfg.get("fps", 30)),
    )
