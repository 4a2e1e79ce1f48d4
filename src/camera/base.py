"""
Camera interface.

The presence tracker never talks to a camera directly; it hands the camera
to a QR detector, which grabs a frame on demand.
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np


class Camera:
    name: str = "camera"

    def read(self) -> Tuple[bool, Optional[np.ndarray]]:
        raise NotImplementedError

    def release(self) -> None:
        raise NotImplementedError
