"""
Detection models for QR decoding results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple


@dataclass(frozen=True)
class BoundingBox:
    """
    An axis-aligned bounding box in pixel coordinates.

    Attributes:
        x1: Left edge x coordinate.
        y1: Top edge y coordinate.
        x2: Right edge x coordinate.
        y2: Bottom edge y coordinate.
    """
    x1: float
    y1: float
    x2: float
    y2: float

    def as_tuple(self) -> Tuple[float, float, float, float]:
        """Return as (x1, y1, x2, y2) tuple."""
        return (self.x1, self.y1, self.x2, self.y2)

    @classmethod
    def from_points(cls, points: Sequence[Tuple[float, float]]) -> "BoundingBox":
        """Create the enclosing box of a polygon (e.g. a QR code quad)."""
        xs = [float(p[0]) for p in points]
        ys = [float(p[1]) for p in points]
        return cls(x1=min(xs), y1=min(ys), x2=max(xs), y2=max(ys))


@dataclass(frozen=True)
class QRDetection:
    """
    A single decoded QR code.

    Attributes:
        content: Decoded text payload.
        bbox: Bounding box in pixel coordinates.
    """
    content: str
    bbox: BoundingBox

    def to_dict(self) -> dict:
        return {
            "content": self.content,
            "bbox": list(self.bbox.as_tuple()),
        }
