"""
Models for QR codes currently visible on the shelf.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .timestamps import format_timestamp


@dataclass(frozen=True)
class ItemQRData:
    """
    Structured payload encoded into an item's QR code.

    Wire format: ``{"item_id": "<string>", "item_name": "<string>"}``.
    """
    item_id: str
    item_name: str

    def to_json(self) -> str:
        return json.dumps(
            {"item_id": self.item_id, "item_name": self.item_name},
            separators=(",", ":"),
        )

    @classmethod
    def parse(cls, content: str) -> Optional["ItemQRData"]:
        """
        Parse a decoded payload.

        Returns None for anything that is not a JSON object carrying string
        ``item_id`` and ``item_name`` fields; such payloads are tracked as
        opaque content.
        """
        try:
            data = json.loads(content)
        except (TypeError, ValueError):
            return None
        if not isinstance(data, dict):
            return None
        item_id = data.get("item_id")
        item_name = data.get("item_name")
        if not isinstance(item_id, str) or not isinstance(item_name, str):
            return None
        if not item_id:
            return None
        return cls(item_id=item_id, item_name=item_name)


@dataclass
class DetectedCode:
    """
    A QR code that is visible, or still inside its grace period.

    Attributes:
        content: Raw decoded payload; the key in the tracker's visible set.
        item_id: Parsed item id ("" when content is not item data).
        item_name: Parsed item name ("" when content is not item data).
        first_seen: When the code was first detected.
        last_seen: Most recent detection.
        pending_removal: True once the code went missing but the grace
            period has not elapsed yet.
        disappeared_at: When pending_removal became True; None otherwise.
    """
    content: str
    first_seen: datetime
    last_seen: datetime
    item_id: str = ""
    item_name: str = ""
    pending_removal: bool = False
    disappeared_at: Optional[datetime] = None

    @property
    def is_item(self) -> bool:
        return bool(self.item_id)

    def describe(self) -> str:
        if self.item_id:
            return f"{self.item_id} ({self.item_name})"
        return f"unknown content - {self.content}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "content": self.content,
            "item_id": self.item_id,
            "item_name": self.item_name,
            "first_seen": format_timestamp(self.first_seen),
            "last_seen": format_timestamp(self.last_seen),
            "pending_removal": self.pending_removal,
            "disappeared_at": format_timestamp(self.disappeared_at),
        }
