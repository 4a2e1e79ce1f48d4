"""
PresenceEvent model for confirmed appearance/disappearance transitions.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .timestamps import format_timestamp


class PresenceKind(str, Enum):
    APPEARED = "appeared"
    DISAPPEARED = "disappeared"


@dataclass(frozen=True)
class PresenceEvent:
    """
    Emitted by the presence tracker for stable transitions only.

    Attributes:
        kind: APPEARED or DISAPPEARED.
        content: Raw QR payload.
        item_id: Parsed item id ("" for opaque content).
        item_name: Parsed item name ("" for opaque content).
        timestamp: Time of the scan that confirmed the transition.
    """
    kind: PresenceKind
    content: str
    item_id: str
    item_name: str
    timestamp: datetime

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "content": self.content,
            "item_id": self.item_id,
            "item_name": self.item_name,
            "timestamp": format_timestamp(self.timestamp),
        }
