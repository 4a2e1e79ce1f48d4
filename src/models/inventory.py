"""
Inventory item models.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional

from .timestamps import format_timestamp


class ItemState(str, Enum):
    """Lifecycle state of an inventory item."""
    ON_SHELF = "on_shelf"
    CHECKED_OUT = "checked_out"


@dataclass
class InventoryItem:
    """
    An item tracked by the inventory ledger.

    Attributes:
        item_id: Unique key, assigned by the caller.
        item_name: Human-readable label.
        state: Current lifecycle state.
        checked_in_at: Last transition into ON_SHELF.
        checked_out_at: Last transition into CHECKED_OUT; None while on the shelf.
    """
    item_id: str
    item_name: str
    state: ItemState = ItemState.ON_SHELF
    checked_in_at: Optional[datetime] = None
    checked_out_at: Optional[datetime] = None

    def copy(self) -> "InventoryItem":
        return replace(self)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        d = {
            "item_id": self.item_id,
            "item_name": self.item_name,
            "state": self.state.value,
            "checked_in_at": format_timestamp(self.checked_in_at),
        }
        if self.checked_out_at is not None:
            d["checked_out_at"] = format_timestamp(self.checked_out_at)
        return d


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of a checkout or return: the updated item and its prior state."""
    item: InventoryItem
    previous_state: ItemState

    def to_dict(self) -> dict:
        d = self.item.to_dict()
        d["previous_state"] = self.previous_state.value
        return d


@dataclass(frozen=True)
class InventorySnapshot:
    """Result of a ledger listing."""
    items: list
    total_count: int
    on_shelf_count: int
    checked_out_count: int

    def to_dict(self) -> dict:
        return {
            "items": [item.to_dict() for item in self.items],
            "total_count": self.total_count,
            "on_shelf_count": self.on_shelf_count,
            "checked_out_count": self.checked_out_count,
        }
