"""
In-memory inventory ledger.

The ledger is the authoritative record of which items belong to the shelf
and whether each one is on the shelf or checked out. All state lives in a
dict guarded by a single lock; nothing is persisted across restarts.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable, Dict, Optional, Union

from models.inventory import InventoryItem, InventorySnapshot, ItemState, TransitionResult
from models.timestamps import utc_now

from .errors import InvalidStateError, ItemAlreadyExistsError, ItemNotFoundError


def parse_state(state: Union[str, ItemState, None]) -> Optional[ItemState]:
    """Convert a state filter to ItemState; None and "" mean no filter."""
    if state is None or state == "":
        return None
    if isinstance(state, ItemState):
        return state
    try:
        return ItemState(state)
    except ValueError:
        valid = ", ".join(s.value for s in ItemState)
        raise InvalidStateError(f"invalid state '{state}', must be one of: {valid}") from None


class InventoryLedger:
    """
    Thread-safe store of InventoryItem keyed by item_id.

    Mutations are atomic with respect to each other. Items handed out are
    copies, so callers never observe a later update through an old result.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self.clock = clock
        self._items: Dict[str, InventoryItem] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, item_id: str) -> bool:
        with self._lock:
            return item_id in self._items

    def add_item(self, item_id: str, item_name: str) -> InventoryItem:
        """
        Create an item on the shelf.

        Raises:
            ValueError: item_id or item_name is empty.
            ItemAlreadyExistsError: item_id is already in the ledger.
        """
        if not item_id:
            raise ValueError("item_id is required")
        if not item_name:
            raise ValueError("item_name is required")

        with self._lock:
            if item_id in self._items:
                raise ItemAlreadyExistsError(item_id)
            item = InventoryItem(
                item_id=item_id,
                item_name=item_name,
                state=ItemState.ON_SHELF,
                checked_in_at=self.clock(),
            )
            self._items[item_id] = item
            result = item.copy()

        logging.info(f"Added item to inventory: {item_id} ({item_name})")
        return result

    def get_item(self, item_id: str) -> InventoryItem:
        with self._lock:
            item = self._items.get(item_id)
            if item is None:
                raise ItemNotFoundError(item_id)
            return item.copy()

    def get_inventory(self, state: Union[str, ItemState, None] = None) -> InventorySnapshot:
        """
        List items, optionally filtered to one state.

        Items are sorted by item_id. Counts describe the returned list, so a
        filtered listing reports zero for the other state.
        """
        state_filter = parse_state(state)
        with self._lock:
            items = [
                item.copy()
                for item_id, item in sorted(self._items.items())
                if state_filter is None or item.state == state_filter
            ]

        on_shelf = sum(1 for item in items if item.state == ItemState.ON_SHELF)
        return InventorySnapshot(
            items=items,
            total_count=len(items),
            on_shelf_count=on_shelf,
            checked_out_count=len(items) - on_shelf,
        )

    def checkout_item(self, item_id: str, only_if: Optional[ItemState] = None) -> Optional[TransitionResult]:
        """
        Mark an item checked out. Idempotent; refreshes checked_out_at.

        With only_if, the transition happens only when the item is currently
        in that state (checked under the same lock); otherwise returns None.
        """
        with self._lock:
            item = self._require(item_id)
            previous = item.state
            if only_if is not None and previous != only_if:
                return None
            item.state = ItemState.CHECKED_OUT
            item.checked_out_at = self.clock()
            result = TransitionResult(item=item.copy(), previous_state=previous)

        logging.info(f"Checked out item: {item_id} (previous state: {previous.value})")
        return result

    def return_item(self, item_id: str, only_if: Optional[ItemState] = None) -> Optional[TransitionResult]:
        """Put an item back on the shelf. Idempotent; clears checked_out_at. See checkout_item for only_if."""
        with self._lock:
            item = self._require(item_id)
            previous = item.state
            if only_if is not None and previous != only_if:
                return None
            item.state = ItemState.ON_SHELF
            item.checked_in_at = self.clock()
            item.checked_out_at = None
            result = TransitionResult(item=item.copy(), previous_state=previous)

        logging.info(f"Returned item: {item_id} (previous state: {previous.value})")
        return result

    def remove_item(self, item_id: str) -> InventoryItem:
        """Delete an item regardless of its state; returns the removed item."""
        with self._lock:
            item = self._require(item_id)
            del self._items[item_id]

        logging.info(f"Removed item from inventory: {item_id}")
        return item

    def _require(self, item_id: str) -> InventoryItem:
        item = self._items.get(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item
