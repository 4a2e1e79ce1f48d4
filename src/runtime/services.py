from __future__ import annotations

import logging
from typing import Optional

from inventory.errors import ItemNotFoundError
from inventory.ledger import InventoryLedger
from models.inventory import ItemState, TransitionResult
from models.presence_event import PresenceEvent, PresenceKind
from tracking.tracker import PresenceTracker


class PresenceInventoryBridge:
    """
    Applies presence events to the inventory ledger.

    - an item code appearing returns a checked-out item to the shelf
    - an item code confirmed gone (after the grace period) checks out an
      on-shelf item

    Codes without item data, and item ids the ledger does not know, are
    logged and ignored; the bridge never creates items.
    """

    def __init__(self, ledger: InventoryLedger):
        self.ledger = ledger

    def attach(self, tracker: PresenceTracker) -> "PresenceInventoryBridge":
        tracker.add_listener(self.handle_event)
        logging.info("Automatic check-in/check-out enabled")
        return self

    def handle_event(self, event: PresenceEvent) -> Optional[TransitionResult]:
        if not event.item_id:
            return None

        # The state check and the transition share one ledger lock acquisition
        try:
            if event.kind == PresenceKind.APPEARED:
                result = self.ledger.return_item(event.item_id, only_if=ItemState.CHECKED_OUT)
                if result is not None:
                    logging.info(f"Item back on shelf, returned: {event.item_id}")
                return result
            result = self.ledger.checkout_item(event.item_id, only_if=ItemState.ON_SHELF)
            if result is not None:
                logging.info(f"Item left shelf, checked out: {event.item_id}")
            return result
        except ItemNotFoundError:
            logging.warning(f"QR code {event.kind.value} for unknown item: {event.item_id}")
            return None
