"""
Command dispatcher.

Decodes raw command dicts into typed requests and routes them to the ledger,
the presence tracker, or the QR encoder. Holds no state of its own.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from inventory.ledger import InventoryLedger
from tracking.tracker import PresenceTracker

from .models import (
    AddItemCommand,
    CheckoutItemCommand,
    Command,
    CommandValidationError,
    EchoCommand,
    GenerateQRCommand,
    GetInventoryCommand,
    GetVisibleCodesCommand,
    PingCommand,
    RemoveItemCommand,
    ReturnItemCommand,
    ScanNowCommand,
    parse_command,
)
from .qr import generate_item_qr


class CommandDispatcher:
    """
    Routes commands to core operations.

    Errors from the core (ItemNotFoundError, ItemAlreadyExistsError,
    InvalidStateError) propagate unchanged; malformed payloads raise
    CommandValidationError before any core call.
    """

    def __init__(
        self,
        ledger: InventoryLedger,
        tracker: Optional[PresenceTracker] = None,
        qr_generator: Callable[[str, str], Dict[str, Any]] = generate_item_qr,
    ):
        self.ledger = ledger
        self.tracker = tracker
        self.qr_generator = qr_generator

    def dispatch(self, raw: Dict[str, Any]) -> Dict[str, Any]:
        return self.execute(parse_command(raw))

    def execute(self, cmd: Command) -> Dict[str, Any]:
        if isinstance(cmd, PingCommand):
            return {"status": "ok", "message": "Inventory keeper is running!"}

        if isinstance(cmd, EchoCommand):
            logging.info("Echo command received")
            message = cmd.message if cmd.message is not None else "no message provided"
            return {"command": "echo", "message": message, "status": "success"}

        if isinstance(cmd, GenerateQRCommand):
            logging.info("Generate QR command received")
            result = self.qr_generator(cmd.item_id, cmd.item_name)
            logging.info(f"Generated QR code for item: {cmd.item_id}")
            return result

        if isinstance(cmd, AddItemCommand):
            return self.ledger.add_item(cmd.item_id, cmd.item_name).to_dict()

        if isinstance(cmd, GetInventoryCommand):
            return self.ledger.get_inventory(cmd.state).to_dict()

        if isinstance(cmd, CheckoutItemCommand):
            return self.ledger.checkout_item(cmd.item_id).to_dict()

        if isinstance(cmd, ReturnItemCommand):
            return self.ledger.return_item(cmd.item_id).to_dict()

        if isinstance(cmd, RemoveItemCommand):
            self.ledger.remove_item(cmd.item_id)
            return {"item_id": cmd.item_id, "removed": True}

        if isinstance(cmd, GetVisibleCodesCommand):
            tracker = self._require_tracker(cmd.command)
            codes = tracker.get_visible_codes()
            return {"codes": [c.to_dict() for c in codes], "count": len(codes)}

        if isinstance(cmd, ScanNowCommand):
            tracker = self._require_tracker(cmd.command)
            events = tracker.scan_once()
            return {
                "scanned": events is not None,
                "events": [e.to_dict() for e in events or []],
                "visible_count": len(tracker.get_visible_codes()),
            }

        raise CommandValidationError(f"unknown command: {cmd.command}")

    def _require_tracker(self, name: str) -> PresenceTracker:
        if self.tracker is None:
            raise CommandValidationError(f"{name} requires QR code monitoring to be configured")
        return self.tracker
