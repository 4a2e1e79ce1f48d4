"""
Inventory module.

The ledger keeps item state; errors live in inventory.errors.
"""

from .errors import InvalidStateError, InventoryError, ItemAlreadyExistsError, ItemNotFoundError
from .ledger import InventoryLedger, parse_state

__all__ = [
    "InventoryLedger",
    "parse_state",
    "InventoryError",
    "ItemNotFoundError",
    "ItemAlreadyExistsError",
    "InvalidStateError",
]
