"""
Inventory error taxonomy.
"""

from __future__ import annotations


class InventoryError(Exception):
    """Base class for ledger errors."""


class ItemNotFoundError(InventoryError, KeyError):
    def __init__(self, item_id: str):
        super().__init__(item_id)
        self.item_id = item_id

    def __str__(self) -> str:
        return f"item not found: {self.item_id}"


class ItemAlreadyExistsError(InventoryError):
    def __init__(self, item_id: str):
        super().__init__(f"item already exists: {item_id}")
        self.item_id = item_id


class InvalidStateError(InventoryError, ValueError):
    """Raised for an unknown state filter."""
