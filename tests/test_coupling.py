"""
Tests for automatic check-in/check-out driven by presence events.
"""

import pytest

from conftest import item_payload
from inventory.ledger import InventoryLedger
from models.inventory import ItemState
from models.presence_event import PresenceEvent, PresenceKind
from runtime.services import PresenceInventoryBridge


@pytest.fixture
def ledger(clock):
    return InventoryLedger(clock=clock)


@pytest.fixture
def wired(make_tracker, ledger):
    tracker = make_tracker(grace_period_ms=200)
    PresenceInventoryBridge(ledger).attach(tracker)
    return tracker, ledger


class TestBridgeWithTracker:
    """End-to-end: scans drive ledger transitions."""

    def test_disappearance_checks_out_item(self, wired, detector, clock):
        tracker, ledger = wired
        ledger.add_item("apple-001", "Apple")
        detector.show(item_payload("apple-001", "Apple"))
        tracker.scan_once()

        detector.show()
        clock.advance(ms=10)
        tracker.scan_once()
        assert ledger.get_item("apple-001").state == ItemState.ON_SHELF

        clock.advance(ms=200)
        tracker.scan_once()
        assert ledger.get_item("apple-001").state == ItemState.CHECKED_OUT

    def test_appearance_returns_checked_out_item(self, wired, detector):
        tracker, ledger = wired
        ledger.add_item("apple-001", "Apple")
        ledger.checkout_item("apple-001")

        detector.show(item_payload("apple-001", "Apple"))
        tracker.scan_once()

        item = ledger.get_item("apple-001")
        assert item.state == ItemState.ON_SHELF
        assert item.checked_out_at is None

    def test_flicker_inside_grace_period_keeps_item_on_shelf(self, wired, detector, clock):
        tracker, ledger = wired
        ledger.add_item("apple-001", "Apple")
        payload = item_payload("apple-001", "Apple")
        detector.show(payload)
        tracker.scan_once()

        detector.show()
        clock.advance(ms=100)
        tracker.scan_once()
        detector.show(payload)
        clock.advance(ms=150)
        tracker.scan_once()

        assert ledger.get_item("apple-001").state == ItemState.ON_SHELF

    def test_unknown_item_does_not_touch_ledger(self, wired, detector, clock):
        tracker, ledger = wired
        before = ledger.get_inventory().to_dict()

        detector.show(item_payload("ghost-001", "Ghost"))
        tracker.scan_once()
        detector.show()
        clock.advance(ms=10)
        tracker.scan_once()
        clock.advance(ms=250)
        tracker.scan_once()

        assert ledger.get_inventory().to_dict() == before
        assert "ghost-001" not in ledger

    def test_opaque_content_ignored(self, wired, detector):
        tracker, ledger = wired
        ledger.add_item("apple-001", "Apple")
        ledger.checkout_item("apple-001")

        detector.show("apple-001")
        tracker.scan_once()

        assert ledger.get_item("apple-001").state == ItemState.CHECKED_OUT


class TestBridgeEvents:
    """Direct event handling."""

    def _event(self, kind, item_id, clock):
        return PresenceEvent(
            kind=kind,
            content=item_payload(item_id, "X"),
            item_id=item_id,
            item_name="X",
            timestamp=clock.now,
        )

    def test_appearance_of_on_shelf_item_is_noop(self, ledger, clock):
        ledger.add_item("apple-001", "Apple")
        checked_in = ledger.get_item("apple-001").checked_in_at
        clock.advance(seconds=1)

        result = PresenceInventoryBridge(ledger).handle_event(
            self._event(PresenceKind.APPEARED, "apple-001", clock)
        )

        assert result is None
        assert ledger.get_item("apple-001").checked_in_at == checked_in

    def test_disappearance_of_checked_out_item_is_noop(self, ledger, clock):
        ledger.add_item("apple-001", "Apple")
        checked_out_at = ledger.checkout_item("apple-001").item.checked_out_at
        clock.advance(seconds=1)

        result = PresenceInventoryBridge(ledger).handle_event(
            self._event(PresenceKind.DISAPPEARED, "apple-001", clock)
        )

        assert result is None
        assert ledger.get_item("apple-001").checked_out_at == checked_out_at

    def test_manual_checkout_before_disappearance_keeps_user_timestamp(self, clock):
        class InterleavedLedger(InventoryLedger):
            """A manual checkout lands just before the bridge transitions."""

            def checkout_item(self, item_id, only_if=None):
                if only_if is not None:
                    super().checkout_item(item_id)
                    clock.advance(seconds=5)
                return super().checkout_item(item_id, only_if=only_if)

        ledger = InterleavedLedger(clock=clock)
        ledger.add_item("apple-001", "Apple")
        manual_at = clock.now

        result = PresenceInventoryBridge(ledger).handle_event(
            self._event(PresenceKind.DISAPPEARED, "apple-001", clock)
        )

        assert result is None
        assert ledger.get_item("apple-001").checked_out_at == manual_at

    def test_manual_return_before_appearance_keeps_user_timestamp(self, clock):
        class InterleavedLedger(InventoryLedger):
            def return_item(self, item_id, only_if=None):
                if only_if is not None:
                    super().return_item(item_id)
                    clock.advance(seconds=5)
                return super().return_item(item_id, only_if=only_if)

        ledger = InterleavedLedger(clock=clock)
        ledger.add_item("apple-001", "Apple")
        ledger.checkout_item("apple-001")
        manual_at = clock.now

        result = PresenceInventoryBridge(ledger).handle_event(
            self._event(PresenceKind.APPEARED, "apple-001", clock)
        )

        assert result is None
        assert ledger.get_item("apple-001").checked_in_at == manual_at

    def test_unknown_item_logged(self, ledger, clock, caplog):
        with caplog.at_level("WARNING"):
            result = PresenceInventoryBridge(ledger).handle_event(
                self._event(PresenceKind.APPEARED, "ghost-001", clock)
            )

        assert result is None
        assert "unknown item: ghost-001" in caplog.text

    def test_components_usable_without_bridge(self, make_tracker, detector, ledger, clock):
        tracker = make_tracker(grace_period_ms=0)
        ledger.add_item("apple-001", "Apple")

        detector.show(item_payload("apple-001", "Apple"))
        tracker.scan_once()
        detector.show()
        tracker.scan_once()

        assert ledger.get_item("apple-001").state == ItemState.ON_SHELF
