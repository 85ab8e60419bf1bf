"""
Customer session lifecycle tests.

Every test passes an explicit `now` so durations are exact.
"""

from datetime import datetime, timedelta

import pytest

from hive.exceptions import (
    ConcurrentModification,
    InvalidInput,
    InvalidQuantity,
    InvalidStateTransition,
    NoChanges,
    NotFound,
    UnknownLineItem,
)
from hive.models import CustomerSession
from hive.services import session_service, settings_service


T0 = datetime(2026, 10, 19, 9, 0, 0)


def minutes_later(minutes: int) -> datetime:
    return T0 + timedelta(minutes=minutes)


@pytest.fixture
def alice(db_session):
    return session_service.start_session("Alice", now=T0)


class TestStart:
    def test_new_session_is_active_and_empty(self, alice):
        assert alice.status == "active"
        assert alice.entry_time == T0
        assert alice.exit_time is None
        assert alice.items == []
        assert alice.total_cost_cents is None
        assert alice.final_amount_cents is None

    def test_name_is_trimmed(self, db_session):
        record = session_service.start_session("  Bob  ", now=T0)
        assert record.name == "Bob"

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name_rejected(self, db_session, name):
        with pytest.raises(InvalidInput):
            session_service.start_session(name, now=T0)
        assert db_session.query(CustomerSession).count() == 0


class TestItems:
    def test_add_snapshots_catalog_item(self, alice, coffee):
        record = session_service.add_item(alice.id, coffee.id, 2)
        assert record.items == [
            {"item_id": str(coffee.id), "name": "Coffee", "price_cents": 3000, "quantity": 2},
        ]

    def test_repeat_add_merges(self, alice, coffee):
        session_service.add_item(alice.id, coffee.id, 1)
        record = session_service.add_item(alice.id, coffee.id, 2)
        assert len(record.items) == 1
        assert record.items[0]["quantity"] == 3

    def test_add_zero_quantity_rejected(self, alice, coffee):
        with pytest.raises(InvalidQuantity):
            session_service.add_item(alice.id, coffee.id, 0)

    def test_add_unknown_catalog_item(self, alice):
        with pytest.raises(NotFound):
            session_service.add_item(alice.id, 9999, 1)

    def test_add_to_missing_session(self, db_session, coffee):
        with pytest.raises(NotFound):
            session_service.add_item(9999, coffee.id, 1)

    def test_price_change_does_not_touch_existing_lines(self, alice, coffee, db_session):
        session_service.add_item(alice.id, coffee.id, 1)
        coffee.price_cents = 9900
        db_session.commit()

        record = session_service.get_session(alice.id)
        assert record.items[0]["price_cents"] == 3000

    def test_bulk_edit(self, alice, coffee, tea):
        session_service.add_item(alice.id, coffee.id, 2)
        session_service.add_item(alice.id, tea.id, 1)

        record = session_service.update_items(alice.id, [
            {"item_id": str(coffee.id), "quantity": 0},
            {"item_id": str(tea.id), "quantity": 3},
        ])
        assert record.items == [
            {"item_id": str(tea.id), "name": "Tea", "price_cents": 2500, "quantity": 3},
        ]

    def test_bulk_edit_without_changes(self, alice, coffee):
        session_service.add_item(alice.id, coffee.id, 2)
        with pytest.raises(NoChanges):
            session_service.update_items(alice.id, [{"item_id": str(coffee.id), "quantity": 2}])

    def test_bulk_edit_unknown_line(self, alice, coffee, tea):
        session_service.add_item(alice.id, coffee.id, 1)
        with pytest.raises(UnknownLineItem):
            session_service.update_items(alice.id, [{"item_id": str(tea.id), "quantity": 1}])

    def test_bulk_edit_requires_list(self, alice):
        with pytest.raises(InvalidInput):
            session_service.update_items(alice.id, {"item_id": "1", "quantity": 1})


class TestCheckout:
    def test_alice_pays_for_seventy_minutes_and_three_items(self, alice, coffee, tea):
        session_service.add_item(alice.id, coffee.id, 2)
        session_service.add_item(alice.id, tea.id, 1)

        record, bill = session_service.checkout(
            alice.id,
            discount_cents=1000,
            payment_method="cash",
            now=minutes_later(70),
        )

        assert bill.time_cost_cents == 5000
        assert bill.items_cost_cents == 8500
        assert record.status == "completed"
        assert record.exit_time == minutes_later(70)
        assert record.duration_minutes == 70
        assert record.total_cost_cents == 13500
        assert record.discount_cents == 1000
        assert record.final_amount_cents == 12500
        assert record.payment_method == "cash"

    def test_long_stay_pays_flat_cap(self, alice):
        record, bill = session_service.checkout(
            alice.id, discount_cents=0, payment_method="instapay", now=minutes_later(300),
        )
        assert bill.time_cost_cents == 10000
        assert record.final_amount_cents == 10000

    def test_uses_current_hourly_rate(self, alice):
        settings_service.update_settings({"hourly_rate_cents": 4000})
        _, bill = session_service.checkout(
            alice.id, discount_cents=0, payment_method="cash", now=minutes_later(90),
        )
        assert bill.time_cost_cents == 8000

    def test_oversized_discount_goes_negative(self, alice):
        record, _ = session_service.checkout(
            alice.id, discount_cents=5000, payment_method="cash", now=minutes_later(30),
        )
        assert record.final_amount_cents == -2500

    def test_negative_discount_rejected(self, alice):
        with pytest.raises(InvalidInput):
            session_service.checkout(alice.id, discount_cents=-1, payment_method="cash", now=minutes_later(30))

    def test_unknown_payment_method_rejected(self, alice):
        with pytest.raises(InvalidInput):
            session_service.checkout(alice.id, discount_cents=0, payment_method="card", now=minutes_later(30))
        assert session_service.get_session(alice.id).status == "active"

    def test_checkout_twice_rejected(self, alice):
        session_service.checkout(alice.id, discount_cents=0, payment_method="cash", now=minutes_later(30))
        with pytest.raises(InvalidStateTransition):
            session_service.checkout(alice.id, discount_cents=0, payment_method="cash", now=minutes_later(40))

    def test_completed_session_rejects_item_changes(self, alice, coffee):
        session_service.checkout(alice.id, discount_cents=0, payment_method="cash", now=minutes_later(30))
        with pytest.raises(InvalidStateTransition):
            session_service.add_item(alice.id, coffee.id, 1)
        with pytest.raises(InvalidStateTransition):
            session_service.cancel(alice.id, now=minutes_later(31))


class TestPreview:
    def test_preview_matches_checkout_without_writing(self, alice, coffee):
        session_service.add_item(alice.id, coffee.id, 1)

        bill = session_service.preview_bill(alice.id, discount_cents=500, now=minutes_later(61))
        assert bill.total_cost_cents == 5000 + 3000
        assert bill.final_amount_cents == 7500

        record = session_service.get_session(alice.id)
        assert record.status == "active"
        assert record.total_cost_cents is None

    def test_preview_on_cancelled_session(self, alice):
        session_service.cancel(alice.id, now=minutes_later(5))
        with pytest.raises(InvalidStateTransition):
            session_service.preview_bill(alice.id, now=minutes_later(6))


class TestCancel:
    def test_cancel_sets_exit_time_only(self, db_session, coffee):
        bob = session_service.start_session("Bob", now=T0)
        session_service.add_item(bob.id, coffee.id, 1)

        record = session_service.cancel(bob.id, now=minutes_later(10))

        assert record.status == "cancelled"
        assert record.exit_time == minutes_later(10)
        assert record.total_cost_cents is None
        assert record.final_amount_cents is None
        assert record.payment_method is None

    def test_cancelled_session_is_terminal(self, alice):
        session_service.cancel(alice.id, now=minutes_later(10))
        with pytest.raises(InvalidStateTransition):
            session_service.checkout(alice.id, discount_cents=0, payment_method="cash", now=minutes_later(11))


class TestVersions:
    def test_each_write_bumps_version(self, alice, coffee):
        assert alice.version_id == 1
        record = session_service.add_item(alice.id, coffee.id, 1, expected_version=1)
        assert record.version_id == 2

    def test_stale_version_rejected(self, alice, coffee):
        session_service.add_item(alice.id, coffee.id, 1, expected_version=1)
        with pytest.raises(ConcurrentModification):
            session_service.add_item(alice.id, coffee.id, 1, expected_version=1)

        assert session_service.get_session(alice.id).items[0]["quantity"] == 1

    @pytest.mark.parametrize("version", ["1", 1.0, True])
    def test_malformed_version_is_invalid_input(self, alice, version):
        with pytest.raises(InvalidInput):
            session_service.cancel(alice.id, expected_version=version, now=minutes_later(5))
        assert session_service.get_session(alice.id).status == "active"

    def test_stale_checkout_rejected(self, alice, coffee):
        session_service.add_item(alice.id, coffee.id, 1)
        with pytest.raises(ConcurrentModification):
            session_service.checkout(
                alice.id,
                discount_cents=0,
                payment_method="cash",
                expected_version=1,
                now=minutes_later(30),
            )


class TestListing:
    def test_newest_first(self, db_session):
        first = session_service.start_session("First", now=T0)
        second = session_service.start_session("Second", now=minutes_later(5))
        assert [s.id for s in session_service.list_sessions()] == [second.id, first.id]

    def test_filter_by_status(self, db_session):
        active = session_service.start_session("Active", now=T0)
        gone = session_service.start_session("Gone", now=T0)
        session_service.cancel(gone.id, now=minutes_later(1))

        assert [s.id for s in session_service.list_sessions(status="active")] == [active.id]
        assert [s.id for s in session_service.list_sessions(status="cancelled")] == [gone.id]

    def test_invalid_status_filter(self, db_session):
        with pytest.raises(InvalidInput):
            session_service.list_sessions(status="paused")

    def test_clear_all(self, db_session):
        session_service.start_session("A", now=T0)
        session_service.start_session("B", now=T0)
        assert session_service.clear_all_sessions() == 2
        assert session_service.list_sessions() == []
