# Overview: Service-layer operations for customer sessions; encapsulates business logic and database work.

"""
Customer Session Service

WHY: A session is the billing unit. Staff start it on arrival, attach items
while the customer stays, and close it exactly once by checkout or cancel.

LIFECYCLE:
- active -> completed (checkout: bill frozen, exit_time set)
- active -> cancelled (cancel: exit_time set, no billing fields)
Terminal sessions reject every mutation with InvalidStateTransition.

Each operation reads the session, derives the new state with the pure
ledger/billing functions, and commits a single write.
"""

from __future__ import annotations

from datetime import datetime

from flask import current_app

from ..exceptions import InvalidInput, InvalidStateTransition, NoChanges, NotFound
from ..extensions import db
from ..models import CustomerSession
from ..models.sessions import (
    PAYMENT_METHODS,
    SESSION_STATUSES,
    STATUS_ACTIVE,
    STATUS_CANCELLED,
    STATUS_COMPLETED,
)
from . import catalog_service, change_feed, settings_service
from .billing import Bill, compute_bill
from .concurrency import check_version, lock_for_update, run_with_retry
from .ledger import add_line, apply_line_edits, lines_equal, lines_from_json, lines_to_json
from hive.time_utils import utcnow


def _load(session_id: int, *, lock: bool = False) -> CustomerSession:
    query = db.session.query(CustomerSession).filter_by(id=session_id)
    if lock:
        query = lock_for_update(query)
    record = query.first()
    if record is None:
        raise NotFound("Session not found", details={"session_id": session_id})
    return record


def _require_active(record: CustomerSession, action: str) -> None:
    if record.status != STATUS_ACTIVE:
        raise InvalidStateTransition(
            f"Cannot {action} a {record.status} session",
            details={"session_id": record.id, "status": record.status},
        )


def _validate_discount(discount_cents) -> int:
    if discount_cents is None:
        return 0
    if isinstance(discount_cents, bool) or not isinstance(discount_cents, int):
        raise InvalidInput("discount_cents must be an integer")
    if discount_cents < 0:
        raise InvalidInput("discount_cents must be >= 0")
    return discount_cents


def start_session(name: str, *, now: datetime | None = None) -> CustomerSession:
    name = (name or "").strip() if isinstance(name, str) else ""
    if not name:
        raise InvalidInput("Customer name cannot be empty")

    record = CustomerSession(
        name=name,
        entry_time=now or utcnow(),
        exit_time=None,
        status=STATUS_ACTIVE,
        items=[],
    )
    db.session.add(record)
    db.session.commit()

    change_feed.notify(change_feed.SESSIONS)
    current_app.logger.info("Session %s started for %r", record.id, record.name)
    return record


def get_session(session_id: int) -> CustomerSession:
    return _load(session_id)


def list_sessions(status: str | None = None) -> list[CustomerSession]:
    """Newest first. status filters to one lifecycle state."""
    query = db.session.query(CustomerSession)
    if status is not None:
        if status not in SESSION_STATUSES:
            raise InvalidInput(f"status must be one of: {', '.join(SESSION_STATUSES)}")
        query = query.filter_by(status=status)
    return query.order_by(CustomerSession.entry_time.desc(), CustomerSession.id.desc()).all()


def add_item(
    session_id: int,
    item_id,
    quantity: int,
    *,
    expected_version: int | None = None,
) -> CustomerSession:
    """Merge a catalog item into the session's lines."""
    def _op():
        record = _load(session_id, lock=True)
        check_version(record, expected_version)
        _require_active(record, "add items to")

        item = catalog_service.get_item(item_id)
        record.items = lines_to_json(add_line(lines_from_json(record.items), item, quantity))

        db.session.commit()
        return record

    record = run_with_retry(_op)
    change_feed.notify(change_feed.SESSIONS)
    return record


def update_items(
    session_id: int,
    edited: list,
    *,
    expected_version: int | None = None,
) -> CustomerSession:
    """
    Commit a bulk quantity edit.

    Raises NoChanges when the reconciled list equals the stored one, so the
    caller never issues a no-op write.
    """
    if not isinstance(edited, list):
        raise InvalidInput("items must be a list")

    def _op():
        record = _load(session_id, lock=True)
        check_version(record, expected_version)
        _require_active(record, "edit items on")

        current = lines_from_json(record.items)
        reconciled = apply_line_edits(current, edited)
        if lines_equal(current, reconciled):
            raise NoChanges("No changes to save")

        record.items = lines_to_json(reconciled)
        db.session.commit()
        return record

    record = run_with_retry(_op)
    change_feed.notify(change_feed.SESSIONS)
    return record


def preview_bill(session_id: int, *, discount_cents: int = 0, now: datetime | None = None) -> Bill:
    """Live bill for the checkout dialog. Writes nothing."""
    discount_cents = _validate_discount(discount_cents)
    record = _load(session_id)
    _require_active(record, "bill")

    return compute_bill(
        record.entry_time,
        now or utcnow(),
        settings_service.billing_policy(),
        lines_from_json(record.items),
        discount_cents,
    )


def checkout(
    session_id: int,
    *,
    discount_cents: int,
    payment_method: str,
    expected_version: int | None = None,
    now: datetime | None = None,
) -> tuple[CustomerSession, Bill]:
    """
    Finalize an active session.

    Duration and bill are recomputed at the moment of confirmation, never
    taken from an earlier preview.
    """
    discount_cents = _validate_discount(discount_cents)
    if payment_method not in PAYMENT_METHODS:
        raise InvalidInput(f"payment_method must be one of: {', '.join(PAYMENT_METHODS)}")

    policy = settings_service.billing_policy()

    def _op():
        record = _load(session_id, lock=True)
        check_version(record, expected_version)
        _require_active(record, "check out")

        checkout_at = now or utcnow()
        bill = compute_bill(record.entry_time, checkout_at, policy, lines_from_json(record.items), discount_cents)

        record.status = STATUS_COMPLETED
        record.exit_time = checkout_at
        record.total_cost_cents = bill.total_cost_cents
        record.discount_cents = bill.discount_cents
        record.final_amount_cents = bill.final_amount_cents
        record.payment_method = payment_method
        record.duration_minutes = bill.duration_minutes

        db.session.commit()
        return record, bill

    record, bill = run_with_retry(_op)
    change_feed.notify(change_feed.SESSIONS)
    current_app.logger.info(
        "Session %s checked out: %d cents via %s", record.id, bill.final_amount_cents, payment_method
    )
    return record, bill


def cancel(
    session_id: int,
    *,
    expected_version: int | None = None,
    now: datetime | None = None,
) -> CustomerSession:
    def _op():
        record = _load(session_id, lock=True)
        check_version(record, expected_version)
        _require_active(record, "cancel")

        record.status = STATUS_CANCELLED
        record.exit_time = now or utcnow()

        db.session.commit()
        return record

    record = run_with_retry(_op)
    change_feed.notify(change_feed.SESSIONS)
    current_app.logger.info("Session %s cancelled", record.id)
    return record


def clear_all_sessions() -> int:
    """Delete every session in one transaction. Returns the count."""
    count = db.session.query(CustomerSession).delete(synchronize_session=False)
    db.session.commit()

    if count:
        change_feed.notify(change_feed.SESSIONS)
    current_app.logger.info("Cleared %d sessions", count)
    return count
