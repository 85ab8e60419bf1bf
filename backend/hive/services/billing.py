# Overview: Pure billing math for customer sessions; no database or clock access.

"""
Billing Engine

Time is billed per started hour up to the cap threshold; longer stays pay a
flat amount. Items are billed at their snapshotted price. All amounts are
integer cents.

Every pricing parameter arrives as an argument. Callers read settings and
config and pass them in; nothing here looks them up.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from .ledger import SessionLineItem


DEFAULT_CAP_HOURS = 4
DEFAULT_CAP_CENTS = 10_000


@dataclass(frozen=True)
class BillingPolicy:
    hourly_rate_cents: int
    cap_hours: int = DEFAULT_CAP_HOURS
    cap_cents: int = DEFAULT_CAP_CENTS


@dataclass(frozen=True)
class Bill:
    duration_minutes: int
    time_cost_cents: int
    items_cost_cents: int
    total_cost_cents: int
    discount_cents: int
    final_amount_cents: int

    def to_dict(self) -> dict:
        return {
            "duration_minutes": self.duration_minutes,
            "time_cost_cents": self.time_cost_cents,
            "items_cost_cents": self.items_cost_cents,
            "total_cost_cents": self.total_cost_cents,
            "discount_cents": self.discount_cents,
            "final_amount_cents": self.final_amount_cents,
        }


def duration_minutes(entry_time: datetime, now: datetime) -> int:
    """Whole minutes elapsed, truncated; 0 if now precedes entry_time."""
    seconds = (now - entry_time).total_seconds()
    if seconds <= 0:
        return 0
    return int(seconds // 60)


def compute_time_cost(
    entry_time: datetime,
    now: datetime,
    hourly_rate_cents: int,
    *,
    cap_hours: int = DEFAULT_CAP_HOURS,
    cap_cents: int = DEFAULT_CAP_CENTS,
) -> int:
    minutes = duration_minutes(entry_time, now)
    if minutes <= 0:
        return 0

    # hours > cap_hours, compared in minutes to stay exact
    if minutes > cap_hours * 60:
        return cap_cents

    hours_charged = -(-minutes // 60)
    return hours_charged * hourly_rate_cents


def compute_items_cost(lines: Iterable[SessionLineItem]) -> int:
    return sum(line.price_cents * line.quantity for line in lines)


def compute_bill(
    entry_time: datetime,
    now: datetime,
    policy: BillingPolicy,
    lines: Iterable[SessionLineItem],
    discount_cents: int = 0,
) -> Bill:
    """
    Full bill for a session at `now`.

    final = total - discount exactly. The discount is not clamped here, so an
    oversized discount yields a negative final amount; callers validate.
    """
    time_cost = compute_time_cost(
        entry_time,
        now,
        policy.hourly_rate_cents,
        cap_hours=policy.cap_hours,
        cap_cents=policy.cap_cents,
    )
    items_cost = compute_items_cost(lines)
    total = time_cost + items_cost
    return Bill(
        duration_minutes=duration_minutes(entry_time, now),
        time_cost_cents=time_cost,
        items_cost_cents=items_cost,
        total_cost_cents=total,
        discount_cents=discount_cents,
        final_amount_cents=total - discount_cents,
    )
