# Overview: Daily revenue summary and CSV export over completed sessions.

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from flask import current_app

from ..extensions import db
from ..models import CustomerSession
from ..models.sessions import STATUS_COMPLETED
from hive.time_utils import business_day_bounds, local_today, to_local


CSV_HEADERS = [
    "Customer",
    "Checkout Time",
    "Duration (Minutes)",
    "Subtotal",
    "Discount",
    "Final Amount",
    "Payment Method",
]

_CENTS = Decimal("0.01")


@dataclass
class DailySummary:
    day: date
    sessions: list[CustomerSession]
    total_income_cents: int
    cash_income_cents: int
    instapay_income_cents: int

    @property
    def completed_sessions(self) -> int:
        return len(self.sessions)

    def to_dict(self) -> dict:
        return {
            "day": self.day.isoformat(),
            "completed_sessions": self.completed_sessions,
            "total_income_cents": self.total_income_cents,
            "cash_income_cents": self.cash_income_cents,
            "instapay_income_cents": self.instapay_income_cents,
            "sessions": [s.to_dict() for s in self.sessions],
        }


def _timezone() -> str:
    return current_app.config["BUSINESS_TIMEZONE"]


def completed_sessions_for_day(day: date) -> list[CustomerSession]:
    """Completed sessions checked out during `day`, latest checkout first."""
    start, end = business_day_bounds(day, _timezone())
    return (
        db.session.query(CustomerSession)
        .filter(
            CustomerSession.status == STATUS_COMPLETED,
            CustomerSession.exit_time.isnot(None),
            CustomerSession.exit_time >= start,
            CustomerSession.exit_time < end,
        )
        .order_by(CustomerSession.exit_time.desc(), CustomerSession.id.desc())
        .all()
    )


def daily_summary(day: date | None = None) -> DailySummary:
    day = day or local_today(_timezone())
    sessions = completed_sessions_for_day(day)

    total = cash = instapay = 0
    for s in sessions:
        amount = s.final_amount_cents or 0
        total += amount
        if s.payment_method == "cash":
            cash += amount
        elif s.payment_method == "instapay":
            instapay += amount

    return DailySummary(
        day=day,
        sessions=sessions,
        total_income_cents=total,
        cash_income_cents=cash,
        instapay_income_cents=instapay,
    )


def _amount(cents: int | None, default: str = "N/A"):
    if cents is None:
        return default
    return (Decimal(cents) / 100).quantize(_CENTS)


def export_csv(day: date | None = None) -> str:
    """
    CSV report of the day's completed sessions.

    Text fields are quoted with internal quotes doubled; numbers are bare.
    """
    summary = daily_summary(day)
    tz_name = _timezone()

    buffer = io.StringIO()
    # Header names are fixed and left bare
    buffer.write(",".join(CSV_HEADERS) + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")

    for s in summary.sessions:
        checkout_time = to_local(s.exit_time, tz_name).strftime("%Y-%m-%d %H:%M:%S") if s.exit_time else "N/A"
        writer.writerow([
            s.name,
            checkout_time,
            s.duration_minutes if s.duration_minutes is not None else "N/A",
            _amount(s.total_cost_cents),
            _amount(s.discount_cents, default=Decimal("0.00")),
            _amount(s.final_amount_cents),
            s.payment_method or "N/A",
        ])

    return buffer.getvalue()


def export_filename(day: date) -> str:
    return f"Cozy-Hive_Summary_{day.isoformat()}.csv"
