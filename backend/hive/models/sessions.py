from __future__ import annotations

from ..extensions import db
from hive.time_utils import to_utc_z


STATUS_ACTIVE = "active"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"
SESSION_STATUSES = (STATUS_ACTIVE, STATUS_COMPLETED, STATUS_CANCELLED)

PAYMENT_METHODS = ("cash", "instapay")


class CustomerSession(db.Model):
    """
    A customer's visit: the aggregate root of billing.

    LIFECYCLE:
    - active: created by start; items may change
    - completed: checkout set every billing field and exit_time
    - cancelled: exit_time set, billing fields left empty

    IMMUTABLE: Both terminal states are final. items is a JSON list of
    line snapshots (see services/ledger.py).

    version_id backs optimistic locking; stale writers get a conflict.
    """
    __tablename__ = "sessions"
    __table_args__ = (
        db.Index("ix_sessions_status_exit", "status", "exit_time"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)

    entry_time = db.Column(db.DateTime, nullable=False)
    exit_time = db.Column(db.DateTime, nullable=True)

    status = db.Column(db.String(16), nullable=False, default=STATUS_ACTIVE, index=True)

    items = db.Column(db.JSON, nullable=False, default=list)

    # Populated only by checkout
    total_cost_cents = db.Column(db.Integer, nullable=True)
    discount_cents = db.Column(db.Integer, nullable=True)
    final_amount_cents = db.Column(db.Integer, nullable=True)
    payment_method = db.Column(db.String(16), nullable=True)
    duration_minutes = db.Column(db.Integer, nullable=True)

    version_id = db.Column(db.Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version_id}

    @property
    def is_active(self) -> bool:
        return self.status == STATUS_ACTIVE

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "entry_time": to_utc_z(self.entry_time),
            "exit_time": to_utc_z(self.exit_time) if self.exit_time else None,
            "status": self.status,
            "items": list(self.items or []),
            "total_cost_cents": self.total_cost_cents,
            "discount_cents": self.discount_cents,
            "final_amount_cents": self.final_amount_cents,
            "payment_method": self.payment_method,
            "duration_minutes": self.duration_minutes,
            "version_id": self.version_id,
        }
