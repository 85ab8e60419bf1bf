# Overview: Service-layer operations for global settings; encapsulates business logic and database work.

"""
Settings Service

One settings row per deployment. Reads lazily create it with defaults so a
fresh database bills at the default rate without a bootstrap step.
"""

from __future__ import annotations

from flask import current_app

from ..extensions import db
from ..models import AppSettings
from ..models.settings import DEFAULT_SETTINGS
from ..validation import MAX_PRICE_CENTS, ModelValidationPolicy, validate_payload
from .billing import BillingPolicy
from hive.time_utils import utcnow


SETTINGS_POLICY = ModelValidationPolicy(
    writable_fields=frozenset(DEFAULT_SETTINGS),
    bounds={
        "hourly_rate_cents": (0, MAX_PRICE_CENTS),
        "auto_logout_hours": (1, None),
    },
)


def get_settings() -> AppSettings:
    settings = db.session.get(AppSettings, AppSettings.SINGLETON_ID)
    if settings is None:
        settings = AppSettings(id=AppSettings.SINGLETON_ID, **DEFAULT_SETTINGS)
        db.session.add(settings)
        db.session.commit()
    return settings


def update_settings(payload: dict) -> AppSettings:
    """Validate and apply a partial update. Raises InvalidInput."""
    patch = validate_payload(model=AppSettings, payload=payload, policy=SETTINGS_POLICY, partial=True)

    settings = get_settings()
    for key, value in patch.items():
        setattr(settings, key, value)
    settings.updated_at = utcnow()

    db.session.commit()
    current_app.logger.info("Settings updated: %s", ", ".join(sorted(patch)) or "no fields")
    return settings


def billing_policy(settings: AppSettings | None = None) -> BillingPolicy:
    """Collect every pricing parameter the billing engine needs."""
    settings = settings or get_settings()
    return BillingPolicy(
        hourly_rate_cents=settings.hourly_rate_cents,
        cap_hours=current_app.config["TIME_CAP_HOURS"],
        cap_cents=current_app.config["TIME_CAP_CENTS"],
    )
