# Overview: Role-based capability checks, kept apart from routes and rendering.

"""
Capability policy.

Each check takes a profile (anything with a `role`, or None) and answers a
yes/no question. Role comparison is case-insensitive; no profile means no
capability.
"""

from __future__ import annotations

from typing import Any

from .models.auth import ROLE_ADMIN, ROLE_CASHIER


def _role(profile: Any) -> str | None:
    role = getattr(profile, "role", None)
    if role is None and isinstance(profile, dict):
        role = profile.get("role")
    if not isinstance(role, str):
        return None
    return role.strip().lower()


def is_admin(profile: Any) -> bool:
    return _role(profile) == ROLE_ADMIN


def can_operate_sessions(profile: Any) -> bool:
    return _role(profile) in (ROLE_ADMIN, ROLE_CASHIER)


def can_manage_catalog(profile: Any) -> bool:
    return is_admin(profile)


def can_view_summary(profile: Any) -> bool:
    return is_admin(profile)


def can_manage_settings(profile: Any) -> bool:
    return is_admin(profile)


def can_view_settings(profile: Any) -> bool:
    return can_operate_sessions(profile)
