# Overview: Payload validation for admin-editable records (catalog items, settings).

"""
Payload validation driven by SQLAlchemy column metadata.

A policy names the fields a client may write, the fields a create must
carry, and the integer bounds of numeric fields. Column types, nullability
and String lengths come from the model itself, so a schema change needs no
edit here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import DeclarativeMeta

from .exceptions import InvalidInput


# 9,999,999.99 in minor units; larger values are typos, not prices
MAX_PRICE_CENTS = 999_999_999


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    writable_fields: allowlist of client-settable columns
    required_on_create: must be present when partial=False
    bounds: inclusive (min, max) per integer field; max may be None
    """
    writable_fields: frozenset[str]
    required_on_create: frozenset[str] = frozenset()
    bounds: dict[str, tuple[int, int | None]] = field(default_factory=dict)


def _coerce_int(key: str, value: Any) -> int:
    # bool is an int subclass but never a count or an amount
    if isinstance(value, bool):
        raise InvalidInput(f"{key} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        raise InvalidInput(f"{key} must be an integer, not a decimal")
    if not isinstance(value, str):
        raise InvalidInput(f"{key} must be an integer")

    text = value.strip()
    if "e" in text.lower():
        raise InvalidInput(f"{key} must be a plain integer (scientific notation not allowed)")
    if "." in text:
        raise InvalidInput(f"{key} must be an integer (no decimals)")
    try:
        return int(text)
    except ValueError:
        raise InvalidInput(f"{key} must be an integer")


def _coerce_bool(key: str, value: Any) -> bool:
    # "false" would be truthy, so only real JSON booleans pass
    if not isinstance(value, bool):
        raise InvalidInput(f"{key} must be true or false")
    return value


def _coerce_text(key: str, value: Any, column) -> str:
    text = str(value).strip()
    if text == "" and not column.nullable:
        raise InvalidInput(f"{key} cannot be blank")
    length = getattr(column.type, "length", None)
    if length and len(text) > length:
        raise InvalidInput(f"{key} exceeds max length {length}")
    return text


def _coerce(key: str, value: Any, column) -> Any:
    coltype = column.type
    if isinstance(coltype, Boolean):
        return _coerce_bool(key, value)
    if isinstance(coltype, Integer):
        return _coerce_int(key, value)
    if isinstance(coltype, (String, Text)):
        return _coerce_text(key, value, column)
    return value


def _check_bounds(key: str, value: int, bounds: tuple[int, int | None]) -> None:
    low, high = bounds
    if value < low:
        raise InvalidInput(f"{key} must be >= {low}")
    if high is not None and value > high:
        raise InvalidInput(f"{key} cannot exceed {high}")


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: Any,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Return a cleaned patch holding only writable fields.

    partial=False is create semantics and enforces required_on_create;
    partial=True validates only the keys present. Raises InvalidInput on
    the first problem found.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise InvalidInput("Invalid JSON payload")

    if not partial:
        missing = sorted(policy.required_on_create - payload.keys())
        if missing:
            raise InvalidInput(f"Missing required fields: {', '.join(missing)}")

    columns = {c.key: c for c in model.__mapper__.columns}

    patch: dict = {}
    for key, raw in payload.items():
        if key not in policy.writable_fields:
            raise InvalidInput(f"Field not allowed: {key}")
        column = columns.get(key)
        if column is None:
            raise InvalidInput(f"Unknown field: {key}")

        if raw is None:
            if not column.nullable:
                raise InvalidInput(f"{key} cannot be null")
            patch[key] = None
            continue

        value = _coerce(key, raw, column)
        if key in policy.bounds:
            _check_bounds(key, value, policy.bounds[key])
        patch[key] = value

    return patch
