# Overview: Retry and locking helpers for session writes.

from __future__ import annotations

import time

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.exc import StaleDataError

from ..exceptions import ConcurrentModification, InvalidInput
from ..extensions import db


def lock_for_update(query):
    """
    Apply row-level locking for critical operations.

    NOTE: SQLite ignores SELECT ... FOR UPDATE, but other DBs will honor it.
    """
    return query.with_for_update()


def check_version(record, expected_version: int | None) -> None:
    """Reject a write whose base version is stale. None skips the check."""
    if expected_version is None:
        return
    if isinstance(expected_version, bool) or not isinstance(expected_version, int):
        raise InvalidInput("expected_version must be an integer")
    if record.version_id != expected_version:
        raise ConcurrentModification(
            "Session was modified by someone else",
            details={"expected_version": expected_version, "current_version": record.version_id},
        )


def run_with_retry(func, *, attempts: int = 3, backoff_base: float = 0.1):
    """
    Execute a DB operation with retry on transient lock failures.

    OperationalError (locked database, deadlock) is retried with exponential
    backoff. StaleDataError means another writer won; it is never retried
    and surfaces as ConcurrentModification.
    """
    for attempt in range(attempts):
        try:
            return func()
        except StaleDataError as exc:
            db.session.rollback()
            raise ConcurrentModification("Session was modified by someone else") from exc
        except OperationalError:
            db.session.rollback()
            if attempt >= attempts - 1:
                raise
            time.sleep(backoff_base * (2 ** attempt))
