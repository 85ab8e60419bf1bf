# Overview: Snapshot subscriptions over committed writes, built on blinker signals.

"""
Change Feed

A subscriber registers a callback for a collection and receives the full
current result set: once immediately on subscribe, then after every write
the services commit to that collection. Until the first callback fires the
subscriber is "loading"; an empty list means "loaded, nothing there".

Callbacks run synchronously inside the writer's app context. A callback that
raises during delivery is logged and skipped; the write stands.
"""

from __future__ import annotations

from typing import Callable

from blinker import Namespace
from flask import current_app

from ..extensions import db
from ..models import CustomerSession, Item


_signals = Namespace()
collection_changed = _signals.signal("collection-changed")

SESSIONS = "sessions"
ITEMS = "items"


def _load_sessions() -> list[dict]:
    rows = db.session.query(CustomerSession).order_by(CustomerSession.entry_time.desc()).all()
    return [row.to_dict() for row in rows]


def _load_items() -> list[dict]:
    rows = db.session.query(Item).order_by(Item.name).all()
    return [row.to_dict() for row in rows]


_LOADERS: dict[str, Callable[[], list[dict]]] = {
    SESSIONS: _load_sessions,
    ITEMS: _load_items,
}


def subscribe(collection: str, callback: Callable[[list[dict]], None]) -> Callable[[], None]:
    """Deliver snapshots of `collection` to callback. Returns the unsubscribe handle."""
    loader = _LOADERS.get(collection)
    if loader is None:
        raise ValueError(f"Unknown collection: {collection}")

    def receiver(sender, **kwargs):
        # The write has already committed
        try:
            callback(loader())
        except Exception:
            current_app.logger.exception("Change feed subscriber failed for %s", collection)

    collection_changed.connect(receiver, sender=collection, weak=False)
    callback(loader())

    def unsubscribe() -> None:
        collection_changed.disconnect(receiver, sender=collection)

    return unsubscribe


def notify(collection: str) -> None:
    """Called by services after a successful commit."""
    collection_changed.send(collection)
