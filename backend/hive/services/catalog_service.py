# Overview: Service-layer operations for the item catalog; encapsulates business logic and database work.

from __future__ import annotations

from flask import current_app

from ..exceptions import NotFound
from ..extensions import db
from ..models import Item
from ..validation import MAX_PRICE_CENTS, ModelValidationPolicy, validate_payload
from . import change_feed


ITEM_POLICY = ModelValidationPolicy(
    writable_fields=frozenset({"name", "price_cents"}),
    required_on_create=frozenset({"name", "price_cents"}),
    bounds={"price_cents": (0, MAX_PRICE_CENTS)},
)

DEFAULT_ITEMS = [
    ("Coffee", 3000),
    ("Tea", 2500),
    ("Snack", 4000),
    ("Printing", 500),
]


def get_item(item_id) -> Item:
    try:
        key = int(item_id)
    except (TypeError, ValueError):
        raise NotFound("Item not found", details={"item_id": item_id})
    item = db.session.get(Item, key)
    if item is None:
        raise NotFound("Item not found", details={"item_id": item_id})
    return item


def list_items() -> list[Item]:
    return db.session.query(Item).order_by(Item.name, Item.id).all()


def create_item(payload: dict) -> Item:
    patch = validate_payload(model=Item, payload=payload, policy=ITEM_POLICY, partial=False)

    item = Item(**patch)
    db.session.add(item)
    db.session.commit()
    change_feed.notify(change_feed.ITEMS)
    return item


def update_item(item_id, payload: dict) -> Item:
    patch = validate_payload(model=Item, payload=payload, policy=ITEM_POLICY, partial=True)

    item = get_item(item_id)
    for key, value in patch.items():
        setattr(item, key, value)

    db.session.commit()
    change_feed.notify(change_feed.ITEMS)
    return item


def delete_item(item_id) -> None:
    """Sessions hold snapshots, so deleting a sold item is safe."""
    item = get_item(item_id)
    db.session.delete(item)
    db.session.commit()
    change_feed.notify(change_feed.ITEMS)


def seed_catalog() -> int:
    """
    Insert the default items in one transaction.

    Returns the number inserted; 0 when the catalog already has items.
    """
    if db.session.query(Item.id).first() is not None:
        return 0

    db.session.add_all([Item(name=name, price_cents=price) for name, price in DEFAULT_ITEMS])
    db.session.commit()
    change_feed.notify(change_feed.ITEMS)
    current_app.logger.info("Catalog seeded with %d items", len(DEFAULT_ITEMS))
    return len(DEFAULT_ITEMS)
