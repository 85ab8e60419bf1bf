from __future__ import annotations

from ..extensions import db


class Item(db.Model):
    """
    Catalog entry sold alongside session time.

    Sessions copy name and price when an item is added, so editing or
    deleting a row here never changes a recorded bill.
    """
    __tablename__ = "items"
    __table_args__ = (
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    price_cents = db.Column(db.Integer, nullable=False, default=0)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price_cents": self.price_cents,
        }
