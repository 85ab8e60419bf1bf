# Overview: Pure operations on a session's line items; no database access.

"""
Session Item Ledger

WHY: A session carries a denormalized snapshot of what the customer bought.
Name and price are copied at add time so catalog edits never rewrite
historical totals.

RULES:
- item_id is unique across a session's lines (repeat adds merge)
- a line with quantity <= 0 never persists; it is removed instead
- every operation returns a new list and leaves its input untouched
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Iterable, Mapping

from ..exceptions import InvalidInput, InvalidQuantity, UnknownLineItem


@dataclass(frozen=True)
class SessionLineItem:
    item_id: str
    name: str
    price_cents: int
    quantity: int

    @property
    def line_total_cents(self) -> int:
        return self.price_cents * self.quantity

    def to_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "name": self.name,
            "price_cents": self.price_cents,
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SessionLineItem":
        return cls(
            item_id=str(data["item_id"]),
            name=data["name"],
            price_cents=int(data["price_cents"]),
            quantity=int(data["quantity"]),
        )


def _require_int(value: Any, field: str) -> int:
    # bool is an int subclass; "True" is not a quantity
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidQuantity(f"{field} must be an integer")
    return value


def add_line(lines: Iterable[SessionLineItem], item: Any, quantity: int) -> list[SessionLineItem]:
    """
    Merge `quantity` of a catalog item into the line list.

    `item` is anything with id, name and price_cents (a catalog Item row).
    An existing line keeps its frozen name/price; only quantity grows.
    """
    quantity = _require_int(quantity, "quantity")
    if quantity < 1:
        raise InvalidQuantity("Quantity must be at least 1", details={"quantity": quantity})

    name = (item.name or "").strip()
    if not name:
        raise InvalidInput("Item name cannot be empty")
    if item.price_cents is None or item.price_cents < 0:
        raise InvalidInput("Item price must be >= 0")

    item_id = str(item.id)
    result = list(lines)
    for index, line in enumerate(result):
        if line.item_id == item_id:
            result[index] = replace(line, quantity=line.quantity + quantity)
            return result

    result.append(SessionLineItem(item_id=item_id, name=name, price_cents=item.price_cents, quantity=quantity))
    return result


def adjust_quantity(lines: Iterable[SessionLineItem], item_id: str, delta: int) -> list[SessionLineItem]:
    """
    One +/- step of the interactive bulk editor.

    The new quantity is clamped at 0 and a zeroed line disappears at once.
    """
    delta = _require_int(delta, "delta")
    item_id = str(item_id)
    result = []
    found = False
    for line in lines:
        if line.item_id == item_id:
            found = True
            line = replace(line, quantity=max(0, line.quantity + delta))
        if line.quantity > 0:
            result.append(line)

    if not found:
        raise UnknownLineItem("Item is not on this session", details={"item_id": item_id})
    return result


def apply_line_edits(
    original: Iterable[SessionLineItem],
    edited: Iterable[Mapping[str, Any] | SessionLineItem],
) -> list[SessionLineItem]:
    """
    Reconcile a committed bulk edit against the stored lines.

    - lines are matched by item_id; an id absent from `original` is rejected
      with UnknownLineItem (new items only arrive through add_line)
    - quantity 0 removes the line; lines omitted from `edited` are removed
    - name and price always come from the original snapshot
    - result order follows `edited`
    """
    by_id = {line.item_id: line for line in original}
    seen: set[str] = set()
    result = []

    for entry in edited:
        if isinstance(entry, SessionLineItem):
            item_id, quantity = entry.item_id, entry.quantity
        else:
            if not isinstance(entry, Mapping):
                raise InvalidInput("Each line must be an object with item_id and quantity")
            if "item_id" not in entry or "quantity" not in entry:
                raise InvalidInput("Each line requires item_id and quantity")
            item_id, quantity = str(entry["item_id"]), entry["quantity"]

        if item_id not in by_id:
            raise UnknownLineItem("Item is not on this session", details={"item_id": item_id})
        if item_id in seen:
            raise InvalidInput("Duplicate item in edit", details={"item_id": item_id})
        seen.add(item_id)

        quantity = _require_int(quantity, "quantity")
        if quantity < 0:
            raise InvalidQuantity("Quantity cannot be negative", details={"item_id": item_id, "quantity": quantity})
        if quantity == 0:
            continue

        result.append(replace(by_id[item_id], quantity=quantity))

    return result


def lines_equal(a: Iterable[SessionLineItem], b: Iterable[SessionLineItem]) -> bool:
    """Deep comparison; order and every field matter."""
    return list(a) == list(b)


def lines_from_json(raw: Iterable[Mapping[str, Any]] | None) -> list[SessionLineItem]:
    return [SessionLineItem.from_dict(entry) for entry in (raw or [])]


def lines_to_json(lines: Iterable[SessionLineItem]) -> list[dict]:
    return [line.to_dict() for line in lines]
