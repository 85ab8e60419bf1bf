# Overview: Error taxonomy shared by the billing core, services, and routes.

"""
Every service-level failure is a HiveError subclass. Routes translate them
to JSON error responses; http_status carries the status code for each kind.
"""


class HiveError(Exception):
    """Base class for domain errors."""

    http_status = 400

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class InvalidInput(HiveError):
    """Empty customer/item name, negative price or discount, bad enum value."""


class InvalidQuantity(HiveError):
    """Quantity below 1 on add, or below 0 on a bulk edit."""


class InvalidStateTransition(HiveError):
    """Checkout/cancel/edit attempted on a session that is no longer active."""


class UnknownLineItem(HiveError):
    """A bulk edit referenced an item that is not on the session."""


class NoChanges(HiveError):
    """A bulk edit is identical to the stored line list."""


class NotFound(HiveError):
    http_status = 404


class PermissionDenied(HiveError):
    http_status = 403


class ConcurrentModification(HiveError):
    """The caller's base version of a session is stale."""

    http_status = 409
