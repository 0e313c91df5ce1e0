"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Each subclass carries a stable ``kind`` that callers can match on without
parsing the message.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""

    kind = "error"


class ValidationError(DomainException):
    """Malformed or out-of-range input, or a broken invariant."""

    kind = "validation"


class NotFoundError(DomainException):
    """A requested cart, item, order or product does not exist."""

    kind = "not_found"


class UnavailableError(DomainException):
    """The product exists but cannot currently be purchased."""

    kind = "unavailable"


class UnavailableItemsError(UnavailableError):
    """One or more cart items can no longer be purchased."""

    kind = "unavailable_items"

    def __init__(self, product_ids: list[str]) -> None:
        self.product_ids = list(product_ids)
        super().__init__(
            "Some items in your cart are no longer available: "
            + ", ".join(self.product_ids)
        )


class EmptyCartError(DomainException):
    """Checkout was attempted on a cart with no items."""

    kind = "empty_cart"


class ForbiddenError(DomainException):
    """The caller is not allowed to perform the operation."""

    kind = "forbidden"


class StorageError(DomainException):
    """The storage layer failed to read or commit."""

    kind = "storage"


class ConcurrencyConflictError(StorageError):
    """A document changed between being read and being committed."""

    kind = "conflict"
