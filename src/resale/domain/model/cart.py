"""Cart aggregate.

Each user owns exactly one cart. The cart only holds weak references to
products: a product may be withdrawn or deleted after it was added, so
anything that depends on a product's state resolves it again through a
lookup instead of trusting what was true at add time.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from resale.domain.exceptions import NotFoundError, ValidationError
from resale.domain.model.product import Product
from resale.domain.model.value_objects import Money, Quantity

ProductLookup = Callable[[str], Product | None]


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CartItem:
    id: str
    product_id: str
    quantity: Quantity
    added_at: datetime = field(default_factory=_utcnow)


@dataclass
class Cart:
    """Aggregate root for a user's in-progress selection.

    ``version`` is bumped by the storage layer on every successful save and
    is used for optimistic locking; domain methods never touch it.
    """

    id: str
    user_id: str
    items: list[CartItem] = field(default_factory=list)
    version: int = 0

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def new(user_id: str) -> Cart:
        if not user_id or not str(user_id).strip():
            raise ValidationError("User ID is required")
        return Cart(id=_new_id(), user_id=str(user_id))

    # --- Mutations ------------------------------------------------------------

    def add(self, product_id: str, quantity: Quantity) -> CartItem:
        """Add units of a product.

        A second add for the same product accumulates onto the existing
        line instead of creating another one.
        """
        for item in self.items:
            if item.product_id == product_id:
                item.quantity = item.quantity + quantity
                return item

        item = CartItem(id=_new_id(), product_id=product_id, quantity=quantity)
        self.items.append(item)
        return item

    def set_quantity(self, item_id: str, quantity: Quantity) -> CartItem:
        item = self.find_item(item_id)
        item.quantity = quantity
        return item

    def remove(self, item_id: str) -> CartItem:
        item = self.find_item(item_id)
        self.items.remove(item)
        return item

    def clear(self) -> None:
        self.items = []

    # --- Queries --------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find_item(self, item_id: str) -> CartItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise NotFoundError("Cart item not found")

    def compute_total(self, lookup: ProductLookup) -> Money:
        """Sum quantity x current price over items whose product resolves.

        This is a read-time projection; the result is never stored on
        the cart.
        """
        total = Money.zero()
        for item in self.items:
            product = lookup(item.product_id)
            if product is None:
                continue
            total = total + product.price * item.quantity.value
        return total
