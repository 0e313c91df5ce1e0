"""Domain service: Checkout.

Turns a cart into an order snapshot. The cart's product references are
weak, so every product is re-resolved against the catalog at checkout
time; whatever was true when the item was added no longer counts.

The work is split the same way as any validate-then-mutate operation:
  Phase 1, validate: the cart is non-empty and every product still
           exists and is available.  Fails before anything is built.
  Phase 2, snapshot: capture each product's *current* price into an
           OrderItem and build the pending Order.
Committing the order and emptying the cart is left to the caller, which
owns the unit of work.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from resale.domain.exceptions import EmptyCartError, UnavailableItemsError
from resale.domain.model.cart import Cart, CartItem
from resale.domain.model.order import Order, OrderItem
from resale.domain.model.product import Product
from resale.domain.repository.catalog import Catalog


class CheckoutStage(Enum):
    VALIDATING = "validating"
    SNAPSHOTTING = "snapshotting"
    COMMITTING = "committing"
    DONE = "done"
    FAILED = "failed"


_NEXT_STAGE = {
    CheckoutStage.VALIDATING: CheckoutStage.SNAPSHOTTING,
    CheckoutStage.SNAPSHOTTING: CheckoutStage.COMMITTING,
    CheckoutStage.COMMITTING: CheckoutStage.DONE,
}


@dataclass
class CheckoutAttempt:
    """Tracks where a single checkout attempt is.

    Stages only move forward; any non-terminal stage may fail.
    """

    user_id: str
    stage: CheckoutStage = CheckoutStage.VALIDATING
    history: list[CheckoutStage] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.history.append(self.stage)

    @property
    def is_finished(self) -> bool:
        return self.stage in (CheckoutStage.DONE, CheckoutStage.FAILED)

    def advance(self) -> CheckoutStage:
        if self.is_finished:
            raise RuntimeError(f"Checkout attempt already {self.stage.value}")
        self.stage = _NEXT_STAGE[self.stage]
        self.history.append(self.stage)
        return self.stage

    def fail(self) -> None:
        if self.is_finished:
            raise RuntimeError(f"Checkout attempt already {self.stage.value}")
        self.stage = CheckoutStage.FAILED
        self.history.append(self.stage)


@dataclass(frozen=True)
class ResolvedLine:
    item: CartItem
    product: Product


class CheckoutService:

    def __init__(self, catalog: Catalog) -> None:
        self._catalog = catalog

    def validate(self, cart: Cart) -> list[ResolvedLine]:
        """Phase 1: resolve every cart line against the live catalog.

        Collects *all* offending product IDs before failing so the buyer
        can fix the cart in one go.
        """
        if cart.is_empty:
            raise EmptyCartError("Cart is empty")

        resolved: list[ResolvedLine] = []
        unavailable: list[str] = []

        for item in cart.items:
            product = self._catalog.get_product(item.product_id)
            if product is None or not product.is_available:
                unavailable.append(item.product_id)
                continue
            resolved.append(ResolvedLine(item=item, product=product))

        if unavailable:
            raise UnavailableItemsError(unavailable)

        return resolved

    @staticmethod
    def snapshot(user_id: str, lines: list[ResolvedLine]) -> Order:
        """Phase 2: freeze current prices into a new pending order."""
        items = [
            OrderItem(
                product_id=line.product.id,
                quantity=line.item.quantity,
                price_at_purchase=line.product.price,  # <-- price snapshot
            )
            for line in lines
        ]
        return Order.create(user_id=user_id, items=items)
