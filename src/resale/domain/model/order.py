"""Order aggregate: the historical record of a completed checkout.

Once created, an order's items and total never change. Only ``status``
moves, and only along the lifecycle below.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from resale.domain.exceptions import ValidationError
from resale.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @staticmethod
    def parse(raw: str) -> OrderStatus:
        try:
            return OrderStatus(raw.strip().lower())
        except (ValueError, AttributeError):
            allowed = ", ".join(s.value for s in OrderStatus)
            raise ValidationError(
                f"Unknown order status {raw!r} (expected one of: {allowed})"
            ) from None

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


# Forward progression; cancellation is handled separately.
_PROGRESSION = [
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
]


@dataclass(frozen=True)
class OrderItem:
    """A price snapshot of one cart line, taken at checkout time."""

    product_id: str
    quantity: Quantity
    price_at_purchase: Money

    @property
    def line_total(self) -> Money:
        return self.price_at_purchase * self.quantity.value


@dataclass
class Order:
    """Aggregate root for placed orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    user_id: str
    items: tuple[OrderItem, ...]
    total_amount: Money
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = 0

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        user_id: str,
        items: list[OrderItem],
        total_amount: Money | None = None,
    ) -> Order:
        """Create a new pending order.

        If ``total_amount`` is given it must equal the sum of the line
        totals; otherwise it is computed here.
        """
        if not user_id or not str(user_id).strip():
            raise ValidationError("User ID is required")
        if not items:
            raise ValidationError("Order must contain at least one item")

        computed = sum_line_totals(items)
        if total_amount is None:
            total_amount = computed
        elif total_amount != computed:
            raise ValidationError(
                f"Order total {total_amount} does not match item sum {computed}"
            )

        return Order(
            id=None,
            user_id=str(user_id),
            items=tuple(items),
            total_amount=total_amount,
        )

    # --- Invariants -----------------------------------------------------------

    def assert_consistent(self) -> None:
        """Re-check the creation invariants before the order is stored."""
        if not self.items:
            raise ValidationError("Order must contain at least one item")
        computed = sum_line_totals(self.items)
        if self.total_amount != computed:
            raise ValidationError(
                f"Order total {self.total_amount} does not match item sum {computed}"
            )

    # --- State transitions ----------------------------------------------------

    def transition_to(self, new_status: OrderStatus) -> None:
        """Move the order to ``new_status``.

        Statuses only move forward along pending -> confirmed -> shipped ->
        delivered (skipping steps is allowed). ``cancelled`` is reachable
        from any non-terminal status. Delivered and cancelled orders are
        final.
        """
        if self.status.is_terminal:
            raise ValidationError(
                f"Order #{self.id} is {self.status.value} and can no longer change"
            )
        if new_status == self.status:
            raise ValidationError(f"Order #{self.id} is already {self.status.value}")
        if new_status != OrderStatus.CANCELLED and (
            _PROGRESSION.index(new_status) < _PROGRESSION.index(self.status)
        ):
            raise ValidationError(
                f"Cannot move order #{self.id} from {self.status.value} "
                f"back to {new_status.value}"
            )
        self.status = new_status

    # --- Computed properties --------------------------------------------------

    @property
    def item_count(self) -> int:
        return len(self.items)


def sum_line_totals(items) -> Money:
    total = Money.zero()
    for item in items:
        total = total + item.line_total
    return total
