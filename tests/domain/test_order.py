"""Unit tests for the Order aggregate and its status lifecycle."""

import pytest

from resale.domain.exceptions import ValidationError
from resale.domain.model.order import Order, OrderItem, OrderStatus
from resale.domain.model.value_objects import Money, Quantity


def _make_item(product_id: str = "P1", qty: int = 1, price: str = "15.00") -> OrderItem:
    """Helper to build a valid order item."""
    return OrderItem(
        product_id=product_id,
        quantity=Quantity(qty),
        price_at_purchase=Money.of(price),
    )


def _order(status: OrderStatus = OrderStatus.PENDING) -> Order:
    order = Order.create("alice", [_make_item()])
    order.id = 7
    order.status = status
    return order


class TestOrderCreation:

    def test_happy_path(self):
        order = Order.create("alice", [_make_item(qty=2, price="100.00"), _make_item("P2", 1, "50.00")])
        assert order.user_id == "alice"
        assert order.status == OrderStatus.PENDING
        assert order.total_amount == Money.of("250.00")
        assert order.item_count == 2

    def test_id_is_none_for_new_orders(self):
        assert Order.create("alice", [_make_item()]).id is None  # assigned by the ledger

    def test_matching_explicit_total_accepted(self):
        order = Order.create("alice", [_make_item(qty=3)], total_amount=Money.of("45.00"))
        assert order.total_amount == Money.of("45.00")

    def test_mismatched_total_rejected(self):
        with pytest.raises(ValidationError, match="does not match"):
            Order.create("alice", [_make_item(qty=3)], total_amount=Money.of("40.00"))

    def test_no_items_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            Order.create("alice", [])

    def test_blank_user_rejected(self):
        with pytest.raises(ValidationError, match="User ID"):
            Order.create("", [_make_item()])

    def test_items_are_immutable(self):
        order = Order.create("alice", [_make_item()])
        assert isinstance(order.items, tuple)
        with pytest.raises(AttributeError):
            order.items[0].price_at_purchase = Money.of("1.00")  # type: ignore[misc]

    def test_assert_consistent_catches_tampering(self):
        order = Order.create("alice", [_make_item()])
        order.total_amount = Money.of("1.00")
        with pytest.raises(ValidationError, match="does not match"):
            order.assert_consistent()


class TestOrderStatusParse:

    def test_parse_is_case_insensitive(self):
        assert OrderStatus.parse(" Shipped ") == OrderStatus.SHIPPED

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError, match="Unknown order status"):
            OrderStatus.parse("lost")


class TestOrderTransitions:

    @pytest.mark.parametrize(
        "start, target",
        [
            (OrderStatus.PENDING, OrderStatus.CONFIRMED),
            (OrderStatus.CONFIRMED, OrderStatus.SHIPPED),
            (OrderStatus.SHIPPED, OrderStatus.DELIVERED),
            (OrderStatus.PENDING, OrderStatus.SHIPPED),
            (OrderStatus.PENDING, OrderStatus.CANCELLED),
            (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
        ],
    )
    def test_allowed(self, start, target):
        order = _order(start)
        order.transition_to(target)
        assert order.status == target

    def test_backwards_rejected(self):
        order = _order(OrderStatus.SHIPPED)
        with pytest.raises(ValidationError, match="back to confirmed"):
            order.transition_to(OrderStatus.CONFIRMED)
        assert order.status == OrderStatus.SHIPPED

    def test_same_status_rejected(self):
        order = _order(OrderStatus.CONFIRMED)
        with pytest.raises(ValidationError, match="already confirmed"):
            order.transition_to(OrderStatus.CONFIRMED)

    @pytest.mark.parametrize("terminal", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
    def test_terminal_statuses_are_final(self, terminal):
        order = _order(terminal)
        with pytest.raises(ValidationError, match="can no longer change"):
            order.transition_to(OrderStatus.CANCELLED if terminal is OrderStatus.DELIVERED else OrderStatus.PENDING)
        assert order.status == terminal
