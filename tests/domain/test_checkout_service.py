"""Unit tests for the Checkout domain service and attempt tracking."""

import pytest

from resale.domain.exceptions import EmptyCartError, UnavailableItemsError
from resale.domain.model.cart import Cart
from resale.domain.model.order import OrderStatus
from resale.domain.model.value_objects import Money, Quantity
from resale.domain.service.checkout_service import (
    CheckoutAttempt,
    CheckoutService,
    CheckoutStage,
)
from tests.fakes import default_catalog


def _cart(*lines: tuple[str, int]) -> Cart:
    cart = Cart.new("alice")
    for product_id, qty in lines:
        cart.add(product_id, Quantity(qty))
    return cart


class TestValidate:

    def test_resolves_every_line(self):
        svc = CheckoutService(default_catalog())
        lines = svc.validate(_cart(("P1", 2), ("P2", 1)))
        assert [line.product.id for line in lines] == ["P1", "P2"]

    def test_empty_cart_rejected(self):
        svc = CheckoutService(default_catalog())
        with pytest.raises(EmptyCartError):
            svc.validate(_cart())

    def test_reports_all_unavailable_products(self):
        catalog = default_catalog()
        catalog.delete("P2")
        svc = CheckoutService(catalog)

        with pytest.raises(UnavailableItemsError) as exc_info:
            svc.validate(_cart(("P1", 1), ("P2", 1), ("GONE", 1)))

        assert exc_info.value.product_ids == ["P2", "GONE"]
        assert exc_info.value.kind == "unavailable_items"

    def test_availability_checked_at_validation_time(self):
        catalog = default_catalog()
        cart = _cart(("P1", 1))
        catalog.set_available("P1", False)
        with pytest.raises(UnavailableItemsError, match="P1"):
            CheckoutService(catalog).validate(cart)


class TestSnapshot:

    def test_snapshot_uses_current_prices(self):
        catalog = default_catalog()
        svc = CheckoutService(catalog)
        cart = _cart(("P1", 2), ("P2", 1))
        catalog.set_price("P1", "80.00")

        order = svc.snapshot("alice", svc.validate(cart))

        assert order.status == OrderStatus.PENDING
        assert order.items[0].price_at_purchase == Money.of("80.00")
        assert order.total_amount == Money.of("210.00")

    def test_snapshot_is_decoupled_from_later_price_changes(self):
        catalog = default_catalog()
        svc = CheckoutService(catalog)
        order = svc.snapshot("alice", svc.validate(_cart(("P1", 1))))

        catalog.set_price("P1", "999.00")

        assert order.items[0].price_at_purchase == Money.of("100.00")
        assert order.total_amount == Money.of("100.00")


class TestCheckoutAttempt:

    def test_happy_path_stages(self):
        attempt = CheckoutAttempt(user_id="alice")
        attempt.advance()
        attempt.advance()
        attempt.advance()
        assert attempt.stage == CheckoutStage.DONE
        assert attempt.history == [
            CheckoutStage.VALIDATING,
            CheckoutStage.SNAPSHOTTING,
            CheckoutStage.COMMITTING,
            CheckoutStage.DONE,
        ]

    def test_fail_from_any_open_stage(self):
        attempt = CheckoutAttempt(user_id="alice")
        attempt.advance()
        attempt.fail()
        assert attempt.stage == CheckoutStage.FAILED
        assert attempt.is_finished

    def test_finished_attempt_cannot_move(self):
        attempt = CheckoutAttempt(user_id="alice")
        attempt.fail()
        with pytest.raises(RuntimeError):
            attempt.advance()
        with pytest.raises(RuntimeError):
            attempt.fail()
