"""Integration tests for the order ledger use cases (list, show, status)."""

import pytest

from resale.application.add_to_cart import AddToCartHandler
from resale.application.checkout import CheckoutHandler
from resale.application.list_orders import ListOrdersHandler
from resale.application.show_order import ShowOrderHandler
from resale.application.update_order_status import UpdateOrderStatusHandler
from resale.domain.exceptions import ForbiddenError, NotFoundError, ValidationError
from resale.infrastructure.persistence.document_store import DocumentStore
from tests.fakes import FakeUserDirectory, default_catalog, make_locks, unit_of_work_factory


class _Env:

    def __init__(self) -> None:
        self.store = DocumentStore().open()
        self.catalog = default_catalog()
        self.users = FakeUserDirectory({"seller-1": "vera", "seller-2": "otto"})
        uow = unit_of_work_factory(self.store)
        locks = make_locks()
        self.add = AddToCartHandler(uow, self.catalog, locks)
        self.checkout = CheckoutHandler(uow, self.catalog, locks, self.users)
        self.list = ListOrdersHandler(uow)
        self.show = ShowOrderHandler(uow, self.catalog, self.users)
        self.status = UpdateOrderStatusHandler(uow, self.catalog, self.users)

    def place(self, user_id: str, *lines: tuple[str, int]) -> int:
        for product_id, qty in lines:
            self.add.handle(user_id, product_id, qty)
        return self.checkout.handle(user_id).id


@pytest.fixture
def env() -> _Env:
    return _Env()


class TestListOrders:

    def test_newest_first_with_item_count(self, env):
        first = env.place("alice", ("P1", 1))
        second = env.place("alice", ("P2", 1), ("P3", 2))

        page = env.list.handle("alice")

        assert [o.id for o in page.orders] == [second, first]
        assert [o.item_count for o in page.orders] == [2, 1]
        assert page.orders[0].total_amount == "$75.00"
        assert (page.page, page.limit, page.count) == (1, 20, 2)

    def test_only_own_orders(self, env):
        env.place("alice", ("P1", 1))
        env.place("bob", ("P2", 1))
        page = env.list.handle("bob")
        assert page.count == 1
        assert page.orders[0].total_amount == "$50.00"

    def test_pagination(self, env):
        ids = [env.place("alice", ("P3", 1)) for _ in range(5)]

        page1 = env.list.handle("alice", page=1, limit=2)
        page3 = env.list.handle("alice", page=3, limit=2)

        assert [o.id for o in page1.orders] == [ids[4], ids[3]]
        assert [o.id for o in page3.orders] == [ids[0]]

    def test_page_past_the_end_is_empty(self, env):
        env.place("alice", ("P1", 1))
        assert env.list.handle("alice", page=4).orders == []

    @pytest.mark.parametrize("page, limit", [(0, 10), (1, 0), (1, 101)])
    def test_invalid_pagination_rejected(self, env, page, limit):
        with pytest.raises(ValidationError):
            env.list.handle("alice", page=page, limit=limit)


class TestShowOrder:

    def test_shows_own_order_with_details(self, env):
        order_id = env.place("alice", ("P1", 2))
        dto = env.show.handle(order_id, "alice")
        assert dto.id == order_id
        assert dto.items[0].title == "Leather jacket"
        assert dto.items[0].seller_name == "vera"
        assert dto.items[0].line_total == "$200.00"

    def test_foreign_order_reported_as_not_found(self, env):
        order_id = env.place("alice", ("P1", 1))
        with pytest.raises(NotFoundError, match=f"Order #{order_id} not found"):
            env.show.handle(order_id, "mallory")

    def test_missing_order(self, env):
        with pytest.raises(NotFoundError):
            env.show.handle(42, "alice")

    def test_deleted_product_still_listed(self, env):
        order_id = env.place("alice", ("P2", 1))
        env.catalog.delete("P2")
        item = env.show.handle(order_id, "alice").items[0]
        assert item.title is None
        assert item.price_at_purchase == "$50.00"


class TestUpdateOrderStatus:

    def test_seller_moves_order_forward(self, env):
        order_id = env.place("alice", ("P1", 1), ("P2", 1))
        assert env.status.handle(order_id, "seller-2", "confirmed").status == "confirmed"
        assert env.status.handle(order_id, "seller-1", "shipped").status == "shipped"
        assert env.store.get("orders", str(order_id))["status"] == "shipped"

    def test_non_seller_forbidden_and_status_unchanged(self, env):
        order_id = env.place("alice", ("P1", 1))
        with pytest.raises(ForbiddenError):
            env.status.handle(order_id, "seller-2", "confirmed")
        assert env.store.get("orders", str(order_id))["status"] == "pending"

    def test_buyer_is_not_a_seller(self, env):
        order_id = env.place("alice", ("P1", 1))
        with pytest.raises(ForbiddenError):
            env.status.handle(order_id, "alice", "cancelled")

    def test_missing_order(self, env):
        with pytest.raises(NotFoundError):
            env.status.handle(99, "seller-1", "confirmed")

    def test_seller_resolved_from_current_catalog(self, env):
        order_id = env.place("alice", ("P1", 1))
        env.catalog.set_seller("P1", "seller-9")

        with pytest.raises(ForbiddenError):
            env.status.handle(order_id, "seller-1", "confirmed")
        assert env.status.handle(order_id, "seller-9", "confirmed").status == "confirmed"

    def test_deleted_product_grants_no_access(self, env):
        order_id = env.place("alice", ("P1", 1))
        env.catalog.delete("P1")
        with pytest.raises(ForbiddenError):
            env.status.handle(order_id, "seller-1", "confirmed")

    def test_backwards_transition_rejected(self, env):
        order_id = env.place("alice", ("P1", 1))
        env.status.handle(order_id, "seller-1", "shipped")
        with pytest.raises(ValidationError, match="back to"):
            env.status.handle(order_id, "seller-1", "confirmed")
        assert env.store.get("orders", str(order_id))["status"] == "shipped"

    def test_cancelled_is_final(self, env):
        order_id = env.place("alice", ("P1", 1))
        env.status.handle(order_id, "seller-1", "cancelled")
        with pytest.raises(ValidationError, match="no longer change"):
            env.status.handle(order_id, "seller-1", "confirmed")

    def test_unknown_status_rejected(self, env):
        order_id = env.place("alice", ("P1", 1))
        with pytest.raises(ValidationError, match="Unknown order status"):
            env.status.handle(order_id, "seller-1", "teleported")

    def test_status_change_keeps_items_and_total(self, env):
        order_id = env.place("alice", ("P1", 2))
        before = env.store.get("orders", str(order_id))
        env.status.handle(order_id, "seller-1", "delivered")
        after = env.store.get("orders", str(order_id))
        assert after["items"] == before["items"]
        assert after["total_amount"] == before["total_amount"]
        assert after["version"] == before["version"] + 1
