"""DocumentStore-backed unit of work and repositories.

Repositories read straight from the store and stage writes locally.
Nothing reaches the store until ``commit()``, which hands the whole
change set to ``DocumentStore.apply`` in one call.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation

import structlog

from resale.domain.exceptions import StorageError, ValidationError
from resale.domain.model.cart import Cart, CartItem
from resale.domain.model.order import Order, OrderItem, OrderStatus
from resale.domain.model.value_objects import Money, Quantity
from resale.domain.repository.cart_repository import CartRepository
from resale.domain.repository.order_repository import OrderRepository
from resale.domain.repository.unit_of_work import UnitOfWork
from resale.infrastructure.persistence.document_store import Change, DocumentStore

logger = structlog.get_logger(__name__)

_MALFORMED = (AttributeError, KeyError, TypeError, ValueError, InvalidOperation, ValidationError)


class DocumentCartRepository(CartRepository):

    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self._staged: dict[str, tuple[Cart, bool]] = {}

    # --- CartRepository interface ---------------------------------------------

    def get_by_user(self, user_id: str) -> Cart | None:
        if user_id in self._staged:
            return self._staged[user_id][0]
        raw = self._store.get("carts", user_id)
        return self._to_domain(raw) if raw is not None else None

    def add(self, cart: Cart) -> None:
        self._staged[cart.user_id] = (cart, True)

    def save(self, cart: Cart) -> None:
        is_new = self._staged.get(cart.user_id, (cart, False))[1]
        self._staged[cart.user_id] = (cart, is_new)

    # --- Unit of work hooks ---------------------------------------------------

    def pending_changes(self) -> list[tuple[Change, Cart]]:
        return [
            (
                Change(
                    collection="carts",
                    key=cart.user_id,
                    document=self._to_raw(cart),
                    expected_version=None if is_new else cart.version,
                ),
                cart,
            )
            for cart, is_new in self._staged.values()
        ]

    def discard(self) -> None:
        self._staged.clear()

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(cart: Cart) -> dict:
        return {
            "id": cart.id,
            "user_id": cart.user_id,
            "items": [
                {
                    "id": item.id,
                    "product_id": item.product_id,
                    "quantity": item.quantity.value,
                    "added_at": item.added_at.isoformat(),
                }
                for item in cart.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Cart:
        try:
            return Cart(
                id=raw["id"],
                user_id=raw["user_id"],
                items=[
                    CartItem(
                        id=i["id"],
                        product_id=i["product_id"],
                        quantity=Quantity(i["quantity"]),
                        added_at=datetime.fromisoformat(i["added_at"]),
                    )
                    for i in raw["items"]
                ],
                version=raw["version"],
            )
        except _MALFORMED as exc:
            raise StorageError(f"Malformed cart document {raw.get('user_id')!r}: {exc!r}") from exc


class DocumentOrderRepository(OrderRepository):

    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self._new: list[Order] = []
        self._updated: dict[int, Order] = {}

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: int) -> Order | None:
        if order_id in self._updated:
            return self._updated[order_id]
        raw = self._store.get("orders", str(order_id))
        return self._to_domain(raw) if raw is not None else None

    def list_by_user(self, user_id: str, offset: int, limit: int) -> list[Order]:
        raws = self._store.find("orders", lambda d: d["user_id"] == user_id)
        raws.sort(key=lambda d: (d["created_at"], d["id"]), reverse=True)
        return [self._to_domain(raw) for raw in raws[offset:offset + limit]]

    def add(self, order: Order) -> None:
        if order.id is not None:
            raise ValidationError(f"Order #{order.id} has already been placed")
        order.assert_consistent()
        self._new.append(order)

    def save(self, order: Order) -> None:
        if order.id is None:
            raise ValidationError("Cannot update an order that was never placed")
        self._updated[order.id] = order

    # --- Unit of work hooks ---------------------------------------------------

    def pending_changes(self) -> list[tuple[Change, Order]]:
        changes = [
            (Change(collection="orders", key=None, document=self._to_raw(o)), o)
            for o in self._new
        ]
        changes.extend(
            (
                Change(
                    collection="orders",
                    key=str(o.id),
                    document=self._to_raw(o),
                    expected_version=o.version,
                ),
                o,
            )
            for o in self._updated.values()
        )
        return changes

    def discard(self) -> None:
        self._new.clear()
        self._updated.clear()

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "user_id": order.user_id,
            "status": order.status.value,
            "created_at": order.created_at.isoformat(),
            "total_amount": str(order.total_amount.amount),
            "currency": order.total_amount.currency,
            "items": [
                {
                    "product_id": item.product_id,
                    "quantity": item.quantity.value,
                    "price_at_purchase": str(item.price_at_purchase.amount),
                    "currency": item.price_at_purchase.currency,
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        try:
            items = tuple(
                OrderItem(
                    product_id=i["product_id"],
                    quantity=Quantity(i["quantity"]),
                    price_at_purchase=Money(
                        Decimal(i["price_at_purchase"]), i.get("currency", "USD")
                    ),
                )
                for i in raw["items"]
            )
            return Order(
                id=raw["id"],
                user_id=raw["user_id"],
                items=items,
                total_amount=Money(Decimal(raw["total_amount"]), raw.get("currency", "USD")),
                status=OrderStatus(raw["status"]),
                created_at=datetime.fromisoformat(raw["created_at"]),
                version=raw["version"],
            )
        except _MALFORMED as exc:
            raise StorageError(f"Malformed order document {raw.get('id')!r}: {exc!r}") from exc


class DocumentUnitOfWork(UnitOfWork):

    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self.carts = DocumentCartRepository(store)
        self.orders = DocumentOrderRepository(store)

    def commit(self) -> None:
        cart_changes = self.carts.pending_changes()
        order_changes = self.orders.pending_changes()
        staged = cart_changes + order_changes
        if not staged:
            return

        applied = self._store.apply([change for change, _ in staged])

        # Write assigned IDs and versions back onto the domain objects.
        for (change, entity), result in zip(staged, applied):
            entity.version = result.version
            if change.collection == "orders" and change.key is None:
                entity.id = int(result.key)

        logger.debug(
            "unit_of_work_committed",
            carts=len(cart_changes),
            orders=len(order_changes),
        )
        self.rollback()

    def rollback(self) -> None:
        self.carts.discard()
        self.orders.discard()
