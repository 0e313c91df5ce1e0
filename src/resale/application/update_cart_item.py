"""Application service: Update Cart Item use case."""

from __future__ import annotations

import structlog

from resale.application.dto import CartDTO
from resale.application.locking import UserLockRegistry
from resale.application.retry import conflict_retry
from resale.application.views import compose_cart
from resale.domain.exceptions import NotFoundError
from resale.domain.model.cart import Cart
from resale.domain.model.value_objects import Quantity
from resale.domain.repository.catalog import Catalog
from resale.domain.repository.unit_of_work import UnitOfWorkFactory
from resale.domain.repository.user_directory import UserDirectory

logger = structlog.get_logger(__name__)


class UpdateCartItemHandler:

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        catalog: Catalog,
        locks: UserLockRegistry,
        users: UserDirectory | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._catalog = catalog
        self._locks = locks
        self._users = users

    def handle(self, user_id: str, item_id: str, quantity: int) -> CartDTO:
        """Set a cart line's quantity verbatim.

        The item is looked up only inside the caller's own cart, so an
        item ID from someone else's cart is reported as not found.
        """
        qty = Quantity(quantity)
        with self._locks.hold(user_id):
            cart = self._update(user_id, item_id, qty)
        return compose_cart(cart, self._catalog, self._users)

    @conflict_retry()
    def _update(self, user_id: str, item_id: str, qty: Quantity) -> Cart:
        with self._uow_factory() as uow:
            cart = uow.carts.get_by_user(user_id)
            if cart is None:
                raise NotFoundError("Cart not found")
            cart.set_quantity(item_id, qty)
            uow.carts.save(cart)
            uow.commit()

        logger.info("cart_item_updated", user_id=user_id, item_id=item_id, quantity=qty.value)
        return cart
