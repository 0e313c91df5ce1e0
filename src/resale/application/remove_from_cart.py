"""Application service: Remove From Cart use case."""

from __future__ import annotations

import structlog

from resale.application.dto import CartDTO
from resale.application.locking import UserLockRegistry
from resale.application.retry import conflict_retry
from resale.application.views import compose_cart
from resale.domain.exceptions import NotFoundError
from resale.domain.model.cart import Cart
from resale.domain.repository.catalog import Catalog
from resale.domain.repository.unit_of_work import UnitOfWorkFactory
from resale.domain.repository.user_directory import UserDirectory

logger = structlog.get_logger(__name__)


class RemoveFromCartHandler:

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

    def handle(self, user_id: str, item_id: str) -> CartDTO:
        with self._locks.hold(user_id):
            cart = self._remove(user_id, item_id)
        return compose_cart(cart, self._catalog, self._users)

    @conflict_retry()
    def _remove(self, user_id: str, item_id: str) -> Cart:
        with self._uow_factory() as uow:
            cart = uow.carts.get_by_user(user_id)
            if cart is None:
                raise NotFoundError("Cart not found")
            removed = cart.remove(item_id)
            uow.carts.save(cart)
            uow.commit()

        logger.info(
            "cart_item_removed",
            user_id=user_id,
            item_id=item_id,
            product_id=removed.product_id,
        )
        return cart
