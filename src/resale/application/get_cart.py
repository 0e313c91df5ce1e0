"""Application service: Get Cart use case.

A cart is created lazily the first time a user touches it, so "get"
may write. Creation races are settled by the store's one-cart-per-user
rule: the loser gets a conflict, retries, and finds the winner's cart.
"""

from __future__ import annotations

import structlog

from resale.application.dto import CartDTO
from resale.application.locking import UserLockRegistry
from resale.application.retry import conflict_retry
from resale.application.views import compose_cart
from resale.domain.model.cart import Cart
from resale.domain.repository.catalog import Catalog
from resale.domain.repository.unit_of_work import UnitOfWork, UnitOfWorkFactory
from resale.domain.repository.user_directory import UserDirectory

logger = structlog.get_logger(__name__)


def get_or_create_cart(uow: UnitOfWork, user_id: str) -> Cart:
    """Return the user's cart, staging a new empty one if there is none."""
    cart = uow.carts.get_by_user(user_id)
    if cart is None:
        cart = Cart.new(user_id)
        uow.carts.add(cart)
        logger.info("cart_created", user_id=user_id, cart_id=cart.id)
    return cart


class GetCartHandler:

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

    def handle(self, user_id: str) -> CartDTO:
        with self._locks.hold(user_id):
            cart = self._load(user_id)
        return compose_cart(cart, self._catalog, self._users)

    @conflict_retry()
    def _load(self, user_id: str) -> Cart:
        with self._uow_factory() as uow:
            cart = get_or_create_cart(uow, user_id)
            uow.commit()
        return cart
