"""Application service: Clear Cart use case."""

from __future__ import annotations

import structlog

from resale.application.locking import UserLockRegistry
from resale.application.retry import conflict_retry
from resale.domain.exceptions import NotFoundError
from resale.domain.repository.unit_of_work import UnitOfWorkFactory

logger = structlog.get_logger(__name__)


class ClearCartHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory, locks: UserLockRegistry) -> None:
        self._uow_factory = uow_factory
        self._locks = locks

    def handle(self, user_id: str) -> None:
        """Empty the user's cart.

        Clearing an already-empty cart is a no-op. Only a user who has
        never had a cart gets NotFoundError.
        """
        with self._locks.hold(user_id):
            self._clear(user_id)

    @conflict_retry()
    def _clear(self, user_id: str) -> None:
        with self._uow_factory() as uow:
            cart = uow.carts.get_by_user(user_id)
            if cart is None:
                raise NotFoundError("Cart not found")
            if cart.is_empty:
                return
            cart.clear()
            uow.carts.save(cart)
            uow.commit()

        logger.info("cart_cleared", user_id=user_id)
