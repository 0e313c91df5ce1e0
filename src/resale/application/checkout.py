"""Application service: Checkout use case.

Converts the user's cart into a pending order:

1. Validating: the cart has items and every product still exists and
   is available *now*.
2. Snapshotting: current prices are frozen into the order items.
3. Committing: the order insert and the cart clear go to storage as one
   change set. Either both land or neither does.
4. Done: the created order is returned.

The whole sequence runs under the user's cart lock, so two checkouts of
the same cart in this process are serialised: the second one finds the
cart already empty. Writers the lock cannot see (another process using
the same data file) are caught by the cart's version check at commit
time. That conflict is retried once from step 1.
"""

from __future__ import annotations

import structlog

from resale.application.dto import OrderDTO
from resale.application.locking import UserLockRegistry
from resale.application.retry import conflict_retry
from resale.application.views import compose_order
from resale.domain.exceptions import DomainException, EmptyCartError
from resale.domain.model.order import Order
from resale.domain.repository.catalog import Catalog
from resale.domain.repository.unit_of_work import UnitOfWorkFactory
from resale.domain.repository.user_directory import UserDirectory
from resale.domain.service.checkout_service import CheckoutAttempt, CheckoutService

logger = structlog.get_logger(__name__)


class CheckoutHandler:

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
        self._service = CheckoutService(catalog)

    def handle(self, user_id: str) -> OrderDTO:
        with self._locks.hold(user_id):
            order = self._checkout(user_id)
        return compose_order(order, self._catalog, self._users)

    @conflict_retry()
    def _checkout(self, user_id: str) -> Order:
        attempt = CheckoutAttempt(user_id=user_id)
        log = logger.bind(user_id=user_id)
        log.info("checkout_stage", stage=attempt.stage.value)

        try:
            with self._uow_factory() as uow:
                cart = uow.carts.get_by_user(user_id)
                if cart is None:
                    raise EmptyCartError("Cart is empty")
                lines = self._service.validate(cart)

                log.info("checkout_stage", stage=attempt.advance().value)
                order = self._service.snapshot(user_id, lines)

                log.info("checkout_stage", stage=attempt.advance().value)
                uow.orders.add(order)
                cart.clear()
                uow.carts.save(cart)
                uow.commit()
        except DomainException as exc:
            failed_at = attempt.stage.value
            attempt.fail()
            log.warning(
                "checkout_failed",
                stage=failed_at,
                stages=[s.value for s in attempt.history],
                kind=exc.kind,
                error=str(exc),
            )
            raise

        attempt.advance()
        log.info(
            "checkout_completed",
            order_id=order.id,
            total_amount=str(order.total_amount.amount),
            items=order.item_count,
            stages=[s.value for s in attempt.history],
        )
        return order
