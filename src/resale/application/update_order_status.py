"""Application service: Update Order Status use case.

Only a seller of at least one item in the order may move its status.
Sellers are resolved from the *current* catalog, so if a product has
been deleted or handed to another seller since the purchase, the
previous seller loses access through that item.
"""

from __future__ import annotations

import structlog

from resale.application.dto import OrderDTO
from resale.application.retry import conflict_retry
from resale.application.views import compose_order
from resale.domain.exceptions import ForbiddenError, NotFoundError
from resale.domain.model.order import Order, OrderStatus
from resale.domain.repository.catalog import Catalog
from resale.domain.repository.unit_of_work import UnitOfWorkFactory
from resale.domain.repository.user_directory import UserDirectory

logger = structlog.get_logger(__name__)


class UpdateOrderStatusHandler:

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        catalog: Catalog,
        users: UserDirectory | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._catalog = catalog
        self._users = users

    def handle(self, order_id: int, user_id: str, status: str) -> OrderDTO:
        new_status = OrderStatus.parse(status)
        order = self._update(order_id, user_id, new_status)
        return compose_order(order, self._catalog, self._users)

    @conflict_retry()
    def _update(self, order_id: int, user_id: str, new_status: OrderStatus) -> Order:
        with self._uow_factory() as uow:
            order = uow.orders.get_by_id(order_id)
            if order is None:
                raise NotFoundError(f"Order #{order_id} not found")
            if user_id not in self._sellers_of(order):
                raise ForbiddenError("You are not authorized to update this order")

            previous = order.status
            order.transition_to(new_status)
            uow.orders.save(order)
            uow.commit()

        logger.info(
            "order_status_updated",
            order_id=order_id,
            seller_id=user_id,
            previous=previous.value,
            status=new_status.value,
        )
        return order

    def _sellers_of(self, order: Order) -> set[str]:
        sellers: set[str] = set()
        for item in order.items:
            product = self._catalog.get_product(item.product_id)
            if product is not None:
                sellers.add(product.seller_id)
        return sellers
