"""Application service: Show Order use case (query)."""

from __future__ import annotations

from resale.application.dto import OrderDTO
from resale.application.views import compose_order
from resale.domain.exceptions import NotFoundError
from resale.domain.repository.catalog import Catalog
from resale.domain.repository.unit_of_work import UnitOfWorkFactory
from resale.domain.repository.user_directory import UserDirectory


class ShowOrderHandler:

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        catalog: Catalog,
        users: UserDirectory | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._catalog = catalog
        self._users = users

    def handle(self, order_id: int, user_id: str) -> OrderDTO:
        """Return one of the buyer's own orders.

        Someone else's order is reported exactly like a missing one.
        """
        with self._uow_factory() as uow:
            order = uow.orders.get_by_id(order_id)
        if order is None or order.user_id != user_id:
            raise NotFoundError(f"Order #{order_id} not found")
        return compose_order(order, self._catalog, self._users)
