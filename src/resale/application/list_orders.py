"""Application service: List Orders use case (query)."""

from __future__ import annotations

from resale.application.dto import OrderPageDTO
from resale.application.views import summarize_order
from resale.domain.exceptions import ValidationError
from resale.domain.repository.unit_of_work import UnitOfWorkFactory

DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100


class ListOrdersHandler:

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        default_limit: int = DEFAULT_PAGE_LIMIT,
    ) -> None:
        self._uow_factory = uow_factory
        self._default_limit = default_limit

    def handle(self, user_id: str, page: int = 1, limit: int | None = None) -> OrderPageDTO:
        """Return one page of the user's orders, newest first."""
        if limit is None:
            limit = self._default_limit
        if page < 1:
            raise ValidationError("Page must be at least 1")
        if not 1 <= limit <= MAX_PAGE_LIMIT:
            raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_LIMIT}")

        with self._uow_factory() as uow:
            orders = uow.orders.list_by_user(user_id, offset=(page - 1) * limit, limit=limit)

        summaries = [summarize_order(order) for order in orders]
        return OrderPageDTO(orders=summaries, page=page, limit=limit, count=len(summaries))
