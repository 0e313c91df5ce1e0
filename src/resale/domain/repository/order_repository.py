"""Abstract repository for the Order aggregate (the order ledger)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from resale.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def list_by_user(self, user_id: str, offset: int, limit: int) -> list[Order]:
        """Return a user's orders, newest first."""

    @abstractmethod
    def add(self, order: Order) -> None:
        """Append a new order. Its ID is assigned when the unit of work commits."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a status change on an existing order."""
