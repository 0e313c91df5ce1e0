"""Abstract unit of work.

Groups cart and order writes so they reach storage together or not at
all. Use as a context manager; leaving the block without calling
``commit()`` discards every staged change.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from resale.domain.repository.cart_repository import CartRepository
from resale.domain.repository.order_repository import OrderRepository


class UnitOfWork(ABC):

    carts: CartRepository
    orders: OrderRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Apply every staged change atomically.

        Raises StorageError (or ConcurrencyConflictError) if nothing
        could be applied; in that case storage is left untouched.
        """

    @abstractmethod
    def rollback(self) -> None:
        """Discard staged changes. Safe to call after a commit."""


UnitOfWorkFactory = Callable[[], UnitOfWork]
