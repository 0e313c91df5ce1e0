"""Abstract repository for the Cart aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from resale.domain.model.cart import Cart


class CartRepository(ABC):

    @abstractmethod
    def get_by_user(self, user_id: str) -> Cart | None:
        """Return the user's cart, or None if they never had one."""

    @abstractmethod
    def add(self, cart: Cart) -> None:
        """Register a brand-new cart. At most one cart may exist per user."""

    @abstractmethod
    def save(self, cart: Cart) -> None:
        """Persist changes to a cart previously loaded through this repository."""
