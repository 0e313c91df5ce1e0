"""Read-only view of the external product catalog.

The catalog is owned by another part of the marketplace. This package
never writes to it; it only asks what a product looks like right now.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from resale.domain.model.product import Product


class Catalog(ABC):

    @abstractmethod
    def get_product(self, product_id: str) -> Product | None:
        """Return the product's current state, or None if it no longer exists."""

    @abstractmethod
    def list_products(self) -> list[Product]:
        """Return every product in the catalog."""
