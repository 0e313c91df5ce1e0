"""JSON-file-backed implementation of the read-only Catalog.

The file is owned by the listings side of the marketplace and may change
at any time, so it is re-read on every lookup.
"""

from __future__ import annotations

import json
from decimal import Decimal, InvalidOperation
from pathlib import Path

from resale.domain.exceptions import StorageError, ValidationError
from resale.domain.model.product import Product
from resale.domain.model.value_objects import Money
from resale.domain.repository.catalog import Catalog


class JsonCatalog(Catalog):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    # --- Catalog interface ----------------------------------------------------

    def get_product(self, product_id: str) -> Product | None:
        return self._load().get(str(product_id))

    def list_products(self) -> list[Product]:
        return list(self._load().values())

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[str, Product]:
        if not self._file_path.exists():
            return {}
        try:
            raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StorageError(f"Cannot read catalog {self._file_path}: {exc}") from exc
        try:
            return {str(item["id"]): self._to_domain(item) for item in raw}
        except (AttributeError, KeyError, TypeError, InvalidOperation, ValidationError) as exc:
            raise StorageError(f"Malformed product in catalog {self._file_path}: {exc!r}") from exc

    @staticmethod
    def _to_domain(item: dict) -> Product:
        return Product(
            id=str(item["id"]),
            price=Money(Decimal(str(item["price"])), item.get("currency", "USD")),
            seller_id=str(item["seller_id"]),
            is_available=bool(item.get("is_available", True)),
            title=item.get("title", ""),
            condition=item.get("condition", "Good"),
        )
