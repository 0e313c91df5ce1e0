"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.

The document store is the one process-wide resource. ``Container.open``
creates and opens it; ``Container.close`` must be called on shutdown.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from resale.application.add_to_cart import AddToCartHandler
from resale.application.checkout import CheckoutHandler
from resale.application.clear_cart import ClearCartHandler
from resale.application.get_cart import GetCartHandler
from resale.application.list_orders import ListOrdersHandler
from resale.application.locking import UserLockRegistry
from resale.application.remove_from_cart import RemoveFromCartHandler
from resale.application.show_order import ShowOrderHandler
from resale.application.update_cart_item import UpdateCartItemHandler
from resale.application.update_order_status import UpdateOrderStatusHandler
from resale.domain.repository.catalog import Catalog
from resale.domain.repository.user_directory import UserDirectory
from resale.infrastructure.config import Settings
from resale.infrastructure.persistence.document_store import DocumentStore
from resale.infrastructure.persistence.document_unit_of_work import DocumentUnitOfWork
from resale.infrastructure.persistence.json_catalog import JsonCatalog
from resale.infrastructure.persistence.json_user_directory import JsonUserDirectory

logger = structlog.get_logger(__name__)


@dataclass
class Container:
    settings: Settings
    store: DocumentStore
    catalog: Catalog
    users: UserDirectory
    locks: UserLockRegistry

    @staticmethod
    def open(settings: Settings) -> Container:
        store = DocumentStore(settings.store_path, lock_timeout=settings.lock_timeout).open()
        logger.debug("container_opened", data_dir=str(settings.data_dir))
        return Container(
            settings=settings,
            store=store,
            catalog=JsonCatalog(settings.products_path),
            users=JsonUserDirectory(settings.users_path),
            locks=UserLockRegistry(timeout=settings.lock_timeout),
        )

    def close(self) -> None:
        self.store.close()

    def unit_of_work(self) -> DocumentUnitOfWork:
        return DocumentUnitOfWork(self.store)

    # --- Handlers -------------------------------------------------------------

    def get_cart(self) -> GetCartHandler:
        return GetCartHandler(self.unit_of_work, self.catalog, self.locks, self.users)

    def add_to_cart(self) -> AddToCartHandler:
        return AddToCartHandler(self.unit_of_work, self.catalog, self.locks, self.users)

    def update_cart_item(self) -> UpdateCartItemHandler:
        return UpdateCartItemHandler(self.unit_of_work, self.catalog, self.locks, self.users)

    def remove_from_cart(self) -> RemoveFromCartHandler:
        return RemoveFromCartHandler(self.unit_of_work, self.catalog, self.locks, self.users)

    def clear_cart(self) -> ClearCartHandler:
        return ClearCartHandler(self.unit_of_work, self.locks)

    def checkout(self) -> CheckoutHandler:
        return CheckoutHandler(self.unit_of_work, self.catalog, self.locks, self.users)

    def list_orders(self) -> ListOrdersHandler:
        return ListOrdersHandler(self.unit_of_work, default_limit=self.settings.orders_page_limit)

    def show_order(self) -> ShowOrderHandler:
        return ShowOrderHandler(self.unit_of_work, self.catalog, self.users)

    def update_order_status(self) -> UpdateOrderStatusHandler:
        return UpdateOrderStatusHandler(self.unit_of_work, self.catalog, self.users)
