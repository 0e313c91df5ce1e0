"""Application service: Add To Cart use case."""

from __future__ import annotations

import structlog

from resale.application.dto import CartDTO
from resale.application.get_cart import get_or_create_cart
from resale.application.locking import UserLockRegistry
from resale.application.retry import conflict_retry
from resale.application.views import compose_cart
from resale.domain.exceptions import NotFoundError, UnavailableError
from resale.domain.model.cart import Cart
from resale.domain.model.value_objects import Quantity
from resale.domain.repository.catalog import Catalog
from resale.domain.repository.unit_of_work import UnitOfWorkFactory
from resale.domain.repository.user_directory import UserDirectory

logger = structlog.get_logger(__name__)


class AddToCartHandler:

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

    def handle(self, user_id: str, product_id: str, quantity: int) -> CartDTO:
        """Add ``quantity`` units of a product to the user's cart.

        Adding a product that is already in the cart increases the
        existing line's quantity rather than adding a second line.
        """
        qty = Quantity(quantity)

        product = self._catalog.get_product(product_id)
        if product is None:
            raise NotFoundError(f"Product '{product_id}' not found")
        if not product.is_available:
            raise UnavailableError(f"Product '{product_id}' is not available")

        with self._locks.hold(user_id):
            cart = self._add(user_id, product_id, qty)

        return compose_cart(cart, self._catalog, self._users)

    @conflict_retry()
    def _add(self, user_id: str, product_id: str, qty: Quantity) -> Cart:
        with self._uow_factory() as uow:
            cart = get_or_create_cart(uow, user_id)
            item = cart.add(product_id, qty)
            uow.carts.save(cart)
            uow.commit()

        logger.info(
            "cart_item_added",
            user_id=user_id,
            product_id=product_id,
            added=qty.value,
            quantity=item.quantity.value,
        )
        return cart
