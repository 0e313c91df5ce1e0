"""Read-side composition of carts and orders into DTOs.

Carts and orders only hold product IDs. Product and seller details are
joined in here, at read time, from the injected catalog and user
directory. A product that has since been deleted simply shows up
without details.
"""

from __future__ import annotations

from resale.application.dto import (
    CartDTO,
    CartItemDTO,
    OrderDTO,
    OrderItemDTO,
    OrderSummaryDTO,
)
from resale.domain.model.cart import Cart
from resale.domain.model.order import Order
from resale.domain.repository.catalog import Catalog
from resale.domain.repository.user_directory import UserDirectory

_TIMESTAMP = "%Y-%m-%d %H:%M UTC"


def compose_cart(cart: Cart, catalog: Catalog, users: UserDirectory | None = None) -> CartDTO:
    products = {item.product_id: catalog.get_product(item.product_id) for item in cart.items}

    items: list[CartItemDTO] = []
    for item in cart.items:
        product = products[item.product_id]
        if product is None:
            items.append(
                CartItemDTO(
                    id=item.id,
                    product_id=item.product_id,
                    quantity=item.quantity.value,
                    added_at=item.added_at.strftime(_TIMESTAMP),
                    title=None,
                    price=None,
                    line_total=None,
                    is_available=False,
                    condition=None,
                    seller_name=None,
                )
            )
            continue
        items.append(
            CartItemDTO(
                id=item.id,
                product_id=item.product_id,
                quantity=item.quantity.value,
                added_at=item.added_at.strftime(_TIMESTAMP),
                title=product.title,
                price=str(product.price),
                line_total=str(product.price * item.quantity.value),
                is_available=product.is_available,
                condition=product.condition,
                seller_name=_username(users, product.seller_id),
            )
        )

    return CartDTO(
        id=cart.id,
        user_id=cart.user_id,
        items=items,
        total=str(cart.compute_total(products.get)),
    )


def compose_order(order: Order, catalog: Catalog, users: UserDirectory | None = None) -> OrderDTO:
    items: list[OrderItemDTO] = []
    for item in order.items:
        product = catalog.get_product(item.product_id)
        items.append(
            OrderItemDTO(
                product_id=item.product_id,
                quantity=item.quantity.value,
                price_at_purchase=str(item.price_at_purchase),
                line_total=str(item.line_total),
                title=product.title if product is not None else None,
                seller_name=(
                    _username(users, product.seller_id) if product is not None else None
                ),
            )
        )

    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        user_id=order.user_id,
        status=order.status.value,
        items=items,
        total_amount=str(order.total_amount),
        created_at=order.created_at.strftime(_TIMESTAMP),
    )


def summarize_order(order: Order) -> OrderSummaryDTO:
    return OrderSummaryDTO(
        id=order.id,  # type: ignore[arg-type]
        status=order.status.value,
        total_amount=str(order.total_amount),
        item_count=order.item_count,
        created_at=order.created_at.strftime(_TIMESTAMP),
    )


def _username(users: UserDirectory | None, user_id: str) -> str | None:
    if users is None:
        return None
    return users.get_username(user_id)
