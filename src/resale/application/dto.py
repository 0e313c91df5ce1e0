"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world. Money is pre-formatted
(e.g. "$15.00") and timestamps are rendered in UTC.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CartItemDTO:
    id: str
    product_id: str
    quantity: int
    added_at: str
    title: str | None  # None when the product no longer exists
    price: str | None
    line_total: str | None
    is_available: bool
    condition: str | None
    seller_name: str | None


@dataclass(frozen=True)
class CartDTO:
    id: str
    user_id: str
    items: list[CartItemDTO]
    total: str


@dataclass(frozen=True)
class OrderItemDTO:
    product_id: str
    quantity: int
    price_at_purchase: str
    line_total: str
    title: str | None
    seller_name: str | None


@dataclass(frozen=True)
class OrderDTO:
    id: int
    user_id: str
    status: str
    items: list[OrderItemDTO]
    total_amount: str
    created_at: str


@dataclass(frozen=True)
class OrderSummaryDTO:
    """One row of an order listing; ``item_count`` is derived, not stored."""

    id: int
    status: str
    total_amount: str
    item_count: int
    created_at: str


@dataclass(frozen=True)
class OrderPageDTO:
    orders: list[OrderSummaryDTO]
    page: int
    limit: int
    count: int
