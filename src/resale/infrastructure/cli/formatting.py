"""Shared console formatting for CLI commands."""

from __future__ import annotations

import click

from resale.application.dto import CartDTO, OrderDTO
from resale.domain.exceptions import DomainException


def error_message(exc: DomainException) -> str:
    """Stable ``kind: message`` form used for every domain failure."""
    return f"{exc.kind}: {exc}"


def display_cart(dto: CartDTO) -> None:
    click.echo(f"Cart {dto.id}  (user={dto.user_id})")
    click.echo()

    if not dto.items:
        click.echo("  Your cart is empty.")
        return

    click.echo(f"  {'Item':<12} {'Product':<24} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*65}")
    for item in dto.items:
        title = item.title if item.title is not None else f"<{item.product_id} removed>"
        if item.title is not None and not item.is_available:
            title = f"{title} (unavailable)"
        click.echo(
            f"  {item.id[:12]:<12} {title[:24]:<24} {item.quantity:>5} "
            f"{item.price or '-':>10} {item.line_total or '-':>10}"
        )
    click.echo(f"  {'-'*65}")
    click.echo(f"  {'Cart Total':<44} {dto.total:>20}")


def display_order(dto: OrderDTO) -> None:
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Buyer:    {dto.user_id}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<24} {'Seller':<12} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*65}")
    for item in dto.items:
        title = item.title if item.title is not None else f"<{item.product_id}>"
        click.echo(
            f"  {title[:24]:<24} {(item.seller_name or '-')[:12]:<12} {item.quantity:>5} "
            f"{item.price_at_purchase:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*65}")
    click.echo(f"  {'Order Total':<44} {dto.total_amount:>20}")
