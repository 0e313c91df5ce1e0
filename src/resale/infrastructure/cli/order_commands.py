"""CLI commands for the order ledger."""

from __future__ import annotations

import click

from resale.domain.exceptions import DomainException
from resale.infrastructure.bootstrap import Container
from resale.infrastructure.cli.cart_commands import user_option
from resale.infrastructure.cli.formatting import display_order, error_message


@click.command("list")
@user_option
@click.option("--page", type=int, default=1, show_default=True, help="Page number.")
@click.option("--limit", type=int, default=None, help="Orders per page.")
@click.pass_obj
def order_list(container: Container, user_id: str, page: int, limit: int | None) -> None:
    """List your orders, newest first."""
    try:
        result = container.list_orders().handle(user_id, page=page, limit=limit)
    except DomainException as exc:
        raise click.ClickException(error_message(exc))

    if not result.orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'Status':<10} {'Items':>5} {'Total':>12}  {'Created'}")
    click.echo("-" * 58)
    for o in result.orders:
        click.echo(f"{o.id:<6} {o.status:<10} {o.item_count:>5} {o.total_amount:>12}  {o.created_at}")
    click.echo(f"(page {result.page}, limit {result.limit}, {result.count} shown)")


@click.command("show")
@user_option
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@click.pass_obj
def order_show(container: Container, user_id: str, order_id: int) -> None:
    """Show details of one of your orders."""
    try:
        dto = container.show_order().handle(order_id, user_id)
    except DomainException as exc:
        raise click.ClickException(error_message(exc))

    display_order(dto)


@click.command("status")
@user_option
@click.option("--id", "order_id", required=True, type=int, help="Order ID to update.")
@click.option("--set", "status", required=True, help="New status (confirmed, shipped, ...).")
@click.pass_obj
def order_status(container: Container, user_id: str, order_id: int, status: str) -> None:
    """Update the status of an order you sold items in."""
    try:
        dto = container.update_order_status().handle(order_id, user_id, status)
    except DomainException as exc:
        raise click.ClickException(error_message(exc))

    click.echo(f"Order #{dto.id} is now {dto.status}.")
