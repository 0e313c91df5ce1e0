"""CLI commands for the shopping cart."""

from __future__ import annotations

import click

from resale.domain.exceptions import DomainException
from resale.infrastructure.bootstrap import Container
from resale.infrastructure.cli.formatting import display_cart, display_order, error_message

user_option = click.option(
    "--user", "user_id", required=True, envvar="RESALE_USER", help="Acting user ID."
)


@click.command("show")
@user_option
@click.pass_obj
def cart_show(container: Container, user_id: str) -> None:
    """Show the cart (creates an empty one on first use)."""
    try:
        dto = container.get_cart().handle(user_id)
    except DomainException as exc:
        raise click.ClickException(error_message(exc))

    display_cart(dto)


@click.command("add")
@user_option
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", type=int, default=1, show_default=True, help="Units to add.")
@click.pass_obj
def cart_add(container: Container, user_id: str, product_id: str, quantity: int) -> None:
    """Add a product to the cart."""
    try:
        dto = container.add_to_cart().handle(user_id, product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(error_message(exc))

    click.echo(f"Added {quantity} x {product_id} to cart.")
    display_cart(dto)


@click.command("update")
@user_option
@click.option("--item", "item_id", required=True, help="Cart item ID.")
@click.option("--quantity", type=int, required=True, help="New quantity.")
@click.pass_obj
def cart_update(container: Container, user_id: str, item_id: str, quantity: int) -> None:
    """Set the quantity of a cart item."""
    try:
        dto = container.update_cart_item().handle(user_id, item_id, quantity)
    except DomainException as exc:
        raise click.ClickException(error_message(exc))

    display_cart(dto)


@click.command("remove")
@user_option
@click.option("--item", "item_id", required=True, help="Cart item ID.")
@click.pass_obj
def cart_remove(container: Container, user_id: str, item_id: str) -> None:
    """Remove an item from the cart."""
    try:
        dto = container.remove_from_cart().handle(user_id, item_id)
    except DomainException as exc:
        raise click.ClickException(error_message(exc))

    click.echo("Item removed from cart.")
    display_cart(dto)


@click.command("clear")
@user_option
@click.pass_obj
def cart_clear(container: Container, user_id: str) -> None:
    """Remove every item from the cart."""
    try:
        container.clear_cart().handle(user_id)
    except DomainException as exc:
        raise click.ClickException(error_message(exc))

    click.echo("Cart cleared.")


@click.command("checkout")
@user_option
@click.pass_obj
def cart_checkout(container: Container, user_id: str) -> None:
    """Place an order for everything in the cart."""
    try:
        dto = container.checkout().handle(user_id)
    except DomainException as exc:
        raise click.ClickException(error_message(exc))

    click.echo(f"Order #{dto.id} placed.")
    display_order(dto)
