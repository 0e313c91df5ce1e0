"""CLI commands for browsing the catalog."""

from __future__ import annotations

import click

from resale.domain.exceptions import DomainException
from resale.infrastructure.bootstrap import Container
from resale.infrastructure.cli.formatting import error_message


@click.command("list")
@click.option("--available-only", is_flag=True, default=False, help="Hide unavailable products.")
@click.pass_obj
def product_list(container: Container, available_only: bool) -> None:
    """List products in the catalog."""
    try:
        products = container.catalog.list_products()
    except DomainException as exc:
        raise click.ClickException(error_message(exc))

    if available_only:
        products = [p for p in products if p.is_available]

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<8} {'Title':<24} {'Price':>10} {'Available':>10}")
    click.echo("-" * 55)
    for p in products:
        click.echo(
            f"{p.id:<8} {p.title[:24]:<24} {str(p.price):>10} {'yes' if p.is_available else 'no':>10}"
        )


@click.command("show")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_obj
def product_show(container: Container, product_id: str) -> None:
    """Show a single product."""
    try:
        product = container.catalog.get_product(product_id)
        seller = container.users.get_username(product.seller_id) if product else None
    except DomainException as exc:
        raise click.ClickException(error_message(exc))

    if product is None:
        raise click.ClickException(f"not_found: Product '{product_id}' not found")

    click.echo(f"Product {product.id}: {product.title}")
    click.echo(f"Price:      {product.price}")
    click.echo(f"Condition:  {product.condition}")
    click.echo(f"Seller:     {seller or product.seller_id}")
    click.echo(f"Available:  {'yes' if product.is_available else 'no'}")
