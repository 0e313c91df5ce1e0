from dataclasses import replace
from pathlib import Path

import click

from resale.domain.exceptions import DomainException
from resale.infrastructure.bootstrap import Container
from resale.infrastructure.cli.cart_commands import (
    cart_add,
    cart_checkout,
    cart_clear,
    cart_remove,
    cart_show,
    cart_update,
)
from resale.infrastructure.cli.formatting import error_message
from resale.infrastructure.cli.order_commands import order_list, order_show, order_status
from resale.infrastructure.cli.product_commands import product_list, product_show
from resale.infrastructure.config import Settings
from resale.infrastructure.logconfig import configure_logging


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding store.json, products.json and users.json.",
)
@click.pass_context
def cli(ctx: click.Context, data_dir: Path | None) -> None:
    """Resale: second-hand marketplace carts and orders."""
    try:
        settings = Settings.from_env()
        if data_dir is not None:
            settings = replace(settings, data_dir=data_dir)
        configure_logging(settings.log_level, settings.log_json)
        container = Container.open(settings)
    except DomainException as exc:
        raise click.ClickException(error_message(exc))

    ctx.obj = container
    ctx.call_on_close(container.close)


@cli.group()
def cart() -> None:
    """Manage your cart."""


@cli.group()
def order() -> None:
    """View and update orders."""


@cli.group()
def product() -> None:
    """Browse the catalog."""


# Register subcommands
cart.add_command(cart_show)
cart.add_command(cart_add)
cart.add_command(cart_update)
cart.add_command(cart_remove)
cart.add_command(cart_clear)
cart.add_command(cart_checkout)
order.add_command(order_list)
order.add_command(order_show)
order.add_command(order_status)
product.add_command(product_list)
product.add_command(product_show)
