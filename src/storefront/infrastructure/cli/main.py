import click

from storefront.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_remove,
    cart_show,
    cart_update,
)
from storefront.infrastructure.cli.checkout_commands import checkout
from storefront.infrastructure.cli.order_commands import order_list, order_show
from storefront.infrastructure.cli.session_commands import session_login, session_logout
from storefront.infrastructure.config import settings
from storefront.infrastructure.logging_config import configure_logging


@click.group()
@click.option("--user", default=None, help="Act for this user ID (default: current session).")
@click.option("--log-level", default=None, help="Logging level, e.g. INFO or DEBUG.")
@click.pass_context
def cli(ctx: click.Context, user: str | None, log_level: str | None) -> None:
    """Storefront — cart, checkout and orders"""
    configure_logging(log_level or settings.log_level)
    ctx.ensure_object(dict)
    ctx.obj["user"] = user


@cli.group()
def cart() -> None:
    """Manage the shopping cart."""


@cli.group()
def order() -> None:
    """Browse your orders."""


@cli.group()
def session() -> None:
    """Log in and out."""


# Register subcommands
cart.add_command(cart_add)
cart.add_command(cart_clear)
cart.add_command(cart_remove)
cart.add_command(cart_show)
cart.add_command(cart_update)
cli.add_command(checkout)
order.add_command(order_list)
order.add_command(order_show)
session.add_command(session_login)
session.add_command(session_logout)
