"""CLI command for placing an order from the cart."""

from __future__ import annotations

import asyncio

import click

from storefront.application.checkout import CheckoutResult, CheckoutSession
from storefront.application.dto import cart_summary
from storefront.domain.exceptions import CartChangedError, DomainException
from storefront.domain.model.order import PaymentMethod, ShippingAddress
from storefront.infrastructure.bootstrap import cart_store, remote_services
from storefront.infrastructure.cli.cart_commands import display_cart

PAYMENT_CHOICES = [m.value for m in PaymentMethod]


@click.command("checkout")
@click.option("--street", required=True, help="Street address.")
@click.option("--city", required=True, help="City.")
@click.option("--state", required=True, help="State / region.")
@click.option("--zip", "zip_code", required=True, help="ZIP / postal code.")
@click.option("--country", required=True, help="Country.")
@click.option(
    "--payment",
    type=click.Choice(PAYMENT_CHOICES, case_sensitive=False),
    default=PaymentMethod.CREDIT_CARD.value,
    show_default=True,
    help="Payment method.",
)
@click.option("--notes", default="", help="Order notes.")
@click.option("--coupon", default=None, help="Coupon code to apply.")
@click.pass_obj
def checkout(
    obj: dict,
    street: str,
    city: str,
    state: str,
    zip_code: str,
    country: str,
    payment: str,
    notes: str,
    coupon: str | None,
) -> None:
    """Place an order for everything in the cart.

    The cart is emptied only if the store accepts the order.
    """
    store = cart_store(obj.get("user"))
    if store.is_empty:
        raise click.ClickException("Your cart is empty.")

    address = ShippingAddress(
        street=street, city=city, state=state, zip_code=zip_code, country=country
    )

    async def _place() -> CheckoutResult:
        async with remote_services() as remote:
            session = CheckoutSession(
                store, remote.coupon_validator, remote.order_gateway, remote.catalog
            )
            if coupon:
                await session.apply_coupon(coupon)
            display_cart(cart_summary(store.lines, session.totals(), session.applied_coupon))
            click.echo()
            return await session.place_order(address, PaymentMethod.parse(payment), notes)

    try:
        result = asyncio.run(_place())
    except CartChangedError as exc:
        for change in exc.changes:
            click.echo(f"  * {change.describe()}")
        raise click.ClickException(str(exc))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{result.order.id} placed  (status={result.order.status})")
    click.echo(f"Total charged: {result.pricing.total}")
    for warning in result.warnings:
        click.echo(f"Warning: {warning}", err=True)
