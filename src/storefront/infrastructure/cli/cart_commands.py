"""CLI commands for the shopping cart."""

from __future__ import annotations

import asyncio

import click

from storefront.application.add_to_cart import AddToCartHandler
from storefront.application.checkout import CheckoutSession
from storefront.application.dto import CartSummaryDTO, cart_summary
from storefront.domain.exceptions import DomainException
from storefront.domain.service.pricing_calculator import PricingCalculator
from storefront.infrastructure.bootstrap import cart_store, remote_services


def display_cart(summary: CartSummaryDTO) -> None:
    """Shared formatting for the cart and checkout summary."""
    if not summary.lines:
        click.echo("Your cart is empty.")
        return

    click.echo(f"  {'ID':<12} {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*60}")
    for line in summary.lines:
        click.echo(
            f"  {line.product_id:<12} {line.product_name:<20} {line.quantity:>5} "
            f"{line.unit_price:>10} {line.line_total:>10}"
        )
    click.echo(f"  {'-'*60}")
    click.echo(f"  {'Items':<40} {summary.count:>20}")
    click.echo(f"  {'Subtotal':<40} {summary.subtotal:>20}")
    shipping = "FREE" if summary.free_shipping else summary.shipping
    click.echo(f"  {'Shipping':<40} {shipping:>20}")
    click.echo(f"  {'Tax (10%)':<40} {summary.tax:>20}")
    if summary.coupon_code:
        label = f"Coupon {summary.coupon_code}"
        if summary.coupon_description:
            label += f" ({summary.coupon_description})"
        click.echo(f"  {label:<40} {'-' + summary.coupon_discount:>20}")
    click.echo(f"  {'Total':<40} {summary.total:>20}")


@click.command("add")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--qty", "quantity", default=1, show_default=True, type=int, help="Quantity to add.")
@click.pass_obj
def cart_add(obj: dict, product_id: str, quantity: int) -> None:
    """Add a product to the cart (quantity is capped at available stock)."""
    store = cart_store(obj.get("user"))

    async def _add():
        async with remote_services() as remote:
            return await AddToCartHandler(store, remote.catalog).handle(product_id, quantity)

    try:
        product, line = asyncio.run(_add())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if line is None:
        click.echo(f"'{product.name}' is out of stock; cart unchanged.")
        return
    click.echo(f"'{product.name}' in cart: {line.quantity} x {product.price}")
    if line.quantity.value < quantity:
        click.echo(f"Only {product.stock} available.")
    click.echo(f"Cart items: {store.get_count()}")


@click.command("remove")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.pass_obj
def cart_remove(obj: dict, product_id: str) -> None:
    """Remove a product from the cart."""
    store = cart_store(obj.get("user"))
    store.remove_item(product_id)
    click.echo(f"Product {product_id} removed. Cart items: {store.get_count()}")


@click.command("update")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--qty", "quantity", required=True, type=int, help="New quantity (0 removes).")
@click.pass_obj
def cart_update(obj: dict, product_id: str, quantity: int) -> None:
    """Change the quantity of a cart line."""
    store = cart_store(obj.get("user"))
    if store.update_quantity(product_id, quantity) is None and quantity > 0:
        raise click.ClickException(f"Product {product_id} is not in the cart")
    click.echo(f"Cart items: {store.get_count()}")


@click.command("clear")
@click.pass_obj
def cart_clear(obj: dict) -> None:
    """Empty the cart."""
    cart_store(obj.get("user")).clear()
    click.echo("Cart cleared.")


@click.command("show")
@click.option("--coupon", default=None, help="Preview totals with a coupon code.")
@click.pass_obj
def cart_show(obj: dict, coupon: str | None) -> None:
    """Show cart contents and totals."""
    store = cart_store(obj.get("user"))

    if not coupon:
        display_cart(cart_summary(store.lines, PricingCalculator().calculate(store.lines)))
        return

    async def _preview() -> CheckoutSession:
        async with remote_services() as remote:
            session = CheckoutSession(store, remote.coupon_validator, remote.order_gateway)
            await session.apply_coupon(coupon)
            return session

    try:
        session = asyncio.run(_preview())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_cart(cart_summary(store.lines, session.totals(), session.applied_coupon))
