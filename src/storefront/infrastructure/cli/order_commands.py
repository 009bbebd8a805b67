"""CLI commands for order history."""

from __future__ import annotations

import asyncio

import click

from storefront.application.dto import PlacedOrderDTO
from storefront.application.order_history import ListOrdersHandler, ShowOrderHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import remote_services


@click.command("list")
def order_list() -> None:
    """List your orders."""

    async def _list() -> list[PlacedOrderDTO]:
        async with remote_services() as remote:
            return await ListOrdersHandler(remote.order_gateway).handle()

    try:
        orders = asyncio.run(_list())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<26} {'Created':<22} {'Status':<12} {'Total':>10}")
    click.echo("-" * 73)
    for o in orders:
        click.echo(f"{o.id:<26} {o.created_at:<22} {o.status:<12} {o.total:>10}")


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
def order_show(order_id: str) -> None:
    """Show details of an existing order."""

    async def _show() -> PlacedOrderDTO:
        async with remote_services() as remote:
            return await ShowOrderHandler(remote.order_gateway).handle(order_id)

    try:
        dto = asyncio.run(_show())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Created:  {dto.created_at}")
    if dto.payment_method:
        click.echo(f"Payment:  {dto.payment_method}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10}")
    click.echo(f"  {'-'*37}")
    for item in dto.items:
        click.echo(f"  {item.name:<20} {item.quantity:>5} {item.price:>10}")
    click.echo(f"  {'-'*37}")
    click.echo(f"  {'Order Total':<26} {dto.total:>10}")
