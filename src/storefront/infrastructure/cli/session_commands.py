"""CLI commands for switching the shopper the cart belongs to."""

from __future__ import annotations

import click

from storefront.infrastructure.bootstrap import cart_store, session_store


@click.command("login")
@click.option("--user", "user_id", required=True, help="User ID to shop as.")
def session_login(user_id: str) -> None:
    """Remember USER as the current shopper and load their cart."""
    session_store().login(user_id)
    store = cart_store(user_id)
    click.echo(f"Shopping as {user_id}. Cart items: {store.get_count()}")


@click.command("logout")
@click.pass_obj
def session_logout(obj: dict) -> None:
    """Clear the current shopper's cart and forget them."""
    store = cart_store(obj.get("user"))
    owner = store.owner
    store.logout()
    session_store().logout()
    click.echo(f"Logged out {owner}; cart cleared.")
