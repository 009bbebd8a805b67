"""Application service: Cart Store.

The single, injectable holder of the shopper's cart.  It outlives any
one page or command: create it at start-up, hand it to whatever needs
the cart, and tear it down with ``logout()``.

Every mutation re-persists the whole cart synchronously, so nothing
accrued before a crash or reload is lost.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from storefront.domain.model.cart import Cart, CartLine, LineChange
from storefront.domain.model.product import ProductSnapshot
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.cart_repository import ANONYMOUS_OWNER, CartRepository

logger = logging.getLogger(__name__)


class CartStore:

    def __init__(self, cart_repo: CartRepository, owner: str | None = None) -> None:
        self._cart_repo = cart_repo
        self._owner = owner or ANONYMOUS_OWNER
        self._cart = cart_repo.load(self._owner)

    # --- Lifecycle ------------------------------------------------------------

    @property
    def owner(self) -> str:
        return self._owner

    def login(self, user_id: str) -> None:
        """Switch to *user_id*'s persisted cart."""
        self._owner = user_id or ANONYMOUS_OWNER
        self._cart = self._cart_repo.load(self._owner)
        logger.debug("Cart loaded for %s (%d lines)", self._owner, len(self._cart.lines))

    def logout(self) -> None:
        """Clear the current cart and fall back to the anonymous one."""
        self._cart.clear()
        self._cart_repo.delete(self._owner)
        logger.debug("Cart cleared on logout for %s", self._owner)
        self._owner = ANONYMOUS_OWNER
        self._cart = self._cart_repo.load(self._owner)

    # --- Mutations ------------------------------------------------------------

    def add_item(self, product: ProductSnapshot, quantity: int = 1) -> CartLine | None:
        line = self._cart.add_item(product, quantity)
        if line is None:
            logger.debug("Ignored add of out-of-stock product %s", product.id)
        self._persist()
        return line

    def remove_item(self, product_id: str) -> None:
        self._cart.remove_item(product_id)
        self._persist()

    def remove_items(self, product_ids: Iterable[str]) -> None:
        """Remove several lines with a single write."""
        for product_id in product_ids:
            self._cart.remove_item(product_id)
        self._persist()

    def update_quantity(self, product_id: str, new_quantity: int) -> CartLine | None:
        line = self._cart.update_quantity(product_id, new_quantity)
        self._persist()
        return line

    def refresh_product(self, product_id: str, fresh: ProductSnapshot | None) -> LineChange | None:
        change = self._cart.refresh_product(product_id, fresh)
        self._persist()
        return change

    def clear(self) -> None:
        self._cart.clear()
        self._persist()

    # --- Queries --------------------------------------------------------------

    @property
    def lines(self) -> tuple[CartLine, ...]:
        return tuple(self._cart.lines)

    @property
    def is_empty(self) -> bool:
        return self._cart.is_empty

    def get_count(self) -> int:
        return self._cart.count

    def get_total(self) -> Money:
        """Subtotal of all lines; shipping, tax and coupons are not included."""
        return self._cart.subtotal

    # --- Internal helpers -----------------------------------------------------

    def _persist(self) -> None:
        self._cart_repo.save(self._owner, self._cart)
        logger.debug(
            "Cart persisted for %s: %d lines, %d units",
            self._owner,
            len(self._cart.lines),
            self._cart.count,
        )
