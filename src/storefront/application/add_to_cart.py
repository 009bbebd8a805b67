"""Application service: Add To Cart use case.

Captures a snapshot of the product at add-time; the cart shows that
snapshot's price until checkout reconciliation refreshes it.
"""

from __future__ import annotations

from storefront.application.cart_store import CartStore
from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.gateway.product_catalog import ProductCatalog
from storefront.domain.model.cart import CartLine
from storefront.domain.model.product import ProductSnapshot


class AddToCartHandler:

    def __init__(self, cart: CartStore, catalog: ProductCatalog) -> None:
        self._cart = cart
        self._catalog = catalog

    async def handle(
        self, product_id: str, quantity: int = 1
    ) -> tuple[ProductSnapshot, CartLine | None]:
        """Fetch the product and add it.

        Returns the snapshot and the resulting line, which is None when
        the product is out of stock.
        """
        if not product_id or not product_id.strip():
            raise ValidationError("Product id is required")

        product = await self._catalog.get_product(product_id.strip())
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

        return product, self._cart.add_item(product, quantity)
