"""Remote collaborator for live catalog data."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.product import ProductSnapshot


class ProductCatalog(ABC):

    @abstractmethod
    async def get_product(self, product_id: str) -> ProductSnapshot | None:
        """Return a fresh snapshot of the product, or None if it is gone."""
