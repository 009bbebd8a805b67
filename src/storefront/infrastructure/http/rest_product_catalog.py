"""ProductCatalog backed by ``GET /products/{id}``."""

from __future__ import annotations

from urllib.parse import quote

from storefront.domain.exceptions import GatewayUnavailableError, ValidationError
from storefront.domain.gateway.product_catalog import ProductCatalog
from storefront.domain.model.product import ProductSnapshot
from storefront.infrastructure.http.api_client import GENERIC_FAILURE, ApiClient
from storefront.infrastructure.http.mapping import product_from_api


class RestProductCatalog(ProductCatalog):

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    async def get_product(self, product_id: str) -> ProductSnapshot | None:
        resp = await self._api.get(f"/products/{quote(product_id, safe='')}")
        if resp.status == 404:
            return None
        if not resp.ok:
            raise GatewayUnavailableError(resp.message or GENERIC_FAILURE)

        data = resp.data if isinstance(resp.data, dict) else {}
        raw = data.get("product", data)
        try:
            return product_from_api(raw)
        except (ValidationError, ValueError, TypeError) as exc:
            raise GatewayUnavailableError(f"Unexpected product response: {exc}") from exc
