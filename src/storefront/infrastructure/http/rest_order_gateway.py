"""OrderGateway backed by the ``/orders`` endpoints."""

from __future__ import annotations

from urllib.parse import quote

from storefront.domain.exceptions import GatewayUnavailableError, OrderRejectedError
from storefront.domain.gateway.order_gateway import OrderGateway
from storefront.domain.model.order import OrderDraft, PlacedOrder
from storefront.infrastructure.http.api_client import GENERIC_FAILURE, ApiClient
from storefront.infrastructure.http.mapping import draft_to_api, placed_order_from_api

DEFAULT_REJECTION = "Failed to place order"


class RestOrderGateway(OrderGateway):

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    async def submit(self, draft: OrderDraft) -> PlacedOrder:
        resp = await self._api.post("/orders", draft_to_api(draft))
        if resp.is_server_error:
            raise GatewayUnavailableError(resp.message or GENERIC_FAILURE)
        if not resp.ok:
            raise OrderRejectedError(resp.message or DEFAULT_REJECTION)
        return placed_order_from_api(self._unwrap(resp.data, "order"))

    async def list_orders(self) -> list[PlacedOrder]:
        resp = await self._api.get("/orders")
        if not resp.ok:
            raise GatewayUnavailableError(resp.message or GENERIC_FAILURE)
        data = resp.data
        raw_orders = data.get("orders", []) if isinstance(data, dict) else data or []
        return [placed_order_from_api(raw) for raw in raw_orders]

    async def get_order(self, order_id: str) -> PlacedOrder | None:
        resp = await self._api.get(f"/orders/{quote(order_id, safe='')}")
        if resp.status == 404:
            return None
        if not resp.ok:
            raise GatewayUnavailableError(resp.message or GENERIC_FAILURE)
        return placed_order_from_api(self._unwrap(resp.data, "order"))

    @staticmethod
    def _unwrap(data, key: str) -> dict:
        if isinstance(data, dict) and isinstance(data.get(key), dict):
            return data[key]
        if isinstance(data, dict):
            return data
        raise GatewayUnavailableError("Unexpected response from the store")
