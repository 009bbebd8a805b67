"""Application services: order history queries."""

from __future__ import annotations

from storefront.application.dto import PlacedOrderDTO, placed_order
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.gateway.order_gateway import OrderGateway


class ListOrdersHandler:

    def __init__(self, order_gateway: OrderGateway) -> None:
        self._order_gateway = order_gateway

    async def handle(self) -> list[PlacedOrderDTO]:
        orders = await self._order_gateway.list_orders()
        return [placed_order(o) for o in orders]


class ShowOrderHandler:

    def __init__(self, order_gateway: OrderGateway) -> None:
        self._order_gateway = order_gateway

    async def handle(self, order_id: str) -> PlacedOrderDTO:
        order = await self._order_gateway.get_order(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return placed_order(order)
