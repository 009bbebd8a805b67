"""Remote collaborator that creates and reports orders."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import OrderDraft, PlacedOrder


class OrderGateway(ABC):

    @abstractmethod
    async def submit(self, draft: OrderDraft) -> PlacedOrder:
        """Create the order.  Called once per draft, never retried.

        Raises OrderRejectedError when the server refuses the order
        (e.g. insufficient stock) and GatewayUnavailableError on
        transport failure.
        """

    @abstractmethod
    async def list_orders(self) -> list[PlacedOrder]:
        """Return the current user's orders, newest first."""

    @abstractmethod
    async def get_order(self, order_id: str) -> PlacedOrder | None:
        """Return one order, or None if the server does not know it."""
