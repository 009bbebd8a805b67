"""Remote collaborator that owns coupon business rules.

The client never evaluates discount rules itself; it asks this
collaborator and trusts the returned discount verbatim.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.cart import CartLine
from storefront.domain.model.coupon import Coupon
from storefront.domain.model.value_objects import Money


class CouponValidator(ABC):

    @abstractmethod
    async def validate(
        self, code: str, order_total: Money, lines: list[CartLine]
    ) -> Coupon:
        """Validate *code* against the cart.

        Raises CouponRejectedError when the server refuses the code and
        GatewayUnavailableError on transport failure.
        """

    @abstractmethod
    async def mark_used(self, code: str) -> None:
        """Record one use of *code* after an order was created."""
