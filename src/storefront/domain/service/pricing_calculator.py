"""Domain service: Pricing Calculator.

Derives every monetary figure shown to the shopper or submitted with
an order.  Pure: the same (lines, coupon) input always yields the same
PriceBreakdown, with no hidden state and no I/O.

Figures keep full Decimal precision; rounding to cents is left to
display and payload serialization.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable

from storefront.domain.model.value_objects import Money

if TYPE_CHECKING:
    from storefront.domain.model.cart import CartLine
    from storefront.domain.model.coupon import Coupon

# ---------------------------------------------------------------------------
# Constants for pricing rules
# ---------------------------------------------------------------------------
FREE_SHIPPING_THRESHOLD = Money(Decimal("50.00"))
FLAT_SHIPPING_FEE = Money(Decimal("10.00"))
TAX_RATE = Decimal("0.10")


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: Money
    shipping: Money
    tax: Money
    coupon_discount: Money
    total: Money

    @property
    def free_shipping(self) -> bool:
        return self.shipping.amount == 0


class PricingCalculator:

    def calculate(
        self,
        lines: Iterable[CartLine],
        coupon: Coupon | None = None,
    ) -> PriceBreakdown:
        subtotal = Money.zero()
        for line in lines:
            subtotal = subtotal + line.line_total

        # Threshold is exclusive: exactly 50.00 still pays shipping.
        shipping = Money.zero() if subtotal > FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING_FEE
        tax = subtotal * TAX_RATE
        coupon_discount = coupon.discount if coupon is not None else Money.zero()

        # A discount larger than the gross amount would make the total
        # negative; the total is clamped to zero instead.
        total = (subtotal + shipping + tax).subtract_floor_zero(coupon_discount)

        return PriceBreakdown(
            subtotal=subtotal,
            shipping=shipping,
            tax=tax,
            coupon_discount=coupon_discount,
            total=total,
        )
