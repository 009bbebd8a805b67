"""Order draft and placed-order views.

The client never owns an order.  It assembles an OrderDraft at
submission time, sends it once, and afterwards only reads back the
server's PlacedOrder records.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.cart import CartLine
from storefront.domain.model.coupon import Coupon
from storefront.domain.model.value_objects import Money
from storefront.domain.service.pricing_calculator import PriceBreakdown


class PaymentMethod(Enum):
    CREDIT_CARD = "Credit Card"
    PAYPAL = "PayPal"
    CASH_ON_DELIVERY = "Cash on Delivery"
    STRIPE = "Stripe"

    @classmethod
    def parse(cls, raw: str) -> PaymentMethod:
        for method in cls:
            if raw.strip().lower() in (method.value.lower(), method.name.lower()):
                return method
        choices = ", ".join(m.value for m in cls)
        raise ValidationError(f"Unknown payment method '{raw}'. Choose one of: {choices}")


@dataclass(frozen=True)
class ShippingAddress:
    street: str
    city: str
    state: str
    zip_code: str
    country: str

    def validate(self) -> None:
        missing = [f.name for f in fields(self) if not str(getattr(self, f.name) or "").strip()]
        if missing:
            raise ValidationError(
                "Shipping address is incomplete: missing " + ", ".join(missing)
            )


@dataclass(frozen=True)
class OrderDraft:
    """The assembled, not-yet-persisted order payload."""

    lines: tuple[CartLine, ...]
    shipping_address: ShippingAddress
    payment_method: PaymentMethod
    pricing: PriceBreakdown
    notes: str = ""
    coupon: Coupon | None = None

    @staticmethod
    def create(
        lines: list[CartLine] | tuple[CartLine, ...],
        shipping_address: ShippingAddress,
        payment_method: PaymentMethod,
        pricing: PriceBreakdown,
        notes: str = "",
        coupon: Coupon | None = None,
    ) -> OrderDraft:
        """Build a draft, enforcing what the server would refuse anyway."""
        if not lines:
            raise ValidationError("Cart is empty")
        shipping_address.validate()
        return OrderDraft(
            lines=tuple(lines),
            shipping_address=shipping_address,
            payment_method=payment_method,
            pricing=pricing,
            notes=(notes or "").strip(),
            coupon=coupon,
        )


@dataclass(frozen=True)
class PlacedOrderItem:
    name: str
    quantity: int
    price: Money


@dataclass(frozen=True)
class PlacedOrder:
    """An order as the server reports it."""

    id: str
    status: str
    total_price: Money
    created_at: datetime | None = None
    items: tuple[PlacedOrderItem, ...] = field(default_factory=tuple)
    payment_method: str | None = None
    shipping_address: ShippingAddress | None = None
