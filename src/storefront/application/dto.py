"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry formatted data from the application layer to the CLI
without exposing domain internals.  Money values are rendered here,
which is the only place they are rounded for display.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.cart import CartLine
from storefront.domain.model.coupon import Coupon
from storefront.domain.model.order import PlacedOrder
from storefront.domain.service.pricing_calculator import PriceBreakdown


@dataclass(frozen=True)
class CartLineDTO:
    product_id: str
    product_name: str
    quantity: int
    stock: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str


@dataclass(frozen=True)
class CartSummaryDTO:
    """Output: the cart with every figure the checkout page shows."""

    lines: list[CartLineDTO]
    count: int
    subtotal: str
    shipping: str
    tax: str
    coupon_code: str | None
    coupon_description: str | None
    coupon_discount: str
    total: str
    free_shipping: bool


@dataclass(frozen=True)
class PlacedOrderItemDTO:
    name: str
    quantity: int
    price: str


@dataclass(frozen=True)
class PlacedOrderDTO:
    id: str
    status: str
    total: str
    created_at: str
    items: list[PlacedOrderItemDTO]
    payment_method: str | None


# --- Mapping ------------------------------------------------------------------


def cart_summary(
    lines: tuple[CartLine, ...] | list[CartLine],
    pricing: PriceBreakdown,
    coupon: Coupon | None = None,
) -> CartSummaryDTO:
    return CartSummaryDTO(
        lines=[
            CartLineDTO(
                product_id=line.product.id,
                product_name=line.product.name,
                quantity=line.quantity.value,
                stock=line.product.stock,
                unit_price=str(line.product.price),
                line_total=str(line.line_total),
            )
            for line in lines
        ],
        count=sum(line.quantity.value for line in lines),
        subtotal=str(pricing.subtotal),
        shipping=str(pricing.shipping),
        tax=str(pricing.tax),
        coupon_code=coupon.code if coupon else None,
        coupon_description=coupon.description if coupon else None,
        coupon_discount=str(pricing.coupon_discount),
        total=str(pricing.total),
        free_shipping=pricing.free_shipping,
    )


def placed_order(order: PlacedOrder) -> PlacedOrderDTO:
    return PlacedOrderDTO(
        id=order.id,
        status=order.status,
        total=str(order.total_price),
        created_at=(
            order.created_at.strftime("%Y-%m-%d %H:%M UTC") if order.created_at else "-"
        ),
        items=[
            PlacedOrderItemDTO(name=i.name, quantity=i.quantity, price=str(i.price))
            for i in order.items
        ],
        payment_method=order.payment_method,
    )
