"""Translation between API JSON and domain objects.

The API speaks camelCase and uses ``_id`` for identifiers.  Money goes
out as numbers rounded to cents and comes back through ``Money.of``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from storefront.domain.model.cart import CartLine
from storefront.domain.model.order import (
    OrderDraft,
    PlacedOrder,
    PlacedOrderItem,
    ShippingAddress,
)
from storefront.domain.model.product import ProductSnapshot
from storefront.domain.model.value_objects import Money


def _money_out(money: Money) -> float:
    return float(money.rounded())


def _ref_id(value: Any) -> str | None:
    """Referenced documents arrive either populated (dict) or as a bare id."""
    if value is None:
        return None
    if isinstance(value, dict):
        ref = value.get("_id") or value.get("id")
        return str(ref) if ref is not None else None
    return str(value)


def _parse_datetime(raw: Any) -> datetime | None:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError:
        return None


# --- Products -----------------------------------------------------------------


def product_from_api(raw: dict) -> ProductSnapshot:
    images = raw.get("images") or []
    image = raw.get("image") or (images[0] if images else None)
    return ProductSnapshot(
        id=str(raw.get("_id") or raw.get("id")),
        name=str(raw.get("name", "")),
        price=Money.of(raw.get("price", 0)),
        stock=max(int(raw.get("stock") or 0), 0),
        image=image,
        vendor_id=_ref_id(raw.get("vendor")),
    )


def product_to_api(product: ProductSnapshot) -> dict:
    return {
        "_id": product.id,
        "name": product.name,
        "price": _money_out(product.price),
        "stock": product.stock,
        "images": [product.image] if product.image else [],
        "vendor": product.vendor_id,
    }


def cart_to_api(lines: list[CartLine] | tuple[CartLine, ...]) -> list[dict]:
    return [
        {"product": product_to_api(line.product), "quantity": line.quantity.value}
        for line in lines
    ]


# --- Orders -------------------------------------------------------------------


def address_to_api(address: ShippingAddress) -> dict:
    return {
        "street": address.street,
        "city": address.city,
        "state": address.state,
        "zipCode": address.zip_code,
        "country": address.country,
    }


def address_from_api(raw: dict | None) -> ShippingAddress | None:
    if not raw:
        return None
    return ShippingAddress(
        street=raw.get("street", ""),
        city=raw.get("city", ""),
        state=raw.get("state", ""),
        zip_code=raw.get("zipCode", ""),
        country=raw.get("country", ""),
    )


def draft_to_api(draft: OrderDraft) -> dict:
    pricing = draft.pricing
    return {
        "items": [
            {
                "product": line.product.id,
                "name": line.product.name,
                "price": _money_out(line.product.price),
                "quantity": line.quantity.value,
                "image": line.product.image,
                "vendor": line.product.vendor_id,
            }
            for line in draft.lines
        ],
        "shippingAddress": address_to_api(draft.shipping_address),
        "paymentMethod": draft.payment_method.value,
        "itemsPrice": _money_out(pricing.subtotal),
        "shippingPrice": _money_out(pricing.shipping),
        "taxPrice": _money_out(pricing.tax),
        "totalPrice": _money_out(pricing.total),
        "notes": draft.notes,
        "couponCode": draft.coupon.code if draft.coupon else None,
        "couponDiscount": _money_out(pricing.coupon_discount),
    }


def placed_order_from_api(raw: dict) -> PlacedOrder:
    return PlacedOrder(
        id=str(raw.get("_id") or raw.get("id")),
        status=str(raw.get("orderStatus") or raw.get("status") or "Pending"),
        total_price=Money.of(raw.get("totalPrice") or 0),
        created_at=_parse_datetime(raw.get("createdAt")),
        items=tuple(
            PlacedOrderItem(
                name=str(item.get("name", "")),
                quantity=int(item.get("quantity") or 0),
                price=Money.of(item.get("price") or 0),
            )
            for item in raw.get("items") or []
        ),
        payment_method=raw.get("paymentMethod"),
        shipping_address=address_from_api(raw.get("shippingAddress")),
    )
