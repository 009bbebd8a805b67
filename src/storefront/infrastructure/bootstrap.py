"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

from storefront.application.cart_store import CartStore
from storefront.domain.gateway.coupon_validator import CouponValidator
from storefront.domain.gateway.order_gateway import OrderGateway
from storefront.domain.gateway.product_catalog import ProductCatalog
from storefront.infrastructure.config import settings
from storefront.infrastructure.http.api_client import ApiClient
from storefront.infrastructure.http.rest_coupon_validator import RestCouponValidator
from storefront.infrastructure.http.rest_order_gateway import RestOrderGateway
from storefront.infrastructure.http.rest_product_catalog import RestProductCatalog
from storefront.infrastructure.persistence.json_cart_repository import (
    JsonCartRepository,
)
from storefront.infrastructure.persistence.json_session_store import JsonSessionStore


@dataclass(frozen=True)
class RemoteServices:
    coupon_validator: CouponValidator
    order_gateway: OrderGateway
    catalog: ProductCatalog


def cart_repository() -> JsonCartRepository:
    return JsonCartRepository(settings.data_dir / "cart.json")


def session_store() -> JsonSessionStore:
    return JsonSessionStore(settings.data_dir / "session.json")


def cart_store(user: str | None = None) -> CartStore:
    owner = user or settings.user or session_store().current_user()
    return CartStore(cart_repository(), owner=owner)


@asynccontextmanager
async def remote_services() -> AsyncIterator[RemoteServices]:
    async with ApiClient(
        settings.api_url, token=settings.api_token, timeout=settings.http_timeout
    ) as api:
        yield RemoteServices(
            coupon_validator=RestCouponValidator(api),
            order_gateway=RestOrderGateway(api),
            catalog=RestProductCatalog(api),
        )
