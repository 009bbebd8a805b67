"""CouponValidator backed by ``POST /coupons/validate`` and ``/coupons/apply``."""

from __future__ import annotations

from storefront.domain.exceptions import (
    CouponRejectedError,
    GatewayUnavailableError,
    ValidationError,
)
from storefront.domain.gateway.coupon_validator import CouponValidator
from storefront.domain.model.cart import CartLine
from storefront.domain.model.coupon import Coupon
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.http.api_client import GENERIC_FAILURE, ApiClient
from storefront.infrastructure.http.mapping import cart_to_api

DEFAULT_REJECTION = "Invalid coupon code"


class RestCouponValidator(CouponValidator):

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    async def validate(
        self, code: str, order_total: Money, lines: list[CartLine]
    ) -> Coupon:
        resp = await self._api.post(
            "/coupons/validate",
            {
                "code": code,
                "orderTotal": float(order_total.rounded()),
                "cart": cart_to_api(lines),
            },
        )
        if resp.is_server_error:
            raise GatewayUnavailableError(resp.message or GENERIC_FAILURE)
        if not resp.ok:
            raise CouponRejectedError(resp.message or DEFAULT_REJECTION)

        data = resp.data if isinstance(resp.data, dict) else {}
        info = data.get("coupon") or {}
        try:
            return Coupon(
                code=info.get("code") or code,
                discount=Money.of(data.get("discount", 0)),
                description=info.get("description") or "",
            )
        except ValidationError as exc:
            raise GatewayUnavailableError(f"Unexpected coupon response: {exc}") from exc

    async def mark_used(self, code: str) -> None:
        resp = await self._api.post("/coupons/apply", {"code": code})
        if not resp.ok:
            raise GatewayUnavailableError(resp.message or f"HTTP {resp.status}")
