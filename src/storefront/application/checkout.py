"""Application service: Checkout Session.

Orchestrates the cart store, the pricing calculator and the remote
collaborators for one checkout.  The contract it protects:

1. Ordered lines leave the cart only after the remote order-creation
   call succeeds.  Any failure leaves the cart exactly as it was.
2. Coupon usage is recorded by a separate call fired only after the
   order exists.  That call is best-effort: there is no rollback, so a
   failure is logged and reported on the result instead of raised.

The coupon lives only as long as the session; it is never persisted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from storefront.application.cart_store import CartStore
from storefront.domain.exceptions import (
    CartChangedError,
    CouponRejectedError,
    DomainException,
    ValidationError,
)
from storefront.domain.gateway.coupon_validator import CouponValidator
from storefront.domain.gateway.order_gateway import OrderGateway
from storefront.domain.gateway.product_catalog import ProductCatalog
from storefront.domain.model.cart import LineChange
from storefront.domain.model.coupon import Coupon, CouponSession, CouponState
from storefront.domain.model.order import (
    OrderDraft,
    PaymentMethod,
    PlacedOrder,
    ShippingAddress,
)
from storefront.domain.model.product import ProductSnapshot
from storefront.domain.service.pricing_calculator import PriceBreakdown, PricingCalculator

logger = logging.getLogger(__name__)

DEFAULT_COUPON_ERROR = "Invalid coupon code"


@dataclass(frozen=True)
class CheckoutResult:
    order: PlacedOrder
    pricing: PriceBreakdown
    coupon_code: str | None = None
    # False when the order was created but the coupon use was not recorded.
    coupon_recorded: bool = True
    warnings: list[str] = field(default_factory=list)


class CheckoutSession:

    def __init__(
        self,
        cart: CartStore,
        coupon_validator: CouponValidator,
        order_gateway: OrderGateway,
        catalog: ProductCatalog | None = None,
        calculator: PricingCalculator | None = None,
    ) -> None:
        self._cart = cart
        self._coupon_validator = coupon_validator
        self._order_gateway = order_gateway
        self._catalog = catalog
        self._calculator = calculator or PricingCalculator()
        self._coupons = CouponSession()
        self._submitting = False

    # --- Queries --------------------------------------------------------------

    @property
    def coupon_state(self) -> CouponState:
        return self._coupons.state

    @property
    def applied_coupon(self) -> Coupon | None:
        return self._coupons.applied

    @property
    def coupon_error(self) -> str | None:
        return self._coupons.error

    def totals(self) -> PriceBreakdown:
        return self._calculator.calculate(self._cart.lines, self._coupons.applied)

    # --- Coupons --------------------------------------------------------------

    async def apply_coupon(self, code: str) -> Coupon | None:
        """Validate *code* remotely and apply it.

        Returns the applied coupon, or None if the answer arrived after
        a newer validation or a removal made it stale.
        """
        ticket = self._coupons.begin_validation(code)
        lines = list(self._cart.lines)
        subtotal = self._calculator.calculate(lines).subtotal

        try:
            coupon = await self._coupon_validator.validate(ticket.code, subtotal, lines)
        except CouponRejectedError as exc:
            message = str(exc) or DEFAULT_COUPON_ERROR
            if self._coupons.reject(ticket, message):
                logger.info("Coupon %s rejected: %s", ticket.code, message)
                raise CouponRejectedError(message) from exc
            logger.warning("Discarded stale rejection for coupon %s", ticket.code)
            return None
        except DomainException:
            self._coupons.abandon(ticket)
            raise

        if not self._coupons.accept(ticket, coupon):
            logger.warning("Discarded stale validation for coupon %s", ticket.code)
            return None

        logger.info("Coupon %s applied: %s off", coupon.code, coupon.discount)
        return coupon

    def remove_coupon(self) -> None:
        self._coupons.remove()

    # --- Reconciliation -------------------------------------------------------

    async def reconcile(self) -> list[LineChange]:
        """Replace every line's snapshot with live catalog data.

        Quantities are re-clamped to current stock and unavailable
        products are dropped.  Returns what changed.  Every product is
        fetched before any line is touched, so a catalog failure leaves
        the cart as it was.
        """
        if self._catalog is None:
            return []

        # Phase 1: fetch
        snapshots: list[tuple[str, ProductSnapshot | None]] = []
        for line in self._cart.lines:
            snapshots.append((line.product_id, await self._catalog.get_product(line.product_id)))

        # Phase 2: apply
        changes: list[LineChange] = []
        for product_id, fresh in snapshots:
            change = self._cart.refresh_product(product_id, fresh)
            if change is not None:
                changes.append(change)
        return changes

    # --- Submission -----------------------------------------------------------

    async def place_order(
        self,
        shipping_address: ShippingAddress,
        payment_method: PaymentMethod = PaymentMethod.CREDIT_CARD,
        notes: str = "",
    ) -> CheckoutResult:
        if self._submitting:
            raise ValidationError("An order is already being submitted")
        if self._cart.is_empty:
            raise ValidationError("Cart is empty")
        shipping_address.validate()

        self._submitting = True
        try:
            changes = await self.reconcile()
            if changes:
                logger.info("Cart changed during reconciliation: %d line(s)", len(changes))
                raise CartChangedError(changes)

            coupon = self._coupons.applied
            draft = OrderDraft.create(
                lines=self._cart.lines,
                shipping_address=shipping_address,
                payment_method=payment_method,
                pricing=self._calculator.calculate(self._cart.lines, coupon),
                notes=notes,
                coupon=coupon,
            )

            # Any failure here propagates with the cart untouched.
            order = await self._order_gateway.submit(draft)
            logger.info("Order %s created, total %s", order.id, draft.pricing.total)

            result = await self._record_coupon_use(order, draft)

            # Lines added while the order was in flight were not ordered.
            self._cart.remove_items(line.product_id for line in draft.lines)
            self._coupons.remove()
            return result
        finally:
            self._submitting = False

    async def _record_coupon_use(self, order: PlacedOrder, draft: OrderDraft) -> CheckoutResult:
        if draft.coupon is None:
            return CheckoutResult(order=order, pricing=draft.pricing)

        # Order and coupon usage are two separate remote commits with no
        # rollback; usage tracking is treated as best-effort.
        try:
            await self._coupon_validator.mark_used(draft.coupon.code)
        except DomainException as exc:
            logger.warning(
                "Order %s created but usage of coupon %s was not recorded: %s",
                order.id,
                draft.coupon.code,
                exc,
            )
            return CheckoutResult(
                order=order,
                pricing=draft.pricing,
                coupon_code=draft.coupon.code,
                coupon_recorded=False,
                warnings=[f"Coupon {draft.coupon.code} usage could not be recorded: {exc}"],
            )

        return CheckoutResult(order=order, pricing=draft.pricing, coupon_code=draft.coupon.code)

