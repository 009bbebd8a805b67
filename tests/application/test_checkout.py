"""Integration tests for the checkout session.

Uses in-memory fakes for the cart repository and all remote
collaborators.
"""

import asyncio

import pytest

from storefront.application.cart_store import CartStore
from storefront.application.checkout import CheckoutSession
from storefront.domain.exceptions import (
    CartChangedError,
    CouponRejectedError,
    GatewayUnavailableError,
    OrderRejectedError,
    ValidationError,
)
from storefront.domain.model.coupon import Coupon, CouponState
from storefront.domain.model.order import PaymentMethod, ShippingAddress
from storefront.domain.model.value_objects import Money
from tests.fakes import (
    FakeCartRepository,
    FakeCouponValidator,
    FakeOrderGateway,
    FakeProductCatalog,
    make_product,
)

ADDRESS = ShippingAddress(
    street="1 Main St", city="Springfield", state="IL", zip_code="62701", country="US"
)
SAVE10 = Coupon(code="SAVE10", discount=Money.of("10.00"), description="Ten off")


def _setup(
    validator: FakeCouponValidator | None = None,
    gateway: FakeOrderGateway | None = None,
    catalog: FakeProductCatalog | None = None,
    with_catalog: bool = True,
):
    """Cart with 2 x $20 + 1 x $15, matching catalog, fakes for everything."""
    repo = FakeCartRepository()
    store = CartStore(repo, owner="alice")
    p1 = make_product("p1", price="20.00", stock=5)
    p2 = make_product("p2", price="15.00", stock=5)
    store.add_item(p1, 2)
    store.add_item(p2, 1)

    validator = validator or FakeCouponValidator({"SAVE10": SAVE10})
    gateway = gateway or FakeOrderGateway()
    if catalog is None and with_catalog:
        catalog = FakeProductCatalog([p1, p2])
    session = CheckoutSession(store, validator, gateway, catalog)
    return session, store, repo, validator, gateway, catalog


class TestTotals:

    def test_totals_without_coupon(self):
        session, *_ = _setup()
        assert str(session.totals().total) == "$60.50"

    @pytest.mark.asyncio
    async def test_totals_follow_live_cart_edits(self):
        session, store, *_ = _setup()
        await session.apply_coupon("save10")
        store.update_quantity("p1", 1)
        totals = session.totals()
        assert totals.subtotal == Money.of("35.00")
        assert totals.shipping == Money.of("10.00")
        assert str(totals.total) == "$38.50"


class TestApplyCoupon:

    @pytest.mark.asyncio
    async def test_applies_server_discount_verbatim(self):
        session, _, _, validator, _, _ = _setup()
        coupon = await session.apply_coupon("  save10 ")
        assert coupon.code == "SAVE10"
        assert session.coupon_state == CouponState.APPLIED
        assert str(session.totals().total) == "$50.50"
        code, order_total, line_count = validator.validate_calls[0]
        assert code == "SAVE10"
        assert order_total == Money.of("55.00")
        assert line_count == 2

    @pytest.mark.asyncio
    async def test_blank_code_never_reaches_server(self):
        session, _, _, validator, _, _ = _setup()
        with pytest.raises(ValidationError, match="Please enter a coupon code"):
            await session.apply_coupon("")
        assert validator.validate_calls == []

    @pytest.mark.asyncio
    async def test_rejection_leaves_pricing_unchanged(self):
        session, *_ = _setup()
        before = session.totals()
        with pytest.raises(CouponRejectedError, match="expired"):
            await session.apply_coupon("NOPE")
        assert session.coupon_state == CouponState.REJECTED
        assert session.coupon_error == "Coupon has expired"
        assert session.totals() == before

    @pytest.mark.asyncio
    async def test_transport_failure_returns_to_no_coupon(self):
        session, *_ = _setup(validator=FakeCouponValidator(unavailable=True))
        with pytest.raises(GatewayUnavailableError):
            await session.apply_coupon("SAVE10")
        assert session.coupon_state == CouponState.NO_COUPON

    @pytest.mark.asyncio
    async def test_remove_is_immediate_and_local(self):
        session, _, _, validator, _, _ = _setup()
        await session.apply_coupon("SAVE10")
        session.remove_coupon()
        assert session.applied_coupon is None
        assert str(session.totals().total) == "$60.50"
        assert len(validator.validate_calls) == 1

    @pytest.mark.asyncio
    async def test_stale_response_cannot_overwrite_newer_one(self):
        other = Coupon(code="OTHER", discount=Money.of("1.00"))
        validator = FakeCouponValidator({"SAVE10": SAVE10, "OTHER": other})
        validator.gates["SAVE10"] = asyncio.Event()
        session, *_ = _setup(validator=validator)

        slow = asyncio.create_task(session.apply_coupon("SAVE10"))
        await asyncio.sleep(0)
        await session.apply_coupon("OTHER")
        validator.gates["SAVE10"].set()

        assert await slow is None
        assert session.applied_coupon.code == "OTHER"

    @pytest.mark.asyncio
    async def test_response_after_removal_is_ignored(self):
        validator = FakeCouponValidator({"SAVE10": SAVE10})
        validator.gates["SAVE10"] = asyncio.Event()
        session, *_ = _setup(validator=validator)

        pending = asyncio.create_task(session.apply_coupon("SAVE10"))
        await asyncio.sleep(0)
        session.remove_coupon()
        validator.gates["SAVE10"].set()

        assert await pending is None
        assert session.coupon_state == CouponState.NO_COUPON


class TestPlaceOrder:

    @pytest.mark.asyncio
    async def test_success_clears_cart_and_submits_breakdown(self):
        session, store, repo, _, gateway, _ = _setup()
        result = await session.place_order(ADDRESS, PaymentMethod.PAYPAL, notes=" ring ")

        assert result.order.id == "o1"
        assert store.is_empty
        assert repo.stored("alice") == []
        draft = gateway.drafts[0]
        assert draft.payment_method == PaymentMethod.PAYPAL
        assert draft.notes == "ring"
        assert str(draft.pricing.tax) == "$5.50"
        assert draft.coupon is None

    @pytest.mark.asyncio
    async def test_coupon_usage_recorded_after_order(self):
        session, _, _, validator, gateway, _ = _setup()
        await session.apply_coupon("SAVE10")
        result = await session.place_order(ADDRESS)

        assert gateway.drafts[0].coupon.code == "SAVE10"
        assert str(gateway.drafts[0].pricing.total) == "$50.50"
        assert validator.used == ["SAVE10"]
        assert result.coupon_recorded
        assert session.applied_coupon is None

    @pytest.mark.asyncio
    async def test_failed_coupon_usage_does_not_undo_order(self):
        validator = FakeCouponValidator({"SAVE10": SAVE10}, fail_mark_used=True)
        session, store, *_ = _setup(validator=validator)
        await session.apply_coupon("SAVE10")
        result = await session.place_order(ADDRESS)

        assert result.order.id == "o1"
        assert not result.coupon_recorded
        assert "SAVE10" in result.warnings[0]
        assert store.is_empty

    @pytest.mark.asyncio
    async def test_rejected_order_leaves_cart_untouched(self):
        gateway = FakeOrderGateway(reject_with=OrderRejectedError("Insufficient stock for p1"))
        session, store, _, validator, _, _ = _setup(gateway=gateway)
        await session.apply_coupon("SAVE10")
        before = store.lines

        with pytest.raises(OrderRejectedError, match="Insufficient stock"):
            await session.place_order(ADDRESS)

        assert store.lines == before
        assert validator.used == []
        assert session.applied_coupon is not None

    @pytest.mark.asyncio
    async def test_transport_failure_leaves_cart_untouched(self):
        gateway = FakeOrderGateway(reject_with=GatewayUnavailableError("timeout"))
        session, store, *_ = _setup(gateway=gateway)
        with pytest.raises(GatewayUnavailableError):
            await session.place_order(ADDRESS)
        assert store.get_count() == 3
        assert len(gateway.drafts) == 1

    @pytest.mark.asyncio
    async def test_empty_cart_rejected(self):
        session, store, *_ = _setup()
        store.clear()
        with pytest.raises(ValidationError, match="Cart is empty"):
            await session.place_order(ADDRESS)

    @pytest.mark.asyncio
    async def test_incomplete_address_rejected(self):
        session, _, _, _, gateway, _ = _setup()
        address = ShippingAddress(street="1 Main", city="", state="IL", zip_code="", country="US")
        with pytest.raises(ValidationError, match="city, zip_code"):
            await session.place_order(address)
        assert gateway.drafts == []

    @pytest.mark.asyncio
    async def test_double_submit_rejected_while_in_flight(self):
        gateway = FakeOrderGateway()
        gateway.gate = asyncio.Event()
        session, *_ = _setup(gateway=gateway)

        first = asyncio.create_task(session.place_order(ADDRESS))
        await asyncio.sleep(0)
        with pytest.raises(ValidationError, match="already being submitted"):
            await session.place_order(ADDRESS)
        gateway.gate.set()
        await first
        assert len(gateway.drafts) == 1

    @pytest.mark.asyncio
    async def test_item_added_while_in_flight_survives(self):
        gateway = FakeOrderGateway()
        gateway.gate = asyncio.Event()
        session, store, repo, *_ = _setup(gateway=gateway)

        pending = asyncio.create_task(session.place_order(ADDRESS))
        await asyncio.sleep(0)
        store.add_item(make_product("p9", price="5.00", stock=2))
        gateway.gate.set()
        await pending

        assert [line.product_id for line in gateway.drafts[0].lines] == ["p1", "p2"]
        assert [line.product_id for line in store.lines] == ["p9"]
        assert [line.product_id for line in repo.stored("alice")] == ["p9"]


class TestReconciliation:

    @pytest.mark.asyncio
    async def test_price_change_blocks_submission_and_refreshes_cart(self):
        session, store, _, _, gateway, catalog = _setup()
        catalog.put(make_product("p1", price="25.00", stock=5))

        with pytest.raises(CartChangedError) as excinfo:
            await session.place_order(ADDRESS)

        assert gateway.drafts == []
        assert len(excinfo.value.changes) == 1
        assert store.get_total() == Money.of("65.00")

        # Second attempt goes through with the refreshed prices.
        result = await session.place_order(ADDRESS)
        assert gateway.drafts[0].pricing.subtotal == Money.of("65.00")
        assert result.order.id == "o1"

    @pytest.mark.asyncio
    async def test_sold_out_product_dropped(self):
        session, store, _, _, _, catalog = _setup()
        catalog.drop("p2")
        with pytest.raises(CartChangedError):
            await session.place_order(ADDRESS)
        assert [line.product_id for line in store.lines] == ["p1"]

    @pytest.mark.asyncio
    async def test_catalog_failure_midway_leaves_cart_untouched(self):
        session, store, repo, _, gateway, catalog = _setup()
        catalog.put(make_product("p1", price="99.00", stock=5))
        catalog.fail_on.add("p2")
        saves_before = repo.save_count

        with pytest.raises(GatewayUnavailableError):
            await session.place_order(ADDRESS)

        assert store.lines[0].product.price == Money.of("20.00")
        assert repo.save_count == saves_before
        assert gateway.drafts == []

        # Once the catalog recovers the price change is still reported.
        catalog.fail_on.clear()
        with pytest.raises(CartChangedError) as excinfo:
            await session.place_order(ADDRESS)
        assert excinfo.value.changes[0].product_id == "p1"
        assert gateway.drafts == []

    @pytest.mark.asyncio
    async def test_without_catalog_snapshots_are_submitted_as_is(self):
        session, _, _, _, gateway, _ = _setup(with_catalog=False)
        assert await session.reconcile() == []
        await session.place_order(ADDRESS)
        assert gateway.drafts[0].pricing.subtotal == Money.of("55.00")
