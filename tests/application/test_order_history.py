"""Tests for the order history queries."""

import pytest

from storefront.application.order_history import ListOrdersHandler, ShowOrderHandler
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.order import PlacedOrder, PlacedOrderItem
from storefront.domain.model.value_objects import Money
from tests.fakes import FakeOrderGateway


class _SeededGateway(FakeOrderGateway):

    def __init__(self, orders: list[PlacedOrder]) -> None:
        super().__init__()
        self._orders = {o.id: o for o in orders}


ORDER = PlacedOrder(
    id="abc",
    status="Shipped",
    total_price=Money.of("60.5"),
    items=(PlacedOrderItem(name="Widget", quantity=2, price=Money.of("20")),),
    payment_method="PayPal",
)


@pytest.mark.asyncio
async def test_list_orders_formats_money():
    dtos = await ListOrdersHandler(_SeededGateway([ORDER])).handle()
    assert len(dtos) == 1
    assert dtos[0].total == "$60.50"
    assert dtos[0].created_at == "-"


@pytest.mark.asyncio
async def test_show_order():
    dto = await ShowOrderHandler(_SeededGateway([ORDER])).handle("abc")
    assert dto.status == "Shipped"
    assert dto.items[0].price == "$20.00"
    assert dto.payment_method == "PayPal"


@pytest.mark.asyncio
async def test_show_unknown_order():
    with pytest.raises(EntityNotFoundError, match="#zzz not found"):
        await ShowOrderHandler(_SeededGateway([])).handle("zzz")
