"""Unit tests for the Cart aggregate and its invariants."""

import itertools

from storefront.domain.model.cart import Cart, LineChangeKind
from storefront.domain.model.value_objects import Money
from tests.fakes import make_product


def _quantities(cart: Cart) -> dict[str, int]:
    return {line.product_id: line.quantity.value for line in cart.lines}


class TestAddItem:

    def test_new_line_defaults_to_one(self):
        cart = Cart()
        cart.add_item(make_product("p1"))
        assert _quantities(cart) == {"p1": 1}

    def test_quantity_clamped_to_stock(self):
        cart = Cart()
        line = cart.add_item(make_product("p1", stock=3), quantity=5)
        assert line.quantity.value == 3

    def test_non_positive_request_clamped_up_to_one(self):
        cart = Cart()
        cart.add_item(make_product("p1"), quantity=0)
        assert _quantities(cart) == {"p1": 1}

    def test_out_of_stock_is_noop(self):
        cart = Cart()
        assert cart.add_item(make_product("p1", stock=0), quantity=2) is None
        assert cart.is_empty

    def test_existing_product_increments_instead_of_duplicating(self):
        cart = Cart()
        cart.add_item(make_product("p1"), quantity=2)
        cart.add_item(make_product("p1"), quantity=3)
        assert len(cart.lines) == 1
        assert _quantities(cart) == {"p1": 5}

    def test_increment_clamped_to_stock(self):
        cart = Cart()
        cart.add_item(make_product("p1", stock=4), quantity=3)
        cart.add_item(make_product("p1", stock=4), quantity=3)
        assert _quantities(cart) == {"p1": 4}

    def test_insertion_order_preserved(self):
        cart = Cart()
        for pid in ("b", "a", "c"):
            cart.add_item(make_product(pid))
        cart.add_item(make_product("a"))
        assert [line.product_id for line in cart.lines] == ["b", "a", "c"]

    def test_no_duplicates_across_any_add_sequence(self):
        products = [make_product(pid, stock=s) for pid, s in (("x", 2), ("y", 5), ("z", 1))]
        for sequence in itertools.product(products, repeat=4):
            cart = Cart()
            for product in sequence:
                cart.add_item(product, quantity=2)
            ids = [line.product_id for line in cart.lines]
            assert len(ids) == len(set(ids))
            for line in cart.lines:
                assert 1 <= line.quantity.value <= line.product.stock


class TestRemoveItem:

    def test_removes_line(self):
        cart = Cart()
        cart.add_item(make_product("p1"))
        cart.add_item(make_product("p2"))
        cart.remove_item("p1")
        assert _quantities(cart) == {"p2": 1}

    def test_idempotent(self):
        cart = Cart()
        cart.add_item(make_product("p1"))
        cart.add_item(make_product("p2"))
        cart.remove_item("p1")
        once = list(cart.lines)
        assert cart.remove_item("p1") is False
        assert cart.lines == once


class TestUpdateQuantity:

    def test_zero_removes_line(self):
        cart = Cart()
        cart.add_item(make_product("p1"), quantity=2)
        assert cart.update_quantity("p1", 0) is None
        assert cart.is_empty

    def test_negative_removes_line(self):
        cart = Cart()
        cart.add_item(make_product("p1"), quantity=2)
        cart.update_quantity("p1", -3)
        assert cart.is_empty

    def test_clamped_to_stock(self):
        cart = Cart()
        cart.add_item(make_product("p1", stock=6))
        cart.update_quantity("p1", 99)
        assert _quantities(cart) == {"p1": 6}

    def test_unknown_product_is_noop(self):
        cart = Cart()
        cart.add_item(make_product("p1"))
        assert cart.update_quantity("nope", 3) is None
        assert _quantities(cart) == {"p1": 1}


class TestTotals:

    def test_count_is_total_units(self):
        cart = Cart()
        cart.add_item(make_product("p1"), quantity=2)
        cart.add_item(make_product("p2"), quantity=3)
        assert cart.count == 5

    def test_subtotal_is_sum_of_line_totals(self):
        cart = Cart()
        cart.add_item(make_product("p1", price="20.00"), quantity=2)
        cart.add_item(make_product("p2", price="15.00"), quantity=1)
        assert cart.subtotal == Money.of("55.00")
        assert cart.subtotal == sum(
            (line.product.price * line.quantity.value for line in cart.lines), Money.zero()
        )

    def test_empty_cart_totals(self):
        cart = Cart()
        assert cart.count == 0
        assert cart.subtotal == Money.zero()


class TestRefreshProduct:

    def test_price_change_reported(self):
        cart = Cart()
        cart.add_item(make_product("p1", price="10.00"), quantity=2)
        change = cart.refresh_product("p1", make_product("p1", price="12.00"))
        assert change.kinds == (LineChangeKind.PRICE_CHANGED,)
        assert cart.subtotal == Money.of("24.00")

    def test_stock_drop_reduces_quantity(self):
        cart = Cart()
        cart.add_item(make_product("p1", stock=10), quantity=5)
        change = cart.refresh_product("p1", make_product("p1", stock=2))
        assert change.kinds == (LineChangeKind.QUANTITY_REDUCED,)
        assert _quantities(cart) == {"p1": 2}
        assert "quantity 5 -> 2" in change.describe()

    def test_gone_product_removed(self):
        cart = Cart()
        cart.add_item(make_product("p1"))
        change = cart.refresh_product("p1", None)
        assert change.kinds == (LineChangeKind.REMOVED,)
        assert cart.is_empty

    def test_zero_stock_removed(self):
        cart = Cart()
        cart.add_item(make_product("p1"))
        cart.refresh_product("p1", make_product("p1", stock=0))
        assert cart.is_empty

    def test_unchanged_snapshot_reports_nothing(self):
        cart = Cart()
        cart.add_item(make_product("p1", stock=10), quantity=2)
        assert cart.refresh_product("p1", make_product("p1", stock=8)) is None
        assert cart.get_line("p1").product.stock == 8
