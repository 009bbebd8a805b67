"""Cart aggregate — the items a shopper intends to buy.

The Cart is an aggregate root that owns its lines.  All cart
invariants are enforced here:

- no two lines share the same ``product.id``
- every line satisfies ``1 <= quantity <= product.stock``
- lines keep their insertion order

Requests that exceed available stock are clamped, never rejected.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from storefront.domain.model.product import ProductSnapshot
from storefront.domain.model.value_objects import Money, Quantity


def clamp_quantity(requested: int, stock: int) -> int:
    """Clamp *requested* into ``[1, stock]``.  Caller guarantees stock > 0."""
    return max(1, min(requested, stock))


@dataclass(frozen=True)
class CartLine:
    """One (product snapshot, quantity) pair."""

    product: ProductSnapshot
    quantity: Quantity

    @property
    def product_id(self) -> str:
        return self.product.id

    @property
    def line_total(self) -> Money:
        return self.product.price * self.quantity.value


class LineChangeKind(Enum):
    PRICE_CHANGED = "PRICE_CHANGED"
    QUANTITY_REDUCED = "QUANTITY_REDUCED"
    REMOVED = "REMOVED"


@dataclass(frozen=True)
class LineChange:
    """What a reconciliation did to a single line."""

    product_id: str
    product_name: str
    kinds: tuple[LineChangeKind, ...]
    old_price: Money
    new_price: Money | None
    old_quantity: int
    new_quantity: int

    def describe(self) -> str:
        if LineChangeKind.REMOVED in self.kinds:
            return f"{self.product_name}: no longer available, removed"
        parts = []
        if LineChangeKind.PRICE_CHANGED in self.kinds:
            parts.append(f"price {self.old_price} -> {self.new_price}")
        if LineChangeKind.QUANTITY_REDUCED in self.kinds:
            parts.append(f"quantity {self.old_quantity} -> {self.new_quantity}")
        return f"{self.product_name}: " + ", ".join(parts)


@dataclass
class Cart:
    """Aggregate root for the shopping cart.

    The constructor accepts already-persisted lines without
    re-validating them, so repositories can reconstitute a cart as is.
    """

    lines: list[CartLine] = field(default_factory=list)

    # --- Mutations ------------------------------------------------------------

    def add_item(self, product: ProductSnapshot, quantity: int = 1) -> CartLine | None:
        """Add *quantity* units of *product*.

        An existing line for the same product is incremented and takes
        the newer snapshot.  Out-of-stock products are ignored.
        """
        if not product.in_stock:
            return None

        index = self._index_of(product.id)
        if index is None:
            line = CartLine(product, Quantity(clamp_quantity(quantity, product.stock)))
            self.lines.append(line)
            return line

        current = self.lines[index].quantity.value
        line = CartLine(product, Quantity(clamp_quantity(current + quantity, product.stock)))
        self.lines[index] = line
        return line

    def remove_item(self, product_id: str) -> bool:
        """Delete the line for *product_id*.  Absent ids are ignored."""
        index = self._index_of(product_id)
        if index is None:
            return False
        del self.lines[index]
        return True

    def update_quantity(self, product_id: str, new_quantity: int) -> CartLine | None:
        """Set a line's quantity; zero or less removes the line."""
        if new_quantity <= 0:
            self.remove_item(product_id)
            return None

        index = self._index_of(product_id)
        if index is None:
            return None

        line = self.lines[index]
        updated = replace(
            line, quantity=Quantity(clamp_quantity(new_quantity, line.product.stock))
        )
        self.lines[index] = updated
        return updated

    def refresh_product(self, product_id: str, fresh: ProductSnapshot | None) -> LineChange | None:
        """Swap a line's snapshot for *fresh* catalog data.

        ``fresh=None`` (product gone) or zero stock removes the line.
        Returns None when nothing visible changed.
        """
        index = self._index_of(product_id)
        if index is None:
            return None

        line = self.lines[index]
        old_qty = line.quantity.value

        if fresh is None or not fresh.in_stock:
            del self.lines[index]
            return LineChange(
                product_id=product_id,
                product_name=line.product.name,
                kinds=(LineChangeKind.REMOVED,),
                old_price=line.product.price,
                new_price=None,
                old_quantity=old_qty,
                new_quantity=0,
            )

        new_qty = clamp_quantity(old_qty, fresh.stock)
        self.lines[index] = CartLine(fresh, Quantity(new_qty))

        kinds: list[LineChangeKind] = []
        if fresh.price != line.product.price:
            kinds.append(LineChangeKind.PRICE_CHANGED)
        if new_qty < old_qty:
            kinds.append(LineChangeKind.QUANTITY_REDUCED)
        if not kinds:
            return None

        return LineChange(
            product_id=product_id,
            product_name=fresh.name,
            kinds=tuple(kinds),
            old_price=line.product.price,
            new_price=fresh.price,
            old_quantity=old_qty,
            new_quantity=new_qty,
        )

    def clear(self) -> None:
        self.lines.clear()

    # --- Computed properties --------------------------------------------------

    @property
    def count(self) -> int:
        """Badge count: total units, not distinct lines."""
        return sum(line.quantity.value for line in self.lines)

    @property
    def subtotal(self) -> Money:
        result = Money.zero()
        for line in self.lines:
            result = result + line.line_total
        return result

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def get_line(self, product_id: str) -> CartLine | None:
        index = self._index_of(product_id)
        return None if index is None else self.lines[index]

    # --- Internal helpers -----------------------------------------------------

    def _index_of(self, product_id: str) -> int | None:
        for i, line in enumerate(self.lines):
            if line.product.id == product_id:
                return i
        return None
