"""Product snapshot.

Products live in the remote catalog and change independently of any
cart: prices move, stock runs out.  The cart never holds a live
reference; it holds a ProductSnapshot captured when the item was added.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money


@dataclass(frozen=True)
class ProductSnapshot:
    """Frozen copy of the catalog data a cart line needs.

    Prices shown in the cart come from this snapshot until an explicit
    reconciliation at checkout replaces it with a fresh one.
    """

    id: str
    name: str
    price: Money
    stock: int
    image: str | None = None
    vendor_id: str | None = None

    def __post_init__(self) -> None:
        if not self.id or not str(self.id).strip():
            raise ValidationError("Product id is required")
        if isinstance(self.stock, bool) or not isinstance(self.stock, int):
            raise ValidationError(
                f"Product stock must be an integer, got {type(self.stock).__name__}"
            )
        if self.stock < 0:
            raise ValidationError("Product stock cannot be negative")

    @property
    def in_stock(self) -> bool:
        return self.stock > 0
