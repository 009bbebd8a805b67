"""JSON-file-backed implementation of CartRepository.

One file holds every owner's cart as ``{owner: [entry, ...]}``.
Writers replace the whole file; concurrent processes sharing it get
last-write-wins with no merging.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from storefront.domain.model.cart import Cart, CartLine
from storefront.domain.model.product import ProductSnapshot
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.cart_repository import CartRepository

logger = logging.getLogger(__name__)


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- CartRepository interface ---------------------------------------------

    def load(self, owner: str) -> Cart:
        records = self._load_raw().get(owner, [])
        return Cart(lines=[self._to_domain(raw) for raw in records])

    def save(self, owner: str, cart: Cart) -> None:
        carts = self._load_raw()
        carts[owner] = [self._to_raw(line) for line in cart.lines]
        self._persist_raw(carts)

    def delete(self, owner: str) -> None:
        carts = self._load_raw()
        if carts.pop(owner, None) is not None:
            self._persist_raw(carts)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(line: CartLine) -> dict:
        product = line.product
        return {
            "productId": product.id,
            "quantity": line.quantity.value,
            "product": {
                "id": product.id,
                "name": product.name,
                "price": str(product.price.amount),
                "currency": product.price.currency,
                "stock": product.stock,
                "image": product.image,
                "vendorId": product.vendor_id,
            },
        }

    @staticmethod
    def _to_domain(raw: dict) -> CartLine:
        p = raw["product"]
        return CartLine(
            product=ProductSnapshot(
                id=p.get("id", raw["productId"]),
                name=p["name"],
                price=Money.of(p["price"], p.get("currency", "USD")),
                stock=int(p["stock"]),
                image=p.get("image"),
                vendor_id=p.get("vendorId"),
            ),
            quantity=Quantity(int(raw["quantity"])),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> dict[str, list[dict]]:
        text = self._file_path.read_text(encoding="utf-8")
        try:
            data = json.loads(text) if text.strip() else {}
        except json.JSONDecodeError:
            logger.warning("Cart file %s is corrupt; starting with empty carts", self._file_path)
            return {}
        return data if isinstance(data, dict) else {}

    def _persist_raw(self, carts: dict[str, list[dict]]) -> None:
        self._file_path.write_text(
            json.dumps(carts, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("{}", encoding="utf-8")
