"""Abstract repository for the Cart aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. One persisted cart exists per owner key: an
authenticated user id, or ``ANONYMOUS_OWNER``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.cart import Cart

ANONYMOUS_OWNER = "anonymous"


class CartRepository(ABC):

    @abstractmethod
    def load(self, owner: str) -> Cart:
        """Return the persisted cart for *owner*, or an empty cart."""

    @abstractmethod
    def save(self, owner: str, cart: Cart) -> None:
        """Persist the full cart for *owner*, replacing what was there."""

    @abstractmethod
    def delete(self, owner: str) -> None:
        """Forget the persisted cart for *owner*.  No error if absent."""
