"""Coupon value object and the per-checkout coupon state machine.

Discount rules live on the server.  The client only normalizes the
code, asks the remote collaborator, and trusts the discount it returns.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money


def normalize_code(code: str) -> str:
    """Coupon codes are case-insensitive; the canonical form is uppercase."""
    return (code or "").strip().upper()


@dataclass(frozen=True)
class Coupon:
    """A server-validated discount.  Never persisted."""

    code: str
    discount: Money
    description: str = ""

    def __post_init__(self) -> None:
        normalized = normalize_code(self.code)
        if not normalized:
            raise ValidationError("Coupon code is required")
        object.__setattr__(self, "code", normalized)


class CouponState(Enum):
    NO_COUPON = "NO_COUPON"
    VALIDATING = "VALIDATING"
    APPLIED = "APPLIED"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class ValidationTicket:
    """Issued when a validation starts; a response is only accepted for
    the ticket of the current generation."""

    code: str
    generation: int


class CouponSession:
    """State machine for coupon application within one checkout.

    NO_COUPON -> VALIDATING -> APPLIED
    NO_COUPON -> VALIDATING -> REJECTED (behaves as NO_COUPON for pricing)
    APPLIED   -> NO_COUPON on removal

    Each call to ``begin_validation`` or ``remove`` advances the
    generation, so a response to an older ticket is discarded.
    """

    def __init__(self) -> None:
        self._state = CouponState.NO_COUPON
        self._coupon: Coupon | None = None
        self._error: str | None = None
        self._generation = 0

    # --- Queries --------------------------------------------------------------

    @property
    def state(self) -> CouponState:
        return self._state

    @property
    def applied(self) -> Coupon | None:
        """The coupon pricing should use, or None."""
        return self._coupon if self._state == CouponState.APPLIED else None

    @property
    def error(self) -> str | None:
        return self._error if self._state == CouponState.REJECTED else None

    # --- Transitions ----------------------------------------------------------

    def begin_validation(self, code: str) -> ValidationTicket:
        """Start validating *code*.  An applied coupon is dropped first."""
        normalized = normalize_code(code)
        if not normalized:
            raise ValidationError("Please enter a coupon code")
        self._coupon = None
        self._error = None
        self._generation += 1
        self._state = CouponState.VALIDATING
        return ValidationTicket(code=normalized, generation=self._generation)

    def accept(self, ticket: ValidationTicket, coupon: Coupon) -> bool:
        """Apply *coupon* if *ticket* is still current.  Returns False if stale."""
        if not self._is_current(ticket):
            return False
        self._coupon = coupon
        self._error = None
        self._state = CouponState.APPLIED
        return True

    def reject(self, ticket: ValidationTicket, message: str) -> bool:
        """Record a rejection if *ticket* is still current.  Returns False if stale."""
        if not self._is_current(ticket):
            return False
        self._coupon = None
        self._error = message
        self._state = CouponState.REJECTED
        return True

    def abandon(self, ticket: ValidationTicket) -> bool:
        """Return to NO_COUPON after a validation that produced no answer."""
        if not self._is_current(ticket):
            return False
        self._coupon = None
        self._error = None
        self._state = CouponState.NO_COUPON
        return True

    def remove(self) -> None:
        """Drop any applied coupon without contacting the server."""
        self._coupon = None
        self._error = None
        self._generation += 1
        self._state = CouponState.NO_COUPON

    # --- Internal helpers -----------------------------------------------------

    def _is_current(self, ticket: ValidationTicket) -> bool:
        return (
            self._state == CouponState.VALIDATING
            and ticket.generation == self._generation
        )
