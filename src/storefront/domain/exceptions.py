"""Domain-level exceptions.

All business rule violations and collaborator failures are expressed as
subclasses of DomainException so the CLI layer can catch them uniformly
and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class CartChangedError(ValidationError):
    """Reconciliation changed the cart; totals must be reviewed again."""

    def __init__(self, changes: list) -> None:
        self.changes = list(changes)
        super().__init__(
            "Your cart was updated with current prices and stock "
            f"({len(self.changes)} change(s)). Please review and submit again."
        )


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class CouponRejectedError(DomainException):
    """The remote collaborator refused a coupon code."""


class OrderRejectedError(DomainException):
    """The remote collaborator refused to create the order (e.g. stock)."""


class GatewayUnavailableError(DomainException):
    """The remote API could not be reached or answered unexpectedly."""
