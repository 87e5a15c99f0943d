"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class InsufficientStockError(ValidationError):
    """A tracked menu item cannot cover the requested quantity."""

    def __init__(self, item_name: str, available: int) -> None:
        super().__init__(f"Insufficient stock for {item_name}. Available: {available}")
        self.item_name = item_name
        self.available = available


class InvalidPayloadError(ValidationError):
    """A QR payload is missing its reference or its total."""


class TransitionRejectedError(ValidationError):
    """An order status transition was attempted out of order."""


class StoreClosedError(ValidationError):
    """The canteen is not accepting orders."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class TransactionConflictError(DomainException):
    """An optimistic transaction kept losing the race and gave up."""


class ConnectivityError(DomainException):
    """The backing store could not be read or written."""
