"""MenuItem aggregate: a dish on the menu together with its stock level.

Stock is optional. ``stock=None`` means the kitchen does not count this item
(tea from an urn, for instance), so it never runs out and never blocks an
order.
"""

from __future__ import annotations

from dataclasses import dataclass

from canteen.domain.exceptions import InsufficientStockError, ValidationError
from canteen.domain.model.value_objects import validate_amount, validate_item_name

# Older menu records encode "untracked" as a very large stock number.
UNTRACKED_STOCK_SENTINEL = 9000
LOW_STOCK_THRESHOLD = 20


def normalize_stock(stock: int | None) -> int | None:
    """Map legacy sentinel stock values onto ``None``."""
    if stock is None or stock >= UNTRACKED_STOCK_SENTINEL:
        return None
    return stock


@dataclass
class MenuItem:
    """Aggregate root for a menu entry.

    Invariants:
    - ``price`` is a non-negative whole amount
    - a tracked ``stock`` is never negative
    """

    id: int
    name: str
    price: int
    category: str = "general"
    stock: int | None = None

    def __post_init__(self) -> None:
        validate_item_name(self.name)
        validate_amount(self.price, "Price")
        self.stock = normalize_stock(self.stock)
        if self.stock is not None and self.stock < 0:
            raise ValidationError(f"Stock for {self.name} cannot be negative")

    # --- Derived state --------------------------------------------------------

    @property
    def is_tracked(self) -> bool:
        return self.stock is not None

    @property
    def is_available(self) -> bool:
        return self.stock is None or self.stock > 0

    @property
    def is_low_stock(self) -> bool:
        return self.stock is not None and 0 < self.stock < LOW_STOCK_THRESHOLD

    def can_supply(self, quantity: int) -> bool:
        return self.stock is None or self.stock >= quantity

    # --- Mutations ------------------------------------------------------------

    def deduct(self, quantity: int) -> None:
        """Take *quantity* units out of stock.

        Untracked items are left alone. Raises InsufficientStockError when a
        tracked item cannot cover the request.
        """
        if quantity <= 0:
            raise ValidationError("Deduction quantity must be positive")
        if self.stock is None:
            return
        if quantity > self.stock:
            raise InsufficientStockError(self.name, self.stock)
        self.stock -= quantity

    def restock(self, quantity: int) -> None:
        """Put *quantity* units back (e.g. when an acceptance is rolled back)."""
        if quantity <= 0:
            raise ValidationError("Restock quantity must be positive")
        if self.stock is None:
            return
        self.stock += quantity

    def set_stock(self, stock: int | None) -> None:
        stock = normalize_stock(stock)
        if stock is not None and stock < 0:
            raise ValidationError(f"Stock for {self.name} cannot be negative")
        self.stock = stock
