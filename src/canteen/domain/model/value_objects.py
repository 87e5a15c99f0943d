"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from canteen.domain.exceptions import ValidationError

DEFAULT_CURRENCY = "₹"

# Line grammar of the QR payload; item names must never collide with it.
TOTAL_LABEL = "TOTAL:"
DIVIDER_RE = re.compile(r"^-{3,}$")
QTY_LINE_RE = re.compile(r"^(.+) x([1-9]\d*)$")


def validate_item_name(name: str) -> str:
    """Check that *name* reads back unchanged from an order payload line."""
    if not name or not name.strip():
        raise ValidationError("Item name is required")
    if name != name.strip() or len(name.splitlines()) != 1:
        raise ValidationError(f"Item name {name!r} has surrounding spaces or line breaks")
    if QTY_LINE_RE.match(name) or DIVIDER_RE.match(name) or TOTAL_LABEL in name:
        raise ValidationError(f"Item name {name!r} clashes with the order payload layout")
    return name


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot order zero or negative items.
    """

    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class OrderLine:
    """One item name with the number of units requested."""

    name: str
    quantity: int

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValidationError("Item name is required")
        Quantity(self.quantity)

    def __str__(self) -> str:
        if self.quantity > 1:
            return f"{self.name} x{self.quantity}"
        return self.name


def validate_amount(amount: int, what: str = "Amount") -> int:
    """Check that *amount* is a whole, non-negative currency amount."""
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise ValidationError(f"{what} must be an integer, got {type(amount).__name__}")
    if amount < 0:
        raise ValidationError(f"{what} cannot be negative, got {amount}")
    return amount


def format_amount(amount: int, currency: str = DEFAULT_CURRENCY) -> str:
    return f"{currency}{amount}"


def merge_lines(lines: list[OrderLine]) -> list[OrderLine]:
    """Collapse repeated names into one line each, keeping first-seen order."""
    counts: dict[str, int] = {}
    for line in lines:
        counts[line.name] = counts.get(line.name, 0) + line.quantity
    return [OrderLine(name, qty) for name, qty in counts.items()]


def count_names(names: list[str]) -> list[OrderLine]:
    """Turn a flat one-entry-per-unit name list into order lines."""
    return merge_lines([OrderLine(name, 1) for name in names])
