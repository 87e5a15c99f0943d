"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the front ends and the application layer without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from canteen.domain.model.value_objects import OrderLine


@dataclass(frozen=True)
class OrderLineDTO:
    name: str
    quantity: int

    @staticmethod
    def from_lines(lines: list[OrderLine]) -> list[OrderLineDTO]:
        return [OrderLineDTO(line.name, line.quantity) for line in lines]


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    order_id: str
    status: str
    token: int | None
    amount: int
    items: list[OrderLineDTO]
    created_at: str
    payload: str


@dataclass(frozen=True)
class CheckoutResult:
    """Output of checkout: what the storefront shows on the receipt."""

    order_id: str
    amount: int
    payload: str  # text to embed in the QR code
    items: list[OrderLineDTO]


@dataclass(frozen=True)
class ScannedOrderDTO:
    order_id: str
    amount: int
    items: list[OrderLineDTO]
    stored_status: str | None  # None when the store has no such order


@dataclass(frozen=True)
class AcceptResult:
    order_id: str
    token: int
    amount: int
    items: list[OrderLineDTO]


@dataclass(frozen=True)
class MenuLineDTO:
    id: int
    name: str
    category: str
    price: int
    stock: int | None  # None = untracked
    available: bool
    low_stock: bool


@dataclass(frozen=True)
class KitchenTicketDTO:
    order_id: str
    token: int | None
    status: str
    items: list[OrderLineDTO]
    queued_at: datetime
    elapsed_minutes: int
    urgent: bool


@dataclass(frozen=True)
class DailyStatsDTO:
    revenue: int
    order_count: int
    last_token: int | None
    ready_count: int


@dataclass(frozen=True)
class HistoryEntryDTO:
    order_id: str
    token: int | None
    status: str
    amount: int
    created_at: datetime
    items: list[OrderLineDTO]
