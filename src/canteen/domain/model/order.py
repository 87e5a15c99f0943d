"""Order aggregate: the core of the domain.

An order is created by the storefront at checkout and then walks a fixed
lifecycle driven by the admin scanner and the kitchen display.
All status rules are enforced here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from canteen.domain.clock import system_clock
from canteen.domain.exceptions import TransitionRejectedError, ValidationError
from canteen.domain.model.value_objects import OrderLine, count_names, validate_amount


class OrderStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    PREPARING = "preparing"
    READY = "ready"


TOKENED_STATUSES = frozenset({OrderStatus.PAID, OrderStatus.PREPARING, OrderStatus.READY})
KITCHEN_STATUSES = frozenset({OrderStatus.PAID, OrderStatus.PREPARING})


@dataclass
class Order:
    """Aggregate root for a canteen order.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.

    ``items_flat`` holds one name per unit purchased and ``raw_payload``
    is the exact QR text shown to the student.
    """

    order_id: str
    amount: int
    raw_payload: str
    items_flat: list[str]
    status: OrderStatus = OrderStatus.PENDING
    token: int | None = None
    created_at: datetime = field(default_factory=system_clock)
    paid_at: datetime | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_id: str,
        amount: int,
        raw_payload: str,
        items_flat: list[str],
        created_at: datetime | None = None,
    ) -> Order:
        """Create a new pending order, enforcing all invariants."""
        if not order_id or not order_id.strip():
            raise ValidationError("Order reference is required")
        if not items_flat:
            raise ValidationError("Order must contain at least one item")
        if not raw_payload:
            raise ValidationError("Order payload is required")
        validate_amount(amount, "Order amount")

        return Order(
            order_id=order_id.strip(),
            amount=amount,
            raw_payload=raw_payload,
            items_flat=list(items_flat),
            created_at=created_at or system_clock(),
        )

    # --- State transitions ----------------------------------------------------

    def accept(
        self,
        token: int,
        at: datetime,
        items_flat: list[str] | None = None,
    ) -> None:
        """Transition pending -> paid and record the issued token.

        Stock deduction and token assignment must happen *before* calling
        this (coordinated by the application handler).
        """
        self.require_status(OrderStatus.PENDING, "accept")
        if token is None or token <= 0:
            raise ValidationError("A paid order needs a positive token")
        if items_flat:
            self.items_flat = list(items_flat)
        self.token = token
        self.paid_at = at
        self.status = OrderStatus.PAID

    def start(self, at: datetime) -> None:
        """Transition paid -> preparing."""
        self.require_status(OrderStatus.PAID, "start")
        self.started_at = at
        self.status = OrderStatus.PREPARING

    def mark_ready(self, at: datetime) -> None:
        """Transition preparing -> ready (terminal)."""
        self.require_status(OrderStatus.PREPARING, "mark ready")
        self.completed_at = at
        self.status = OrderStatus.READY

    # --- Computed properties --------------------------------------------------

    @property
    def queued_at(self) -> datetime:
        """When the order reached the kitchen (acceptance time if known)."""
        return self.paid_at or self.created_at

    @property
    def item_count(self) -> int:
        return len(self.items_flat)

    def flat_lines(self) -> list[OrderLine]:
        return count_names(self.items_flat)

    # --- Guards ---------------------------------------------------------------

    def require_status(self, expected: OrderStatus, action: str) -> None:
        if self.status != expected:
            raise TransitionRejectedError(
                f"Cannot {action} order {self.order_id}: current status is "
                f"{self.status.value}, expected {expected.value}"
            )
