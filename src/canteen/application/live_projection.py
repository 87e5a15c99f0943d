"""Live projections: the views the admin and kitchen screens keep on display.

Each projection owns at most one order subscription and folds the change
stream into its own state, so a new order costs one update rather than a
full reload.  If the subscription reports an error, the view keeps its last
state, exposes ``connection_error`` and waits for ``retry()``.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum

import structlog

from canteen.application.dto import (
    DailyStatsDTO,
    HistoryEntryDTO,
    KitchenTicketDTO,
    OrderLineDTO,
)
from canteen.application.order_items import display_lines
from canteen.domain.clock import Clock, days_before, start_of_day, system_clock
from canteen.domain.exceptions import ValidationError
from canteen.domain.model.order import (
    KITCHEN_STATUSES,
    TOKENED_STATUSES,
    Order,
    OrderStatus,
)
from canteen.domain.model.order_query import ChangeType, OrderChange, OrderQuery
from canteen.domain.repository.order_repository import OrderRepository
from canteen.domain.repository.subscription import Subscription

logger = structlog.get_logger()

URGENT_AFTER = timedelta(minutes=15)


class _LiveView:
    """Base for views that hold one subscription and a map of live orders."""

    def __init__(self, order_repo: OrderRepository, clock: Clock = system_clock) -> None:
        self._order_repo = order_repo
        self._clock = clock
        self._subscription: Subscription | None = None
        self._query: OrderQuery | None = None
        self._orders: dict[str, Order] = {}
        self.connection_error: Exception | None = None
        self._reset()

    @property
    def active(self) -> bool:
        return self._subscription is not None and self._subscription.active

    def retry(self) -> None:
        if self._query is None:
            raise ValidationError(f"{type(self).__name__} has not been started")
        self._subscribe(self._query)

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    # --- Subscription plumbing ------------------------------------------------

    def _subscribe(self, query: OrderQuery) -> None:
        # Cancel first so the old query can never deliver into the new state.
        self.close()
        self._orders.clear()
        self._reset()
        self._query = query
        self.connection_error = None
        self._subscription = self._order_repo.subscribe(query, self._apply, self._on_error)

    def _apply(self, changes: list[OrderChange]) -> None:
        for change in changes:
            order = change.order
            previous = self._orders.get(order.order_id)
            if change.type is ChangeType.REMOVED:
                self._orders.pop(order.order_id, None)
                self._on_removed(previous or order)
            else:
                self._orders[order.order_id] = order
                self._on_upserted(previous, order)

    def _on_error(self, error: Exception) -> None:
        logger.error("subscription_error", view=type(self).__name__, error=str(error))
        self.connection_error = error
        self.close()

    # Hooks for running aggregates
    def _reset(self) -> None:
        pass

    def _on_upserted(self, previous: Order | None, order: Order) -> None:
        pass

    def _on_removed(self, order: Order) -> None:
        pass


class DailyStatsProjection(_LiveView):
    """Today's revenue, order count and last token for the admin header.

    Only accepted orders count: a pending order has not been paid yet.
    """

    def start(self) -> None:
        """(Re)subscribe for the current store day."""
        today = start_of_day(self._clock())
        self._subscribe(OrderQuery(since=today, statuses=TOKENED_STATUSES, by_queue_time=True))

    def _reset(self) -> None:
        self._revenue = 0
        self._max_token: int | None = None
        self._ready = 0

    def _on_upserted(self, previous: Order | None, order: Order) -> None:
        if previous is not None:
            self._revenue -= previous.amount
            self._ready -= int(previous.status is OrderStatus.READY)
        self._revenue += order.amount
        self._ready += int(order.status is OrderStatus.READY)
        if order.token is not None and (self._max_token is None or order.token > self._max_token):
            self._max_token = order.token

    def _on_removed(self, order: Order) -> None:
        self._revenue -= order.amount
        self._ready -= int(order.status is OrderStatus.READY)

    def stats(self) -> DailyStatsDTO:
        return DailyStatsDTO(
            revenue=self._revenue,
            order_count=len(self._orders),
            last_token=self._max_token,
            ready_count=self._ready,
        )


class KitchenQueueProjection(_LiveView):
    """Orders the kitchen still has to cook, oldest waiting first."""

    def __init__(
        self,
        order_repo: OrderRepository,
        clock: Clock = system_clock,
        urgent_after: timedelta = URGENT_AFTER,
    ) -> None:
        super().__init__(order_repo, clock)
        self._urgent_after = urgent_after

    def start(self) -> None:
        today = start_of_day(self._clock())
        self._subscribe(OrderQuery(since=today, statuses=KITCHEN_STATUSES, by_queue_time=True))

    @property
    def queue_count(self) -> int:
        return sum(1 for o in self._orders.values() if o.status is OrderStatus.PAID)

    @property
    def preparing_count(self) -> int:
        return sum(1 for o in self._orders.values() if o.status is OrderStatus.PREPARING)

    def tickets(self, now: datetime | None = None) -> list[KitchenTicketDTO]:
        """Paid tickets first, then those being prepared; each by queue time."""
        now = now or self._clock()
        ordered = sorted(
            self._orders.values(),
            key=lambda o: (o.status is not OrderStatus.PAID, o.queued_at),
        )
        return [self._to_ticket(order, now) for order in ordered]

    def _to_ticket(self, order: Order, now: datetime) -> KitchenTicketDTO:
        waited = max(now - order.queued_at, timedelta(0))
        return KitchenTicketDTO(
            order_id=order.order_id,
            token=order.token,
            status=order.status.value,
            items=OrderLineDTO.from_lines(display_lines(order)),
            queued_at=order.queued_at,
            elapsed_minutes=int(waited.total_seconds() // 60),
            urgent=order.status is OrderStatus.PAID and waited > self._urgent_after,
        )


class HistoryRange(Enum):
    TODAY = "today"
    YESTERDAY = "yesterday"
    LAST_7_DAYS = "week"

    def bounds(self, now: datetime) -> tuple[datetime, datetime | None]:
        today = start_of_day(now)
        if self is HistoryRange.YESTERDAY:
            return days_before(now, 1), today
        if self is HistoryRange.LAST_7_DAYS:
            return days_before(now, 7), None
        return today, None


class HistoryProjection(_LiveView):
    """Every order in the selected range, newest first, any status."""

    selected: HistoryRange | None = None

    def select(self, history_range: HistoryRange) -> None:
        since, until = history_range.bounds(self._clock())
        self.selected = history_range
        self._subscribe(OrderQuery(since=since, until=until))

    def entries(self) -> list[HistoryEntryDTO]:
        ordered = sorted(self._orders.values(), key=lambda o: o.created_at, reverse=True)
        return [
            HistoryEntryDTO(
                order_id=order.order_id,
                token=order.token,
                status=order.status.value,
                amount=order.amount,
                created_at=order.created_at,
                items=OrderLineDTO.from_lines(display_lines(order)),
            )
            for order in ordered
        ]
