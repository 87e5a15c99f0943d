"""In-process change feed behind ``OrderRepository.subscribe``.

Repositories call ``publish(before, after)`` after each committed write;
the feed works out, per subscription, whether the order entered, changed
within, or left that subscription's query.
"""

from __future__ import annotations

import threading
from typing import Callable

import structlog

from canteen.domain.exceptions import DomainException
from canteen.domain.model.order import Order
from canteen.domain.model.order_query import ChangeType, OrderChange, OrderQuery
from canteen.domain.repository.subscription import (
    ChangeListener,
    ErrorListener,
    Subscription,
)

logger = structlog.get_logger()


def change_for(query: OrderQuery, before: Order | None, after: Order) -> OrderChange | None:
    was_in = before is not None and query.matches(before)
    is_in = query.matches(after)
    if was_in and is_in:
        return OrderChange(ChangeType.MODIFIED, after)
    if is_in:
        return OrderChange(ChangeType.ADDED, after)
    if was_in:
        return OrderChange(ChangeType.REMOVED, after)
    return None


class OrderChangeFeed:

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []
        self._lock = threading.RLock()

    def subscribe(
        self,
        query: OrderQuery,
        on_changes: ChangeListener,
        on_error: ErrorListener | None,
        snapshot: Callable[[], list[Order]],
    ) -> Subscription:
        """Register a listener and replay the current matches as ADDED."""
        subscription = Subscription(query, on_changes, on_error, on_cancel=self._remove)
        with self._lock:
            try:
                current = snapshot()
            except DomainException as exc:
                logger.error("subscription_snapshot_failed", error=str(exc))
                subscription.fail(exc)
                subscription.cancel()
                return subscription
            self._subscriptions.append(subscription)
            initial = sorted(
                (o for o in current if query.matches(o)), key=lambda o: o.created_at
            )
            self._dispatch(subscription, [OrderChange(ChangeType.ADDED, o) for o in initial])
        return subscription

    def publish(self, before: Order | None, after: Order) -> None:
        with self._lock:
            for subscription in list(self._subscriptions):
                change = change_for(subscription.query, before, after)
                if change is not None:
                    self._dispatch(subscription, [change])

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def _dispatch(self, subscription: Subscription, changes: list[OrderChange]) -> None:
        try:
            subscription.deliver(changes)
        except Exception as exc:
            # A broken listener must not fail the write that triggered it.
            logger.error("subscriber_failed", error=str(exc))
            subscription.fail(exc)

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)
