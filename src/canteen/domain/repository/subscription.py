"""Cancellation handle returned by live order subscriptions."""

from __future__ import annotations

from typing import Callable

from canteen.domain.model.order_query import OrderChange, OrderQuery

ChangeListener = Callable[[list[OrderChange]], None]
ErrorListener = Callable[[Exception], None]


class Subscription:

    def __init__(
        self,
        query: OrderQuery,
        on_changes: ChangeListener,
        on_error: ErrorListener | None = None,
        on_cancel: Callable[[Subscription], None] | None = None,
    ) -> None:
        self.query = query
        self._on_changes = on_changes
        self._on_error = on_error
        self._on_cancel = on_cancel
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        """Stop delivery. Safe to call more than once."""
        if not self._active:
            return
        self._active = False
        if self._on_cancel is not None:
            self._on_cancel(self)

    def deliver(self, changes: list[OrderChange]) -> None:
        if self._active and changes:
            self._on_changes(changes)

    def fail(self, error: Exception) -> None:
        if self._active and self._on_error is not None:
            self._on_error(error)
