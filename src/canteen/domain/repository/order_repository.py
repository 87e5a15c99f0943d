"""Abstract repository for Order aggregate.

Besides plain lookups the order store offers live subscriptions: every
front end watches a query and receives incremental changes instead of
re-reading the whole collection.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from canteen.domain.model.order import Order, OrderStatus
from canteen.domain.model.order_query import OrderQuery
from canteen.domain.repository.subscription import (
    ChangeListener,
    ErrorListener,
    Subscription,
)


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: str) -> Order | None:
        """Return an order by its reference, or None if not found."""

    @abstractmethod
    def add(self, order: Order) -> None:
        """Persist a new order; raises ValidationError if the id is taken."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist an updated order."""

    @abstractmethod
    def save_if_status(self, order: Order, expected: OrderStatus) -> bool:
        """Persist *order* only if the stored copy still has *expected* status.

        The check and the write happen atomically.  Returns False (and
        writes nothing) when another actor moved the order on first.
        """

    @abstractmethod
    def subscribe(
        self,
        query: OrderQuery,
        on_changes: ChangeListener,
        on_error: ErrorListener | None = None,
    ) -> Subscription:
        """Watch *query*.

        The current matches are delivered straight away as ADDED changes,
        followed by incremental changes after every write.
        """
