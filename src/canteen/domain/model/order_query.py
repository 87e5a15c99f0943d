"""Order queries and the change events a live subscription receives."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from canteen.domain.model.order import Order, OrderStatus


class ChangeType(Enum):
    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"


@dataclass(frozen=True)
class OrderChange:
    """One order entering, changing within, or leaving a query's result set.

    REMOVED means the order stopped matching (e.g. it became ready while the
    query asks for kitchen statuses); orders are never physically deleted.
    """

    type: ChangeType
    order: Order


@dataclass(frozen=True)
class OrderQuery:
    """Filter over an order's time (``since`` inclusive, ``until`` exclusive)
    and, optionally, a set of statuses.

    The time is ``created_at`` unless ``by_queue_time`` is set, in which case
    it is ``queued_at``: an order paid just after midnight belongs to the
    day it was paid, whenever it was checked out.
    """

    since: datetime | None = None
    until: datetime | None = None
    statuses: frozenset[OrderStatus] | None = None
    by_queue_time: bool = False

    def matches(self, order: Order) -> bool:
        moment = order.queued_at if self.by_queue_time else order.created_at
        if self.since is not None and moment < self.since:
            return False
        if self.until is not None and moment >= self.until:
            return False
        if self.statuses is not None and order.status not in self.statuses:
            return False
        return True
