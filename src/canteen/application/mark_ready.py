"""Application service: Mark Ready use case (terminal kitchen step)."""

from __future__ import annotations

import structlog

from canteen.domain.clock import Clock, system_clock
from canteen.domain.exceptions import EntityNotFoundError, TransitionRejectedError
from canteen.domain.model.order import OrderStatus
from canteen.domain.repository.order_repository import OrderRepository

logger = structlog.get_logger()


class MarkReadyHandler:

    def __init__(self, order_repo: OrderRepository, clock: Clock = system_clock) -> None:
        self._order_repo = order_repo
        self._clock = clock

    def handle(self, order_id: str) -> None:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order {order_id} not found")

        order.mark_ready(self._clock())
        if not self._order_repo.save_if_status(order, OrderStatus.PREPARING):
            raise TransitionRejectedError(f"Order {order_id} changed before it could be marked ready")
        logger.info("order_ready", order_id=order_id, token=order.token)
