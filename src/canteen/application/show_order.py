"""Application service: Show Order use case (query)."""

from __future__ import annotations

from canteen.application.dto import OrderDTO, OrderLineDTO
from canteen.application.order_items import display_lines
from canteen.domain.exceptions import EntityNotFoundError
from canteen.domain.model.order import Order
from canteen.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order {order_id} not found")
        return self._to_dto(order)

    @staticmethod
    def _to_dto(order: Order) -> OrderDTO:
        return OrderDTO(
            order_id=order.order_id,
            status=order.status.value,
            token=order.token,
            amount=order.amount,
            items=OrderLineDTO.from_lines(display_lines(order)),
            created_at=order.created_at.strftime("%Y-%m-%d %H:%M"),
            payload=order.raw_payload,
        )
