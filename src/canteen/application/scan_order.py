"""Application service: Scan Order use case (query).

The admin scanner reads the QR payload off the student's phone.  This
decodes it and reports whether the store knows the order.
"""

from __future__ import annotations

from canteen.application.dto import OrderLineDTO, ScannedOrderDTO
from canteen.domain.repository.order_repository import OrderRepository
from canteen.domain.service.payload_codec import decode_strict


class ScanOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, payload: str) -> ScannedOrderDTO:
        decoded = decode_strict(payload)
        order = self._order_repo.get_by_id(decoded.order_id)
        return ScannedOrderDTO(
            order_id=decoded.order_id,
            amount=decoded.amount,
            items=OrderLineDTO.from_lines(decoded.items),
            stored_status=order.status.value if order is not None else None,
        )
