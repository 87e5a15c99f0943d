"""Application service: Checkout use case.

Turns the student's cart into a pending order and the QR payload that
the admin scanner will read at the counter.
"""

from __future__ import annotations

import random
from datetime import datetime

import structlog

from canteen.application.dto import CheckoutResult, OrderLineDTO
from canteen.domain.clock import Clock, system_clock
from canteen.domain.exceptions import StoreClosedError, ValidationError
from canteen.domain.model.cart import Cart
from canteen.domain.model.order import Order
from canteen.domain.model.value_objects import DEFAULT_CURRENCY
from canteen.domain.repository.order_repository import OrderRepository
from canteen.domain.repository.store_status_repository import StoreStatusRepository
from canteen.domain.service.payload_codec import encode

logger = structlog.get_logger()

MAX_REFERENCE_ATTEMPTS = 5


def make_order_id(now: datetime, rng: random.Random) -> str:
    """``HHMMSS-R`` with R in 0..99; unique enough for one canteen."""
    return f"{now:%H%M%S}-{rng.randrange(100)}"


class CheckoutHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        store_status_repo: StoreStatusRepository,
        clock: Clock = system_clock,
        currency: str = DEFAULT_CURRENCY,
        rng: random.Random | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._store_status_repo = store_status_repo
        self._clock = clock
        self._currency = currency
        self._rng = rng or random.Random()

    def handle(self, cart: Cart) -> CheckoutResult:
        """Place the order and empty the cart.

        The cart is left untouched if anything fails, so the student can
        simply try again.
        """
        if not self._store_status_repo.is_open():
            raise StoreClosedError("The canteen is not accepting orders right now")
        if cart.is_empty:
            raise ValidationError("Cart is empty")

        now = self._clock()
        order_id = self._new_reference(now)
        payload = encode(cart.items, order_id, self._currency)

        order = Order.create(
            order_id=order_id,
            amount=cart.total,
            raw_payload=payload,
            items_flat=cart.item_names(),
            created_at=now,
        )
        self._order_repo.add(order)
        logger.info("order_created", order_id=order_id, amount=order.amount, items=order.item_count)

        result = CheckoutResult(
            order_id=order_id,
            amount=order.amount,
            payload=payload,
            items=OrderLineDTO.from_lines(cart.grouped()),
        )
        cart.clear()
        return result

    def _new_reference(self, now: datetime) -> str:
        for _ in range(MAX_REFERENCE_ATTEMPTS):
            order_id = make_order_id(now, self._rng)
            if self._order_repo.get_by_id(order_id) is None:
                return order_id
        raise ValidationError("Could not allocate an order reference, please retry")
