"""Which record of an order's contents to trust, depending on who asks.

An order carries its items twice: ``items_flat`` (one name per unit) and
the QR ``raw_payload``.  Billing reads the payload the student was shown;
displays prefer the flat list and fall back to the payload.
"""

from __future__ import annotations

from canteen.domain.model.order import Order
from canteen.domain.model.value_objects import OrderLine, merge_lines
from canteen.domain.service.payload_codec import decode


def billing_lines(order: Order) -> list[OrderLine]:
    lines = decode(order.raw_payload).items
    if lines:
        return merge_lines(lines)
    return order.flat_lines()


def display_lines(order: Order) -> list[OrderLine]:
    if order.items_flat:
        return order.flat_lines()
    return merge_lines(decode(order.raw_payload).items)


def flatten(lines: list[OrderLine]) -> list[str]:
    return [line.name for line in lines for _ in range(line.quantity)]
