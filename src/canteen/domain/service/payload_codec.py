"""Domain service: Order Payload Codec.

Turns a cart into the plain-text summary embedded in the student's QR code
and reads such a summary back on the admin scanner.  The text is exchanged
between devices, so its layout is fixed:

    REF: <order id>
    ----------------
    <item name>[ x<qty>]
    ...
    ----------------
    TOTAL: <currency><integer>
    [VERIFIED]

Decoding is tolerant because a scan may be partial or smudged: a missing
total decodes as 0 and a missing item block as an empty list.  Callers that
need a complete payload use ``decode_strict``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, Sequence

from canteen.domain.exceptions import InvalidPayloadError, ValidationError
from canteen.domain.model.value_objects import (
    DEFAULT_CURRENCY,
    DIVIDER_RE,
    QTY_LINE_RE,
    TOTAL_LABEL,
    OrderLine,
    format_amount,
    validate_item_name,
)

REF_LABEL = "REF:"
DIVIDER = "-" * 16
VERIFIED_MARKER = "[VERIFIED]"

_INT_RE = re.compile(r"\d+")


class Priced(Protocol):
    name: str
    price: int


@dataclass(frozen=True)
class DecodedPayload:
    order_id: str
    amount: int
    items: list[OrderLine] = field(default_factory=list)
    has_total: bool = False


class _ScanState(Enum):
    BEFORE_ITEMS = "before-items"
    IN_ITEMS = "in-items"
    AFTER_ITEMS = "after-items"


def encode(
    items: Sequence[Priced],
    order_id: str,
    currency: str = DEFAULT_CURRENCY,
) -> str:
    """Render the payload for a cart (one entry per unit)."""
    if not order_id or order_id != order_id.strip() or len(order_id.splitlines()) != 1:
        raise ValidationError(f"Invalid order reference: {order_id!r}")

    counts: dict[str, int] = {}
    for item in items:
        validate_item_name(item.name)
        counts[item.name] = counts.get(item.name, 0) + 1
    total = sum(item.price for item in items)

    lines = [f"{REF_LABEL} {order_id}", DIVIDER]
    lines.extend(str(OrderLine(name, qty)) for name, qty in counts.items())
    lines.append(DIVIDER)
    lines.append(f"{TOTAL_LABEL} {format_amount(total, currency)}")
    lines.append(VERIFIED_MARKER)
    return "\n".join(lines)


def decode(text: str) -> DecodedPayload:
    """Read a payload back.  Never raises."""
    lines = (text or "").splitlines()

    order_id = ""
    if lines and REF_LABEL in lines[0]:
        order_id = lines[0].split(REF_LABEL, 1)[1].strip()

    amount = 0
    has_total = False
    items: list[OrderLine] = []
    state = _ScanState.BEFORE_ITEMS

    for line in lines:
        stripped = line.strip()

        if TOTAL_LABEL in line:
            if not has_total:
                amount, has_total = _parse_total(line)
            state = _ScanState.AFTER_ITEMS
            continue

        if state is _ScanState.BEFORE_ITEMS:
            if DIVIDER_RE.match(stripped):
                state = _ScanState.IN_ITEMS
        elif state is _ScanState.IN_ITEMS:
            if stripped and not DIVIDER_RE.match(stripped):
                items.append(_parse_item(stripped))

    return DecodedPayload(
        order_id=order_id, amount=amount, items=items, has_total=has_total
    )


def decode_strict(text: str) -> DecodedPayload:
    """Like ``decode`` but insists on a reference and a total."""
    payload = decode(text)
    if not payload.order_id:
        raise InvalidPayloadError("Payload has no order reference")
    if not payload.has_total:
        raise InvalidPayloadError(f"Payload for {payload.order_id} has no total")
    return payload


def _parse_total(line: str) -> tuple[int, bool]:
    match = _INT_RE.search(line.split(TOTAL_LABEL, 1)[1])
    if match is None:
        return 0, False
    return int(match.group()), True


def _parse_item(line: str) -> OrderLine:
    match = QTY_LINE_RE.match(line)
    if match:
        return OrderLine(match.group(1).strip(), int(match.group(2)))
    return OrderLine(line, 1)
