"""Application service: Accept Order use case.

Orchestrates the Stock Ledger, the Token Sequencer and the Order aggregate
to move a scanned order from pending to paid.  Either every step lands or
the order stays pending with its stock put back.
"""

from __future__ import annotations

import structlog

from canteen.application.dto import AcceptResult, OrderLineDTO
from canteen.application.order_items import billing_lines, flatten
from canteen.domain.clock import Clock, system_clock
from canteen.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    TransitionRejectedError,
    ValidationError,
)
from canteen.domain.model.order import OrderStatus
from canteen.domain.repository.menu_repository import MenuRepository
from canteen.domain.repository.order_repository import OrderRepository
from canteen.domain.repository.token_counter_repository import TokenCounterRepository
from canteen.domain.service.stock_ledger import StockLedger
from canteen.domain.service.token_sequencer import TokenSequencer

logger = structlog.get_logger()


class AcceptOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        menu_repo: MenuRepository,
        counter_repo: TokenCounterRepository,
        clock: Clock = system_clock,
    ) -> None:
        self._order_repo = order_repo
        self._menu_repo = menu_repo
        self._counter_repo = counter_repo
        self._clock = clock

    def handle(self, order_id: str) -> AcceptResult:
        """Accept a pending order.

        Steps:
        1. Load the order; only pending orders can be accepted.
        2. Resolve item quantities from the QR payload (flat list fallback).
        3. Deduct stock (all or nothing).
        4. Draw the next token for today.
        5. Persist, provided nobody accepted the order meanwhile.
        """
        log = logger.bind(order_id=order_id)

        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order {order_id} not found")
        order.require_status(OrderStatus.PENDING, "accept")

        lines = billing_lines(order)
        if not lines:
            raise ValidationError(f"Order {order_id} has no items")

        ledger = StockLedger(self._menu_repo)
        receipt = ledger.validate_and_deduct(lines)

        try:
            now = self._clock()
            token = TokenSequencer(self._counter_repo).next_token(now)
            order.accept(token, now, items_flat=flatten(lines))
            if not self._order_repo.save_if_status(order, OrderStatus.PENDING):
                raise TransitionRejectedError(
                    f"Order {order_id} was already accepted elsewhere"
                )
        except Exception as exc:
            log.warning("order_accept_rolled_back", error=str(exc))
            try:
                ledger.release(receipt)
            except DomainException as release_exc:
                # Surface the original failure, not the release error.
                log.error(
                    "stock_release_failed",
                    error=str(release_exc),
                    items=list(receipt.applied),
                )
            raise

        log.info("order_accepted", token=token, amount=order.amount)
        return AcceptResult(
            order_id=order.order_id,
            token=token,
            amount=order.amount,
            items=OrderLineDTO.from_lines(lines),
        )
