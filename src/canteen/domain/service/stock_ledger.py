"""Domain service: Stock Ledger.

Validates requested quantities against the menu and deducts them.

The two-phase approach (validate-then-mutate) ensures we never leave the
menu partially deducted when one item is short.  The mutate phase does not
trust the snapshot read in phase one: each deduction is an atomic
conditional update in the repository, and if any of them loses a race the
ones already applied are put back before the error is raised.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from canteen.domain.exceptions import InsufficientStockError
from canteen.domain.model.menu_item import MenuItem
from canteen.domain.model.value_objects import OrderLine, merge_lines
from canteen.domain.repository.menu_repository import MenuRepository

logger = structlog.get_logger()


@dataclass
class StockDeduction:
    """Receipt of what was actually taken out of stock."""

    applied: list[tuple[int, int]] = field(default_factory=list)


class StockLedger:

    def __init__(self, menu_repo: MenuRepository) -> None:
        self._menu_repo = menu_repo

    def validate_and_deduct(self, lines: list[OrderLine]) -> StockDeduction:
        """Deduct stock for every line, all or nothing.

        Raises InsufficientStockError naming the first short item and what
        was available.
        """
        requested = merge_lines(lines)

        # Phase 1: validate against a snapshot
        tracked: list[tuple[MenuItem, int]] = []
        for line in requested:
            item = self._menu_repo.get_by_name(line.name)
            if item is None or not item.is_tracked:
                continue
            if not item.can_supply(line.quantity):
                logger.info(
                    "stock_insufficient",
                    item=item.name,
                    requested=line.quantity,
                    available=item.stock,
                )
                raise InsufficientStockError(item.name, item.stock or 0)
            tracked.append((item, line.quantity))

        # Phase 2: conditional deductions, rolled back on a lost race
        receipt = StockDeduction()
        for item, qty in tracked:
            if not self._menu_repo.deduct_if_available(item.id, qty):
                self.release(receipt)
                current = self._menu_repo.get_by_id(item.id)
                available = current.stock if current and current.stock is not None else 0
                logger.warning(
                    "stock_deduction_lost_race",
                    item=item.name,
                    requested=qty,
                    available=available,
                )
                raise InsufficientStockError(item.name, available)
            receipt.applied.append((item.id, qty))

        if receipt.applied:
            logger.info("stock_deducted", items=receipt.applied)
        return receipt

    def release(self, receipt: StockDeduction) -> None:
        """Put back everything a receipt took."""
        for item_id, qty in reversed(receipt.applied):
            self._menu_repo.restock(item_id, qty)
        if receipt.applied:
            logger.info("stock_released", items=receipt.applied)
        receipt.applied.clear()
