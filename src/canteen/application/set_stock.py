"""Application service: Set Stock use case (admin restock or count)."""

from __future__ import annotations

import structlog

from canteen.domain.exceptions import EntityNotFoundError
from canteen.domain.repository.menu_repository import MenuRepository

logger = structlog.get_logger()


class SetStockHandler:

    def __init__(self, menu_repo: MenuRepository) -> None:
        self._menu_repo = menu_repo

    def handle(self, item_name: str, stock: int | None) -> None:
        """Overwrite the stock level; ``None`` stops tracking the item."""
        item = self._menu_repo.get_by_name(item_name)
        if item is None:
            raise EntityNotFoundError(f"Menu item not found: '{item_name}'")

        item.set_stock(stock)
        self._menu_repo.save(item)
        logger.info("stock_set", item=item.name, stock=item.stock)
