"""Application services: Add to / Remove from Cart use cases."""

from __future__ import annotations

from canteen.domain.exceptions import EntityNotFoundError, StoreClosedError
from canteen.domain.model.cart import Cart
from canteen.domain.model.menu_item import MenuItem
from canteen.domain.repository.menu_repository import MenuRepository
from canteen.domain.repository.store_status_repository import StoreStatusRepository


class AddToCartHandler:

    def __init__(
        self,
        menu_repo: MenuRepository,
        store_status_repo: StoreStatusRepository,
    ) -> None:
        self._menu_repo = menu_repo
        self._store_status_repo = store_status_repo

    def handle(self, cart: Cart, item_id: int) -> MenuItem:
        """Add one unit, checked against the *current* menu stock."""
        if not self._store_status_repo.is_open():
            raise StoreClosedError("The canteen is closed; ordering is disabled")

        item = self._menu_repo.get_by_id(item_id)
        if item is None:
            raise EntityNotFoundError(f"Menu item #{item_id} not found")

        cart.add(item)
        return item


class RemoveFromCartHandler:

    def handle(self, cart: Cart, item_id: int) -> MenuItem:
        return cart.remove(item_id)
