"""Local cart cache for the command-line storefront.

Only item ids are stored; each load re-reads the menu so the cart always
carries current names, prices and stock.  Items that left the menu are
dropped silently, the way a stale browser cart would be.
"""

from __future__ import annotations

from pathlib import Path

from canteen.domain.model.cart import Cart
from canteen.domain.repository.menu_repository import MenuRepository
from canteen.infrastructure.persistence.json_file import JsonFile


class JsonCartStore:

    def __init__(self, file_path: Path, menu_repo: MenuRepository) -> None:
        self._file = JsonFile(file_path, [])
        self._menu_repo = menu_repo

    def load(self) -> Cart:
        cart = Cart()
        for item_id in self._file.read():
            item = self._menu_repo.get_by_id(item_id)
            if item is not None:
                cart.items.append(item)
        return cart

    def save(self, cart: Cart) -> None:
        with self._file.lock:
            self._file.write([item.id for item in cart.items])
