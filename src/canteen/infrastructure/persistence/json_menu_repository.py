"""JSON-file-backed implementation of MenuRepository."""

from __future__ import annotations

from pathlib import Path

from canteen.domain.model.menu_item import MenuItem
from canteen.domain.repository.menu_repository import MenuRepository
from canteen.infrastructure.persistence.json_file import JsonFile


class JsonMenuRepository(MenuRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path, [])

    # --- MenuRepository interface ---------------------------------------------

    def get_by_id(self, item_id: int) -> MenuItem | None:
        return self._load().get(item_id)

    def get_by_name(self, name: str) -> MenuItem | None:
        for item in self._load().values():
            if item.name.lower() == name.lower():
                return item
        return None

    def list_all(self) -> list[MenuItem]:
        return sorted(self._load().values(), key=lambda i: i.id)

    def save(self, item: MenuItem) -> None:
        with self._file.lock:
            items = self._load()
            items[item.id] = item
            self._persist(items)

    def deduct_if_available(self, item_id: int, quantity: int) -> bool:
        with self._file.lock:
            items = self._load()
            item = items.get(item_id)
            if item is None:
                return True
            if not item.can_supply(quantity):
                return False
            item.deduct(quantity)
            self._persist(items)
            return True

    def restock(self, item_id: int, quantity: int) -> None:
        with self._file.lock:
            items = self._load()
            item = items.get(item_id)
            if item is None:
                return
            item.restock(quantity)
            self._persist(items)

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[int, MenuItem]:
        return {
            raw["id"]: MenuItem(
                id=raw["id"],
                name=raw["name"],
                price=raw["price"],
                category=raw.get("category", "general"),
                stock=raw.get("stock"),
            )
            for raw in self._file.read()
        }

    def _persist(self, items: dict[int, MenuItem]) -> None:
        self._file.write(
            [
                {
                    "id": i.id,
                    "name": i.name,
                    "price": i.price,
                    "category": i.category,
                    "stock": i.stock,
                    "isAvailable": i.is_available,
                }
                for i in sorted(items.values(), key=lambda i: i.id)
            ]
        )
