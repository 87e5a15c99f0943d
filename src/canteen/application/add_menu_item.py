"""Application service: Add Menu Item use case."""

from __future__ import annotations

from canteen.domain.exceptions import ValidationError
from canteen.domain.model.menu_item import MenuItem
from canteen.domain.repository.menu_repository import MenuRepository


class AddMenuItemHandler:

    def __init__(self, menu_repo: MenuRepository) -> None:
        self._menu_repo = menu_repo

    def handle(
        self,
        name: str,
        price: int,
        category: str = "general",
        stock: int | None = None,
    ) -> MenuItem:
        """Add a new dish to the menu.  ``stock=None`` leaves it untracked."""
        if not name or not name.strip():
            raise ValidationError("Menu item name is required")

        existing = self._menu_repo.get_by_name(name.strip())
        if existing is not None:
            raise ValidationError(f"Menu item '{name}' already exists")

        # Auto-assign ID based on existing items
        all_items = self._menu_repo.list_all()
        next_id = max((i.id for i in all_items), default=0) + 1

        item = MenuItem(
            id=next_id,
            name=name.strip(),
            price=price,
            category=category,
            stock=stock,
        )
        self._menu_repo.save(item)
        return item
