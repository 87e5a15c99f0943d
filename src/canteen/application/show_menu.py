"""Application service: Show Menu use case (query)."""

from __future__ import annotations

from canteen.application.dto import MenuLineDTO
from canteen.domain.repository.menu_repository import MenuRepository


class ShowMenuHandler:

    def __init__(self, menu_repo: MenuRepository) -> None:
        self._menu_repo = menu_repo

    def handle(self, category: str | None = None, search: str = "") -> list[MenuLineDTO]:
        needle = search.strip().lower()
        return [
            MenuLineDTO(
                id=item.id,
                name=item.name,
                category=item.category,
                price=item.price,
                stock=item.stock,
                available=item.is_available,
                low_stock=item.is_low_stock,
            )
            for item in self._menu_repo.list_all()
            if (category is None or item.category == category)
            and needle in item.name.lower()
        ]
