"""Abstract repository for MenuItem aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from canteen.domain.model.menu_item import MenuItem


class MenuRepository(ABC):

    @abstractmethod
    def get_by_id(self, item_id: int) -> MenuItem | None:
        """Return a menu item by its ID, or None if not found."""

    @abstractmethod
    def get_by_name(self, name: str) -> MenuItem | None:
        """Return a menu item by its exact name, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[MenuItem]:
        """Return every menu item ordered by ID."""

    @abstractmethod
    def save(self, item: MenuItem) -> None:
        """Persist a new or updated menu item."""

    @abstractmethod
    def deduct_if_available(self, item_id: int, quantity: int) -> bool:
        """Atomically take *quantity* out of stock.

        Returns False, changing nothing, when the item is tracked and its
        stock at apply time is below *quantity*.  A missing item counts as
        unconstrained and returns True.
        """

    @abstractmethod
    def restock(self, item_id: int, quantity: int) -> None:
        """Atomically put *quantity* back into stock."""
