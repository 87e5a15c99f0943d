"""Cart: the student's unsaved selection, one entry per unit."""

from __future__ import annotations

from dataclasses import dataclass, field

from canteen.domain.exceptions import ValidationError
from canteen.domain.model.menu_item import MenuItem
from canteen.domain.model.value_objects import OrderLine, count_names


@dataclass
class Cart:
    items: list[MenuItem] = field(default_factory=list)

    def add(self, item: MenuItem) -> None:
        """Add one unit of *item*, refusing to outgrow its tracked stock."""
        if not item.is_available:
            raise ValidationError(f"{item.name} is sold out")
        in_cart = self.quantity_of(item.id)
        if item.stock is not None and in_cart >= item.stock:
            raise ValidationError(f"Only {item.stock} {item.name} available")
        self.items.append(item)

    def remove(self, item_id: int) -> MenuItem:
        """Drop one unit of the item; raises if it is not in the cart."""
        for index, item in enumerate(self.items):
            if item.id == item_id:
                return self.items.pop(index)
        raise ValidationError(f"Item #{item_id} is not in the cart")

    def clear(self) -> None:
        self.items.clear()

    def quantity_of(self, item_id: int) -> int:
        return sum(1 for item in self.items if item.id == item_id)

    @property
    def total(self) -> int:
        return sum(item.price for item in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def item_names(self) -> list[str]:
        return [item.name for item in self.items]

    def grouped(self) -> list[OrderLine]:
        return count_names(self.item_names())
