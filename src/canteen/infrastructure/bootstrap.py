"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from canteen.infrastructure.config import Settings, load_settings
from canteen.infrastructure.persistence.json_cart_store import JsonCartStore
from canteen.infrastructure.persistence.json_menu_repository import JsonMenuRepository
from canteen.infrastructure.persistence.json_order_repository import JsonOrderRepository
from canteen.infrastructure.persistence.json_store_status_repository import (
    JsonStoreStatusRepository,
)
from canteen.infrastructure.persistence.json_token_counter_repository import (
    JsonTokenCounterRepository,
)


@lru_cache(maxsize=1)
def settings() -> Settings:
    return load_settings()


def menu_repository() -> JsonMenuRepository:
    return JsonMenuRepository(settings().data_dir / "menu.json")


def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(settings().data_dir / "orders.json")


def token_counter_repository() -> JsonTokenCounterRepository:
    return JsonTokenCounterRepository(settings().data_dir / "counters.json")


def store_status_repository() -> JsonStoreStatusRepository:
    return JsonStoreStatusRepository(settings().data_dir / "store.json")


def cart_store() -> JsonCartStore:
    return JsonCartStore(settings().data_dir / "cart.json", menu_repository())
