"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

import copy
import threading
from datetime import datetime
from pathlib import Path

from canteen.domain.exceptions import ValidationError
from canteen.domain.model.order import Order, OrderStatus
from canteen.domain.model.order_query import OrderQuery
from canteen.domain.repository.order_repository import OrderRepository
from canteen.domain.repository.subscription import (
    ChangeListener,
    ErrorListener,
    Subscription,
)
from canteen.infrastructure.persistence.change_feed import OrderChangeFeed
from canteen.infrastructure.persistence.json_file import JsonFile

# One feed per file, so every repository instance in the process sees the
# same subscribers.
_feeds: dict[Path, OrderChangeFeed] = {}
_feeds_guard = threading.Lock()


def _feed_for(path: Path) -> OrderChangeFeed:
    key = path.resolve()
    with _feeds_guard:
        if key not in _feeds:
            _feeds[key] = OrderChangeFeed()
        return _feeds[key]


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path, [])
        self._feed = _feed_for(file_path)

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: str) -> Order | None:
        for raw in self._file.read():
            if raw["order_id"] == order_id:
                return self._to_domain(raw)
        return None

    def add(self, order: Order) -> None:
        with self._file.lock:
            records = self._file.read()
            if any(raw["order_id"] == order.order_id for raw in records):
                raise ValidationError(f"Order {order.order_id} already exists")
            records.append(self._to_raw(order))
            self._file.write(records)
            self._feed.publish(None, copy.deepcopy(order))

    def save(self, order: Order) -> None:
        with self._file.lock:
            self._upsert(order, expected=None)

    def save_if_status(self, order: Order, expected: OrderStatus) -> bool:
        with self._file.lock:
            return self._upsert(order, expected=expected)

    def subscribe(
        self,
        query: OrderQuery,
        on_changes: ChangeListener,
        on_error: ErrorListener | None = None,
    ) -> Subscription:
        return self._feed.subscribe(query, on_changes, on_error, snapshot=self._load_all)

    # --- Internal helpers -----------------------------------------------------

    def _upsert(self, order: Order, expected: OrderStatus | None) -> bool:
        records = self._file.read()
        for i, raw in enumerate(records):
            if raw["order_id"] != order.order_id:
                continue
            before = self._to_domain(raw)
            if expected is not None and before.status != expected:
                return False
            records[i] = self._to_raw(order)
            self._file.write(records)
            self._feed.publish(before, copy.deepcopy(order))
            return True
        if expected is not None:
            return False
        records.append(self._to_raw(order))
        self._file.write(records)
        self._feed.publish(None, copy.deepcopy(order))
        return True

    def _load_all(self) -> list[Order]:
        return [self._to_domain(raw) for raw in self._file.read()]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "order_id": order.order_id,
            "token": order.token,
            "amount": order.amount,
            "status": order.status.value,
            "items_flat": list(order.items_flat),
            "raw_payload": order.raw_payload,
            "created_at": order.created_at.isoformat(),
            "paid_at": _iso(order.paid_at),
            "started_at": _iso(order.started_at),
            "completed_at": _iso(order.completed_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        return Order(
            order_id=raw["order_id"],
            amount=raw["amount"],
            raw_payload=raw.get("raw_payload", ""),
            items_flat=list(raw.get("items_flat") or []),
            status=OrderStatus(raw["status"]),
            token=raw.get("token"),
            created_at=datetime.fromisoformat(raw["created_at"]),
            paid_at=_parse(raw.get("paid_at")),
            started_at=_parse(raw.get("started_at")),
            completed_at=_parse(raw.get("completed_at")),
        )


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
