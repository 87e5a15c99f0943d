"""Tests for the JSON-file-backed repositories."""

import json
import multiprocessing
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor
from datetime import datetime

import pytest

from canteen.domain.exceptions import ConnectivityError, ValidationError
from canteen.domain.model.cart import Cart
from canteen.domain.model.menu_item import MenuItem
from canteen.domain.model.order import Order, OrderStatus
from canteen.domain.model.order_query import ChangeType, OrderQuery
from canteen.domain.service.token_sequencer import TokenSequencer
from canteen.infrastructure.persistence.json_cart_store import JsonCartStore
from canteen.infrastructure.persistence.json_menu_repository import JsonMenuRepository
from canteen.infrastructure.persistence.json_order_repository import JsonOrderRepository
from canteen.infrastructure.persistence.json_store_status_repository import (
    JsonStoreStatusRepository,
)
from canteen.infrastructure.persistence.json_token_counter_repository import (
    JsonTokenCounterRepository,
)
from tests.fakes import IST
from tests.workers import draw_tokens, sell_units

CREATED = datetime(2024, 1, 1, 12, 5, 1, tzinfo=IST)


def _order(order_id="120501-7"):
    return Order.create(
        order_id=order_id,
        amount=35,
        raw_payload="REF: 120501-7\n----------------\nTea x2\nSamosa\n----------------\nTOTAL: ₹35\n[VERIFIED]",
        items_flat=["Tea", "Tea", "Samosa"],
        created_at=CREATED,
    )


class TestJsonOrderRepository:

    def test_round_trips_all_fields(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = _order()
        repo.add(order)
        order.accept(101, CREATED)
        repo.save(order)

        loaded = JsonOrderRepository(tmp_path / "orders.json").get_by_id("120501-7")

        assert loaded == order
        assert loaded.paid_at == CREATED

    def test_duplicate_add_rejected(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        repo.add(_order())
        with pytest.raises(ValidationError, match="already exists"):
            repo.add(_order())

    def test_save_if_status(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        repo.add(_order())
        order = repo.get_by_id("120501-7")
        order.accept(101, CREATED)

        assert repo.save_if_status(order, OrderStatus.PENDING)
        assert not repo.save_if_status(order, OrderStatus.PENDING)
        assert not repo.save_if_status(_order("missing"), OrderStatus.PENDING)

    def test_subscribers_shared_across_instances(self, tmp_path):
        seen = []
        JsonOrderRepository(tmp_path / "orders.json").subscribe(
            OrderQuery(), lambda changes: seen.extend(changes)
        )

        JsonOrderRepository(tmp_path / "orders.json").add(_order())

        assert [(c.type, c.order.order_id) for c in seen] == [(ChangeType.ADDED, "120501-7")]

    def test_corrupt_file_is_a_connectivity_error(self, tmp_path):
        path = tmp_path / "orders.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConnectivityError, match="orders.json"):
            JsonOrderRepository(path).get_by_id("x")


class TestJsonMenuRepository:

    def test_untracked_stored_as_null(self, tmp_path):
        path = tmp_path / "menu.json"
        repo = JsonMenuRepository(path)
        repo.save(MenuItem(id=1, name="Water", price=5))
        repo.save(MenuItem(id=2, name="Tea", price=10, stock=0))

        raw = json.loads(path.read_text(encoding="utf-8"))
        assert raw[0]["stock"] is None
        assert raw[0]["isAvailable"] is True
        assert raw[1]["isAvailable"] is False

    def test_legacy_sentinel_read_as_untracked(self, tmp_path):
        path = tmp_path / "menu.json"
        path.write_text(json.dumps([{"id": 1, "name": "Water", "price": 5, "stock": 9999}]))
        assert JsonMenuRepository(path).get_by_id(1).stock is None

    def test_conditional_deduction(self, tmp_path):
        repo = JsonMenuRepository(tmp_path / "menu.json")
        repo.save(MenuItem(id=1, name="Samosa", price=15, stock=2))

        assert repo.deduct_if_available(1, 2)
        assert not repo.deduct_if_available(1, 1)
        repo.restock(1, 1)
        assert repo.get_by_name("samosa").stock == 1
        assert repo.deduct_if_available(99, 1)

    def test_concurrent_deductions_never_oversell(self, tmp_path):
        repo = JsonMenuRepository(tmp_path / "menu.json")
        repo.save(MenuItem(id=1, name="Samosa", price=15, stock=10))

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda _: repo.deduct_if_available(1, 1), range(25)))

        assert results.count(True) == 10
        assert repo.get_by_id(1).stock == 0


class TestJsonTokenCounterRepository:

    def test_sequencer_over_file(self, tmp_path):
        path = tmp_path / "counters.json"
        sequencer = TokenSequencer(JsonTokenCounterRepository(path))

        assert [sequencer.next_token("2024-01-01") for _ in range(2)] == [101, 102]
        assert sequencer.next_token("2024-01-02") == 101
        assert json.loads(path.read_text()) == {"2024-01-01": 102, "2024-01-02": 101}

    def test_concurrent_tokens_are_unique(self, tmp_path):
        repo = JsonTokenCounterRepository(tmp_path / "counters.json")
        sequencer = TokenSequencer(repo, max_attempts=100)

        with ThreadPoolExecutor(max_workers=4) as pool:
            tokens = list(pool.map(lambda _: sequencer.next_token("day1"), range(12)))

        assert sorted(tokens) == list(range(101, 113))


class TestJsonStoreStatusRepository:

    def test_open_by_default(self, tmp_path):
        repo = JsonStoreStatusRepository(tmp_path / "store.json")
        assert repo.is_open()
        repo.set_open(False)
        assert not JsonStoreStatusRepository(tmp_path / "store.json").is_open()


class TestJsonCartStore:

    def test_reloads_current_menu_data(self, tmp_path):
        menu_repo = JsonMenuRepository(tmp_path / "menu.json")
        menu_repo.save(MenuItem(id=1, name="Tea", price=10))
        menu_repo.save(MenuItem(id=2, name="Samosa", price=15))
        store = JsonCartStore(tmp_path / "cart.json", menu_repo)

        cart = Cart()
        cart.add(menu_repo.get_by_id(1))
        cart.add(menu_repo.get_by_id(2))
        store.save(cart)
        menu_repo.save(MenuItem(id=1, name="Tea", price=12))

        assert store.load().total == 27

    def test_drops_items_removed_from_menu(self, tmp_path):
        menu_repo = JsonMenuRepository(tmp_path / "menu.json")
        (tmp_path / "cart.json").write_text("[1, 5]")
        menu_repo.save(MenuItem(id=1, name="Tea", price=10))

        assert JsonCartStore(tmp_path / "cart.json", menu_repo).load().item_names() == ["Tea"]


class TestAcrossProcesses:
    """Each CLI command is a separate process sharing the data directory."""

    def _pool(self):
        return ProcessPoolExecutor(max_workers=4, mp_context=multiprocessing.get_context("spawn"))

    def test_tokens_unique_across_processes(self, tmp_path):
        path = tmp_path / "counters.json"
        JsonTokenCounterRepository(path)

        with self._pool() as pool:
            futures = [pool.submit(draw_tokens, str(path), "2024-01-01", 25) for _ in range(4)]
            tokens = [t for f in futures for t in f.result()]

        assert sorted(tokens) == list(range(101, 201))

    def test_stock_never_oversold_across_processes(self, tmp_path):
        path = tmp_path / "menu.json"
        JsonMenuRepository(path).save(MenuItem(id=1, name="Samosa", price=15, stock=30))

        with self._pool() as pool:
            futures = [pool.submit(sell_units, str(path), 1, 20) for _ in range(4)]
            sold = sum(f.result() for f in futures)

        assert sold == 30
        assert JsonMenuRepository(path).get_by_id(1).stock == 0

    def test_writes_leave_no_temp_files(self, tmp_path):
        repo = JsonStoreStatusRepository(tmp_path / "store.json")
        repo.set_open(False)
        repo.set_open(True)
        assert not list(tmp_path.glob("*.tmp"))
