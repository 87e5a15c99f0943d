"""Integration tests for the Scan Order and Accept Order use cases."""

import pytest

from canteen.application.accept_order import AcceptOrderHandler
from canteen.application.scan_order import ScanOrderHandler
from canteen.domain.exceptions import (
    ConnectivityError,
    EntityNotFoundError,
    InsufficientStockError,
    InvalidPayloadError,
    TransactionConflictError,
    TransitionRejectedError,
)
from canteen.domain.model.menu_item import MenuItem
from canteen.domain.model.order import Order, OrderStatus
from canteen.domain.service.payload_codec import encode
from tests.fakes import (
    ContendedTokenCounterRepository,
    FakeClock,
    FakeMenuRepository,
    FakeOrderRepository,
    FakeTokenCounterRepository,
)

TEA = MenuItem(id=1, name="Tea", price=10, category="drinks", stock=50)
SAMOSA = MenuItem(id=2, name="Samosa", price=15, category="snacks", stock=2)


def _setup(counter_repo=None, order_repo=None):
    menu_repo = FakeMenuRepository([TEA, SAMOSA])
    order_repo = order_repo or FakeOrderRepository()
    counter_repo = counter_repo or FakeTokenCounterRepository()
    clock = FakeClock()
    handler = AcceptOrderHandler(order_repo, menu_repo, counter_repo, clock)
    return handler, order_repo, menu_repo, counter_repo, clock


def _place(order_repo, clock, order_id, items, items_flat=None):
    payload = encode(items, order_id)
    order = Order.create(
        order_id=order_id,
        amount=sum(i.price for i in items),
        raw_payload=payload,
        items_flat=items_flat or [i.name for i in items],
        created_at=clock(),
    )
    order_repo.add(order)
    return order


class TestScanOrder:

    def test_decodes_and_reports_stored_status(self):
        _, order_repo, _, _, clock = _setup()
        order = _place(order_repo, clock, "120501-7", [TEA, TEA, SAMOSA])

        scanned = ScanOrderHandler(order_repo).handle(order.raw_payload)

        assert scanned.order_id == "120501-7"
        assert scanned.amount == 35
        assert [(i.name, i.quantity) for i in scanned.items] == [("Tea", 2), ("Samosa", 1)]
        assert scanned.stored_status == "pending"

    def test_unknown_order_has_no_status(self):
        _, order_repo, _, _, _ = _setup()
        scanned = ScanOrderHandler(order_repo).handle(encode([TEA], "999999-1"))
        assert scanned.stored_status is None

    def test_truncated_payload_rejected(self):
        _, order_repo, _, _, _ = _setup()
        with pytest.raises(InvalidPayloadError):
            ScanOrderHandler(order_repo).handle("REF: 1-1\n----------------\nTea")


class TestAcceptHappyPath:

    def test_assigns_first_token_and_deducts_stock(self):
        handler, order_repo, menu_repo, counter_repo, clock = _setup()
        _place(order_repo, clock, "120501-7", [TEA, TEA, SAMOSA])

        result = handler.handle("120501-7")

        assert result.token == 101
        assert result.amount == 35
        stored = order_repo.get_by_id("120501-7")
        assert stored.status == OrderStatus.PAID
        assert stored.token == 101
        assert stored.paid_at == clock.now
        assert menu_repo.stock_of("Tea") == 48
        assert menu_repo.stock_of("Samosa") == 1
        assert counter_repo.get("2024-01-01").value == 101

    def test_tokens_follow_acceptance_order(self):
        handler, order_repo, _, _, clock = _setup()
        _place(order_repo, clock, "A", [TEA])
        _place(order_repo, clock, "B", [TEA])

        assert handler.handle("B").token == 101
        assert handler.handle("A").token == 102

    def test_next_day_restarts_tokens(self):
        handler, order_repo, _, _, clock = _setup()
        _place(order_repo, clock, "A", [TEA])
        handler.handle("A")

        clock.advance(days=1)
        _place(order_repo, clock, "B", [TEA])

        assert handler.handle("B").token == 101

    def test_payload_quantities_win_over_flat_list(self):
        handler, order_repo, menu_repo, _, clock = _setup()
        _place(order_repo, clock, "A", [TEA, TEA, TEA], items_flat=["Tea"])

        handler.handle("A")

        assert menu_repo.stock_of("Tea") == 47
        assert order_repo.get_by_id("A").items_flat == ["Tea", "Tea", "Tea"]

    def test_flat_list_used_when_payload_has_no_items(self):
        handler, order_repo, menu_repo, _, clock = _setup()
        order = Order.create(
            order_id="A",
            amount=10,
            raw_payload="REF: A\nTOTAL: ₹10",
            items_flat=["Tea"],
            created_at=clock(),
        )
        order_repo.add(order)

        handler.handle("A")

        assert menu_repo.stock_of("Tea") == 49


class TestAcceptRejections:

    def test_unknown_order(self):
        handler, _, _, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            handler.handle("nope")

    def test_insufficient_stock_leaves_everything_untouched(self):
        handler, order_repo, menu_repo, counter_repo, clock = _setup()
        _place(order_repo, clock, "A", [TEA, SAMOSA, SAMOSA, SAMOSA])

        with pytest.raises(InsufficientStockError, match="Samosa. Available: 2"):
            handler.handle("A")

        assert order_repo.get_by_id("A").status == OrderStatus.PENDING
        assert menu_repo.stock_of("Tea") == 50
        assert menu_repo.stock_of("Samosa") == 2
        assert counter_repo.get("2024-01-01") is None

    def test_second_accept_rejected_without_side_effects(self):
        handler, order_repo, menu_repo, _, clock = _setup()
        _place(order_repo, clock, "A", [TEA])
        handler.handle("A")

        with pytest.raises(TransitionRejectedError, match="current status is paid"):
            handler.handle("A")

        assert order_repo.get_by_id("A").token == 101
        assert menu_repo.stock_of("Tea") == 49

    def test_token_failure_puts_stock_back(self):
        handler, order_repo, menu_repo, _, clock = _setup(
            counter_repo=ContendedTokenCounterRepository(conflicts=10)
        )
        _place(order_repo, clock, "A", [TEA, SAMOSA])

        with pytest.raises(TransactionConflictError):
            handler.handle("A")

        assert order_repo.get_by_id("A").status == OrderStatus.PENDING
        assert menu_repo.stock_of("Tea") == 50
        assert menu_repo.stock_of("Samosa") == 2

    def test_rival_acceptance_puts_stock_back(self):
        class RivalAcceptsFirst(FakeOrderRepository):
            def save_if_status(self, order, expected):
                rival = self.get_by_id(order.order_id)
                rival.accept(999, order.paid_at)
                self.save(rival)
                return super().save_if_status(order, expected)

        handler, order_repo, menu_repo, _, clock = _setup(order_repo=RivalAcceptsFirst())
        _place(order_repo, clock, "A", [TEA])

        with pytest.raises(TransitionRejectedError, match="already accepted"):
            handler.handle("A")

        assert order_repo.get_by_id("A").token == 999
        assert menu_repo.stock_of("Tea") == 50

    def test_failed_release_does_not_mask_original_error(self):
        class UnreachableOnRestock(FakeMenuRepository):
            def restock(self, item_id, quantity):
                raise ConnectivityError("menu store unreachable")

        menu_repo = UnreachableOnRestock([TEA])
        order_repo = FakeOrderRepository()
        clock = FakeClock()
        handler = AcceptOrderHandler(
            order_repo, menu_repo, ContendedTokenCounterRepository(conflicts=10), clock
        )
        _place(order_repo, clock, "A", [TEA])

        with pytest.raises(TransactionConflictError):
            handler.handle("A")

        assert order_repo.get_by_id("A").status == OrderStatus.PENDING
