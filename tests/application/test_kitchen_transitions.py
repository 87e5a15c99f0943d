"""Integration tests for the kitchen's Start and Mark Ready use cases."""

import pytest

from canteen.application.accept_order import AcceptOrderHandler
from canteen.application.mark_ready import MarkReadyHandler
from canteen.application.show_order import ShowOrderHandler
from canteen.application.start_order import StartOrderHandler
from canteen.domain.exceptions import EntityNotFoundError, TransitionRejectedError
from canteen.domain.model.menu_item import MenuItem
from canteen.domain.model.order import Order, OrderStatus
from canteen.domain.service.payload_codec import encode
from tests.fakes import (
    FakeClock,
    FakeMenuRepository,
    FakeOrderRepository,
    FakeTokenCounterRepository,
)

TEA = MenuItem(id=1, name="Tea", price=10, stock=50)


def _setup():
    order_repo = FakeOrderRepository()
    clock = FakeClock()
    accept = AcceptOrderHandler(
        order_repo, FakeMenuRepository([TEA]), FakeTokenCounterRepository(), clock
    )
    start = StartOrderHandler(order_repo, clock)
    ready = MarkReadyHandler(order_repo, clock)
    return order_repo, clock, accept, start, ready


def _place(order_repo, clock, order_id="A"):
    order_repo.add(Order.create(
        order_id=order_id,
        amount=10,
        raw_payload=encode([TEA], order_id),
        items_flat=["Tea"],
        created_at=clock(),
    ))


class TestKitchenFlow:

    def test_paid_to_preparing_to_ready(self):
        order_repo, clock, accept, start, ready = _setup()
        _place(order_repo, clock)
        accept.handle("A")

        clock.advance(minutes=2)
        start.handle("A")
        assert order_repo.get_by_id("A").status == OrderStatus.PREPARING

        clock.advance(minutes=5)
        ready.handle("A")
        stored = order_repo.get_by_id("A")
        assert stored.status == OrderStatus.READY
        assert stored.completed_at == clock.now
        assert stored.token == 101

    def test_show_order_after_completion(self):
        order_repo, clock, accept, start, ready = _setup()
        _place(order_repo, clock)
        accept.handle("A")
        start.handle("A")
        ready.handle("A")

        dto = ShowOrderHandler(order_repo).handle("A")

        assert dto.status == "ready"
        assert dto.token == 101
        assert [(i.name, i.quantity) for i in dto.items] == [("Tea", 1)]
        assert dto.created_at == "2024-01-01 12:05"


class TestIllegalTransitions:

    def test_cannot_start_pending(self):
        order_repo, clock, _, start, _ = _setup()
        _place(order_repo, clock)
        with pytest.raises(TransitionRejectedError):
            start.handle("A")
        assert order_repo.get_by_id("A").status == OrderStatus.PENDING

    def test_cannot_mark_pending_ready(self):
        order_repo, clock, _, _, ready = _setup()
        _place(order_repo, clock)
        with pytest.raises(TransitionRejectedError):
            ready.handle("A")
        assert order_repo.get_by_id("A").completed_at is None

    def test_cannot_skip_preparing(self):
        order_repo, clock, accept, _, ready = _setup()
        _place(order_repo, clock)
        accept.handle("A")
        with pytest.raises(TransitionRejectedError, match="expected preparing"):
            ready.handle("A")

    def test_cannot_start_twice(self):
        order_repo, clock, accept, start, _ = _setup()
        _place(order_repo, clock)
        accept.handle("A")
        start.handle("A")
        with pytest.raises(TransitionRejectedError):
            start.handle("A")

    def test_unknown_order(self):
        _, _, _, start, ready = _setup()
        with pytest.raises(EntityNotFoundError):
            start.handle("missing")
        with pytest.raises(EntityNotFoundError):
            ready.handle("missing")
