import pytest

from models.order import OrderStatus
from services.errors import OrderNotFoundError, ActiveOrderConflictError
from tests.conftest import make_order


@pytest.mark.parametrize("status", [OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.RETURNING])
def test_terminal_status_stamps_completion_time(store, order_service, clock, status):
    store.add_order(make_order("ORD-1", status=OrderStatus.MOVING))

    order = order_service.update_status("ORD-1", status)

    assert order.status == status
    assert order.completed_at == clock.now


@pytest.mark.parametrize("status", [OrderStatus.PENDING, OrderStatus.MOVING, OrderStatus.IDLE])
def test_non_terminal_status_clears_completion_time(store, order_service, status):
    store.add_order(make_order("ORD-1"))
    order_service.update_status("ORD-1", OrderStatus.DELIVERED)

    order = order_service.update_status("ORD-1", status)

    assert order.status == status
    assert order.completed_at is None


def test_any_status_can_follow_any_other(store, order_service):
    store.add_order(make_order("ORD-1", status=OrderStatus.CANCELLED))

    assert order_service.update_status("ORD-1", OrderStatus.PENDING).status == OrderStatus.PENDING
    assert order_service.update_status("ORD-1", OrderStatus.IDLE).status == OrderStatus.IDLE


def test_returning_records_latest_reason(store, order_service):
    store.add_order(make_order("ORD-1", status=OrderStatus.MOVING))

    order_service.update_status("ORD-1", OrderStatus.RETURNING, return_reason="Gate closed")
    assert store.get_order("ORD-1").return_reason == "Gate closed"

    order = order_service.update_status("ORD-1", OrderStatus.RETURNING, return_reason="Payment Failed")
    assert order.return_reason == "Payment Failed"


def test_return_reason_code_is_expanded(store, order_service):
    store.add_order(make_order("ORD-1", status=OrderStatus.MOVING))

    order = order_service.update_status("ORD-1", OrderStatus.RETURNING, return_reason="CR")

    assert order.return_reason == "Customer Refused"


def test_return_reason_cleared_when_leaving_returning(store, order_service):
    store.add_order(make_order("ORD-1", status=OrderStatus.MOVING))
    order_service.update_status("ORD-1", OrderStatus.RETURNING, return_reason="RD")

    order = order_service.update_status("ORD-1", OrderStatus.DELIVERED, return_reason="ignored")

    assert order.return_reason is None


def test_unknown_order_is_not_found_and_nothing_changes(store, order_service):
    store.add_order(make_order("ORD-1"))

    with pytest.raises(OrderNotFoundError):
        order_service.update_status("ORD-404", OrderStatus.DELIVERED)

    assert store.get_order("ORD-1").status == OrderStatus.PENDING
    assert store.get_order("ORD-404") is None


def test_second_active_order_for_driver_is_rejected(store, order_service):
    store.add_order(make_order("ORD-1", status=OrderStatus.MOVING))
    store.add_order(make_order("ORD-2"))

    with pytest.raises(ActiveOrderConflictError) as excinfo:
        order_service.update_status("ORD-2", OrderStatus.MOVING)

    assert excinfo.value.active_order_id == "ORD-1"
    assert store.get_order("ORD-2").status == OrderStatus.PENDING


def test_returning_counts_as_active_until_photo_logged(store, order_service):
    store.add_order(make_order("ORD-1", status=OrderStatus.RETURNING))
    store.add_order(make_order("ORD-2"))

    with pytest.raises(ActiveOrderConflictError):
        order_service.update_status("ORD-2", OrderStatus.MOVING)

    store.get_order("ORD-1").return_photo_url = "/uploads/returns/ORD-1-photo.jpg"
    assert order_service.update_status("ORD-2", OrderStatus.MOVING).status == OrderStatus.MOVING


def test_active_rule_is_per_driver(store, order_service):
    store.add_order(make_order("ORD-1", driver_id="DRV-1", status=OrderStatus.MOVING))
    store.add_order(make_order("ORD-2", driver_id="DRV-2"))
    store.add_order(make_order("ORD-3", driver_id=None))

    assert order_service.update_status("ORD-2", OrderStatus.MOVING).status == OrderStatus.MOVING
    assert order_service.update_status("ORD-3", OrderStatus.MOVING).status == OrderStatus.MOVING


def test_active_order_can_be_set_moving_again(store, order_service):
    store.add_order(make_order("ORD-1", status=OrderStatus.MOVING))

    assert order_service.update_status("ORD-1", OrderStatus.MOVING).status == OrderStatus.MOVING


def test_finishing_active_order_unlocks_the_next(store, order_service):
    store.add_order(make_order("ORD-1", status=OrderStatus.MOVING))
    store.add_order(make_order("ORD-2"))

    order_service.update_status("ORD-1", OrderStatus.DELIVERED)

    assert order_service.update_status("ORD-2", OrderStatus.MOVING).status == OrderStatus.MOVING


def test_archived_orders_are_closed_newest_first(store, order_service, clock):
    store.add_order(make_order("ORD-1", status=OrderStatus.MOVING))
    store.add_order(make_order("ORD-2", driver_id="DRV-2", status=OrderStatus.MOVING))
    store.add_order(make_order("ORD-3", driver_id="DRV-3", status=OrderStatus.MOVING))
    store.add_order(make_order("ORD-4"))

    order_service.update_status("ORD-1", OrderStatus.DELIVERED)
    clock.advance(hours=1)
    order_service.update_status("ORD-2", OrderStatus.CANCELLED)
    clock.advance(hours=1)
    order_service.update_status("ORD-3", OrderStatus.RETURNING, return_reason="CR")

    assert [o.id for o in order_service.archived_orders()] == ["ORD-2", "ORD-1"]
