"""
Order lifecycle: intake, status transitions, driver sequencing and
delivery confirmation.

Status changes are not validated against a transition table; any status may
be set from any other. The only guarded rule is that a driver holds at most
one active (Moving, or Returning without a return photo) order at a time.
"""
from datetime import datetime
from typing import Callable, List, NamedTuple, Optional
import base64
import binascii
import logging
import os
import threading
import uuid

from models.order import (
    Order, OrderStatus, ConfirmationMethod, ReturnReason,
    TERMINAL_STATUSES, ARCHIVED_STATUSES, QUEUE_PRIORITY,
)
from models.driver import DriverStatus
from repositories.base import FleetStore
from services.errors import (
    OrderNotFoundError, DriverNotFoundError, ActiveOrderConflictError, ProofValidationError,
)

logger = logging.getLogger(__name__)

ORDER_ID_PREFIX = "ORD-"
FIRST_ORDER_NUMBER = 101


class QueueEntry(NamedTuple):
    order: Order
    actionable: bool


class StagedPhoto(NamedTuple):
    path: str
    staged_path: str
    url: str


def order_number(order_id: str) -> int:
    suffix = order_id.rsplit("-", 1)[-1]
    return int(suffix) if suffix.isdigit() else 0


def resolve_return_reason(reason: Optional[str]) -> Optional[str]:
    """Expand a picklist code (e.g. "CR") to its description, keep free text as given"""
    if reason is None:
        return None
    reason = reason.strip()
    if reason in ReturnReason.__members__:
        return ReturnReason[reason].value
    return reason or None


class OrderService:

    def __init__(self, store: FleetStore, upload_dir: str = "uploads", clock: Callable[[], datetime] = datetime.utcnow):
        self.store = store
        self.upload_dir = upload_dir
        self.clock = clock
        # Serializes check-then-write sequences within this process
        self._lock = threading.RLock()

    def _require_order(self, order_id: str) -> Order:
        order = self.store.get_order(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def _next_order_id(self) -> str:
        number = FIRST_ORDER_NUMBER + self.store.count_orders()
        while self.store.get_order(f"{ORDER_ID_PREFIX}{number}") is not None:
            number += 1
        return f"{ORDER_ID_PREFIX}{number}"

    @staticmethod
    def _clear_proof(order: Order) -> None:
        order.return_photo_url = None
        order.proof_method = None
        order.proof_payload = None

    def _find_other_active_order(self, order: Order) -> Optional[Order]:
        if not order.driver_id:
            return None
        for other in self.store.list_orders(driver_id=order.driver_id):
            if other.id != order.id and other.is_active:
                return other
        return None

    # Intake

    def create_order(self, order: Order) -> Order:
        """Assign an id and initial state to a new order and store it"""
        with self._lock:
            if order.driver_id and self.store.get_driver(order.driver_id) is None:
                raise DriverNotFoundError(order.driver_id)

            order.id = self._next_order_id()
            order.status = OrderStatus.PENDING
            order.order_date = self.clock().date()
            order.completed_at = None
            order.return_reason = None
            order.return_photo_url = None
            order.proof_method = None
            order.proof_payload = None
            order = self.store.add_order(order)

        logger.info(f"Order {order.id} created for driver {order.driver_id or '-'}")
        return order

    def get_order(self, order_id: str) -> Order:
        return self._require_order(order_id)

    def list_orders(self, driver_id: Optional[str] = None, status: Optional[OrderStatus] = None) -> List[Order]:
        orders = self.store.list_orders(driver_id=driver_id, status=status)
        return sorted(orders, key=lambda o: order_number(o.id), reverse=True)

    def archived_orders(self) -> List[Order]:
        """Delivered and cancelled orders, most recently completed first"""
        orders = [o for o in self.store.list_orders() if o.status in ARCHIVED_STATUSES]
        orders.sort(key=lambda o: (o.completed_at or datetime.min, order_number(o.id)), reverse=True)
        return orders

    # Transitions

    def update_status(self, order_id: str, status: OrderStatus, return_reason: Optional[str] = None) -> Order:
        """
        Overwrite an order's status.

        Terminal statuses stamp completed_at, others clear it. Returning
        records the supplied reason, others clear it. Moving into an active
        status fails with ActiveOrderConflictError when the driver already
        holds a different active order; nothing is written in that case.
        """
        with self._lock:
            order = self._require_order(order_id)

            # A fresh return needs its own photo
            new_return = status == OrderStatus.RETURNING and order.status != OrderStatus.RETURNING
            becomes_active = status == OrderStatus.MOVING or (
                status == OrderStatus.RETURNING and (new_return or not order.return_photo_url)
            )
            if becomes_active:
                active = self._find_other_active_order(order)
                if active is not None:
                    logger.warning(
                        f"Rejected {status.value} for order {order.id}: driver {order.driver_id} "
                        f"already active on {active.id}"
                    )
                    raise ActiveOrderConflictError(order.driver_id, active.id)

            old_status = order.status
            order.status = status
            order.completed_at = self.clock() if status in TERMINAL_STATUSES else None
            order.return_reason = resolve_return_reason(return_reason) if status == OrderStatus.RETURNING else None
            if new_return:
                self._clear_proof(order)
            order = self.store.save_order(order)

        logger.info(f"Order {order.id} status {old_status.value if old_status else None} -> {status.value}")
        return order

    def assign_driver(self, order_id: str, driver_id: str) -> Order:
        """Hand an order to a driver; it re-enters the driver's queue as Pending"""
        with self._lock:
            order = self._require_order(order_id)
            driver = self.store.get_driver(driver_id)
            if driver is None:
                raise DriverNotFoundError(driver_id)

            order.driver_id = driver.id
            order.status = OrderStatus.PENDING
            order.completed_at = None
            order.return_reason = None
            self._clear_proof(order)
            order = self.store.save_order(order)

            driver.status = DriverStatus.ON_TRIP
            self.store.save_driver(driver)

        logger.info(f"Order {order.id} assigned to driver {driver.id}")
        return order

    # Sequencing

    def driver_queue(self, driver_id: str) -> List[QueueEntry]:
        """
        Work queue for a driver: Moving first, then Returning, then Pending,
        ties broken by order id. While the driver has an active order every
        other entry is reported as not actionable.
        """
        orders = [
            o for o in self.store.list_orders(driver_id=driver_id)
            if o.status in QUEUE_PRIORITY
            and not (o.status == OrderStatus.RETURNING and o.return_photo_url)
        ]
        orders.sort(key=lambda o: (QUEUE_PRIORITY[o.status], o.id))

        active = next((o for o in orders if o.is_active), None)
        return [QueueEntry(o, active is None or o.id == active.id) for o in orders]

    def driver_history(self, driver_id: str) -> List[Order]:
        """Finished orders for a driver, most recently completed first"""
        history = [o for o in self.store.list_orders(driver_id=driver_id) if o.is_terminal]
        history.sort(key=lambda o: (o.completed_at is not None, o.completed_at or datetime.min), reverse=True)
        return history

    # Confirmation

    def confirm_delivery(self, order_id: str, payload: str, method: ConfirmationMethod) -> Order:
        """
        Record proof submitted by the driver.

        PHOTO documents returned goods and leaves the status alone; every
        other method completes the delivery. A photo only lands under its
        final name once the order has been saved.
        """
        with self._lock:
            order = self._require_order(order_id)

            photo = None
            if method == ConfirmationMethod.PHOTO:
                photo = self._stage_return_photo(order.id, payload)
                order.return_photo_url = photo.url

            order.proof_method = method
            order.proof_payload = payload
            try:
                order = self.store.save_order(order)
            except Exception:
                if photo is not None:
                    os.remove(photo.staged_path)
                raise
            if photo is not None:
                os.replace(photo.staged_path, photo.path)
            logger.info(f"Order {order.id} confirmation recorded via {method.value}")

            if method != ConfirmationMethod.PHOTO:
                order = self.update_status(order.id, OrderStatus.DELIVERED)

        return order

    def _stage_return_photo(self, order_id: str, payload: str) -> StagedPhoto:
        data = payload or ""
        if data.startswith("data:"):
            data = data.split(",", 1)[-1]

        try:
            raw = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError):
            raise ProofValidationError("Photo must be base64-encoded image data")
        if not raw:
            raise ProofValidationError("Photo must be base64-encoded image data")

        upload_dir = os.path.join(self.upload_dir, "returns")
        os.makedirs(upload_dir, exist_ok=True)

        filename = f"{order_id}-photo.jpg"
        path = os.path.join(upload_dir, filename)
        staged_path = f"{path}.{uuid.uuid4().hex}.part"
        with open(staged_path, "wb") as buffer:
            buffer.write(raw)

        return StagedPhoto(path, staged_path, f"/uploads/returns/{filename}")
