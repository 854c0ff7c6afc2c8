from typing import Dict, List, Optional
from models.order import Order, OrderStatus
from models.driver import Driver
from models.sos_alert import SOSAlert
from models.complaint import Complaint
from models.user import User
from repositories.base import FleetStore


class InMemoryFleetStore(FleetStore):
    """Process-lifetime store. Everything is lost on restart."""

    def __init__(self):
        self._orders: Dict[str, Order] = {}
        self._drivers: Dict[str, Driver] = {}
        self._alerts: List[SOSAlert] = []
        self._complaints: Dict[str, Complaint] = {}
        self._users: Dict[str, User] = {}

    def get_order(self, order_id: str) -> Optional[Order]:
        return self._orders.get(order_id)

    def list_orders(self, driver_id: Optional[str] = None, status: Optional[OrderStatus] = None) -> List[Order]:
        orders = list(self._orders.values())
        if driver_id is not None:
            orders = [o for o in orders if o.driver_id == driver_id]
        if status is not None:
            orders = [o for o in orders if o.status == status]
        return orders

    def add_order(self, order: Order) -> Order:
        self._orders[order.id] = order
        return order

    def save_order(self, order: Order) -> Order:
        self._orders[order.id] = order
        return order

    def count_orders(self) -> int:
        return len(self._orders)

    def get_driver(self, driver_id: str) -> Optional[Driver]:
        return self._drivers.get(driver_id)

    def list_drivers(self) -> List[Driver]:
        return sorted(self._drivers.values(), key=lambda d: d.id)

    def add_driver(self, driver: Driver) -> Driver:
        self._drivers[driver.id] = driver
        return driver

    def save_driver(self, driver: Driver) -> Driver:
        self._drivers[driver.id] = driver
        return driver

    def add_alert(self, alert: SOSAlert) -> SOSAlert:
        self._alerts.append(alert)
        return alert

    def list_alerts(self) -> List[SOSAlert]:
        return list(self._alerts)

    def get_complaint(self, complaint_id: str) -> Optional[Complaint]:
        return self._complaints.get(complaint_id)

    def list_complaints(self, customer_id: Optional[str] = None) -> List[Complaint]:
        complaints = list(self._complaints.values())
        if customer_id is not None:
            complaints = [c for c in complaints if c.customer_id == customer_id]
        return complaints

    def add_complaint(self, complaint: Complaint) -> Complaint:
        self._complaints[complaint.id] = complaint
        return complaint

    def save_complaint(self, complaint: Complaint) -> Complaint:
        self._complaints[complaint.id] = complaint
        return complaint

    def count_complaints(self) -> int:
        return len(self._complaints)

    def get_user(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def add_user(self, user: User) -> User:
        self._users[user.id] = user
        return user
