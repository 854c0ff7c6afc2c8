"""
Storage port for orders, drivers, SOS alerts, complaints and user accounts.

Services only talk to this interface, so the in-memory demo store and the
SQLAlchemy store are interchangeable.
"""
from abc import ABC, abstractmethod
from typing import List, Optional
from models.order import Order, OrderStatus
from models.driver import Driver
from models.sos_alert import SOSAlert
from models.complaint import Complaint
from models.user import User


class FleetStore(ABC):

    def create_schema(self) -> None:
        """Prepare backing storage. Nothing to do for stores without a schema."""

    def is_empty(self) -> bool:
        return self.count_orders() == 0 and not self.list_drivers()

    def is_healthy(self) -> bool:
        return True

    # Orders
    @abstractmethod
    def get_order(self, order_id: str) -> Optional[Order]: ...

    @abstractmethod
    def list_orders(self, driver_id: Optional[str] = None, status: Optional[OrderStatus] = None) -> List[Order]: ...

    @abstractmethod
    def add_order(self, order: Order) -> Order: ...

    @abstractmethod
    def save_order(self, order: Order) -> Order: ...

    @abstractmethod
    def count_orders(self) -> int: ...

    # Drivers
    @abstractmethod
    def get_driver(self, driver_id: str) -> Optional[Driver]: ...

    @abstractmethod
    def list_drivers(self) -> List[Driver]: ...

    @abstractmethod
    def add_driver(self, driver: Driver) -> Driver: ...

    @abstractmethod
    def save_driver(self, driver: Driver) -> Driver: ...

    # SOS alerts (append-only)
    @abstractmethod
    def add_alert(self, alert: SOSAlert) -> SOSAlert: ...

    @abstractmethod
    def list_alerts(self) -> List[SOSAlert]: ...

    # Customer complaints
    @abstractmethod
    def get_complaint(self, complaint_id: str) -> Optional[Complaint]: ...

    @abstractmethod
    def list_complaints(self, customer_id: Optional[str] = None) -> List[Complaint]: ...

    @abstractmethod
    def add_complaint(self, complaint: Complaint) -> Complaint: ...

    @abstractmethod
    def save_complaint(self, complaint: Complaint) -> Complaint: ...

    @abstractmethod
    def count_complaints(self) -> int: ...

    # Accounts
    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]: ...

    @abstractmethod
    def add_user(self, user: User) -> User: ...
