from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from typing import List, Optional
import logging

from database import Base, create_session_factory, verify_db_connection
from models.order import Order, OrderStatus
from models.driver import Driver
from models.sos_alert import SOSAlert
from models.complaint import Complaint
from models.user import User
from repositories.base import FleetStore

logger = logging.getLogger(__name__)


class SqlFleetStore(FleetStore):
    """FleetStore backed by SQLAlchemy. Returned records are detached from their session."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.SessionLocal = create_session_factory(engine)

    def create_schema(self) -> None:
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables created/verified")

    def is_healthy(self) -> bool:
        return verify_db_connection(self.engine)

    def _get(self, model, key):
        with self.SessionLocal() as db:
            return db.get(model, key)

    def _all(self, statement) -> list:
        with self.SessionLocal() as db:
            return list(db.scalars(statement).all())

    def _add(self, record):
        with self.SessionLocal() as db:
            try:
                db.add(record)
                db.commit()
            except Exception as e:
                logger.error(f"Database error: {e}")
                db.rollback()
                raise
            return record

    def _merge(self, record):
        with self.SessionLocal() as db:
            try:
                merged = db.merge(record)
                db.commit()
            except Exception as e:
                logger.error(f"Database error: {e}")
                db.rollback()
                raise
            return merged

    def get_order(self, order_id: str) -> Optional[Order]:
        return self._get(Order, order_id)

    def list_orders(self, driver_id: Optional[str] = None, status: Optional[OrderStatus] = None) -> List[Order]:
        statement = select(Order)
        if driver_id is not None:
            statement = statement.where(Order.driver_id == driver_id)
        if status is not None:
            statement = statement.where(Order.status == status)
        return self._all(statement)

    def add_order(self, order: Order) -> Order:
        return self._add(order)

    def save_order(self, order: Order) -> Order:
        return self._merge(order)

    def count_orders(self) -> int:
        with self.SessionLocal() as db:
            return db.scalar(select(func.count()).select_from(Order))

    def get_driver(self, driver_id: str) -> Optional[Driver]:
        return self._get(Driver, driver_id)

    def list_drivers(self) -> List[Driver]:
        return self._all(select(Driver).order_by(Driver.id))

    def add_driver(self, driver: Driver) -> Driver:
        return self._add(driver)

    def save_driver(self, driver: Driver) -> Driver:
        return self._merge(driver)

    def add_alert(self, alert: SOSAlert) -> SOSAlert:
        return self._add(alert)

    def list_alerts(self) -> List[SOSAlert]:
        return self._all(select(SOSAlert))

    def get_complaint(self, complaint_id: str) -> Optional[Complaint]:
        return self._get(Complaint, complaint_id)

    def list_complaints(self, customer_id: Optional[str] = None) -> List[Complaint]:
        statement = select(Complaint)
        if customer_id is not None:
            statement = statement.where(Complaint.customer_id == customer_id)
        return self._all(statement)

    def add_complaint(self, complaint: Complaint) -> Complaint:
        return self._add(complaint)

    def save_complaint(self, complaint: Complaint) -> Complaint:
        return self._merge(complaint)

    def count_complaints(self) -> int:
        with self.SessionLocal() as db:
            return db.scalar(select(func.count()).select_from(Complaint))

    def get_user(self, user_id: str) -> Optional[User]:
        return self._get(User, user_id)

    def add_user(self, user: User) -> User:
        return self._add(user)
