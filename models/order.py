from sqlalchemy import Column, Float, String, DateTime, Date, Text, JSON, Enum as SQLEnum
from database import Base
import enum

class OrderStatus(str, enum.Enum):
    PENDING = "Pending"
    MOVING = "Moving"
    IDLE = "Idle"
    RETURNING = "Returning"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

# Older dashboards still send the warehouse wording for a moving order
STATUS_ALIASES = {
    "In Transit": OrderStatus.MOVING,
}

TERMINAL_STATUSES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.RETURNING}

# Closed orders shown in the warehouse history
ARCHIVED_STATUSES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}

# Sequencing rank for a driver's work queue
QUEUE_PRIORITY = {
    OrderStatus.MOVING: 0,
    OrderStatus.RETURNING: 1,
    OrderStatus.PENDING: 2,
}

class PaymentType(str, enum.Enum):
    PREPAID = "Prepaid"
    PAY_ON_DELIVERY = "Pay on Delivery"
    PAY_ON_CREDIT = "Pay on Credit"

class ConfirmationMethod(str, enum.Enum):
    SIGNATURE = "SIGNATURE"
    PHOTO = "PHOTO"
    OTP = "OTP"

class ReturnReason(str, enum.Enum):
    RD = "Recipient Damaged"
    IW = "Incorrect Item"
    IQ = "Incorrect Quantity"
    PF = "Payment Failed"
    CR = "Customer Refused"

class Order(Base):
    __tablename__ = "orders"

    id = Column(String(20), primary_key=True, index=True)
    driver_id = Column(String(20), nullable=True, index=True)
    items = Column(JSON, nullable=False, default=list)
    status = Column(SQLEnum(OrderStatus), nullable=False, default=OrderStatus.PENDING, index=True)

    pickup_address = Column(String(500), nullable=False)
    pickup_lat = Column(Float, nullable=False)
    pickup_lng = Column(Float, nullable=False)
    destination_address = Column(String(500), nullable=False)
    destination_lat = Column(Float, nullable=False)
    destination_lng = Column(Float, nullable=False)

    recipient_name = Column(String(200), nullable=False)
    recipient_phone = Column(String(20), nullable=False)

    payment_type = Column(SQLEnum(PaymentType), nullable=False, default=PaymentType.PREPAID)
    product_price = Column(Float, nullable=True)
    delivery_fee = Column(Float, nullable=False, default=0.0)
    confirmation_method = Column(SQLEnum(ConfirmationMethod), nullable=False, default=ConfirmationMethod.SIGNATURE)

    order_date = Column(Date, nullable=False)
    requested_delivery_time = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    return_reason = Column(String(200), nullable=True)
    return_photo_url = Column(String(500), nullable=True)

    # Last confirmation submitted by the driver
    proof_method = Column(SQLEnum(ConfirmationMethod), nullable=True)
    proof_payload = Column(Text, nullable=True)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def is_active(self) -> bool:
        """Counts toward the one-active-order-per-driver rule"""
        if self.status == OrderStatus.MOVING:
            return True
        return self.status == OrderStatus.RETURNING and not self.return_photo_url

    @property
    def amount_to_collect(self) -> float:
        if self.payment_type == PaymentType.PREPAID:
            return 0.0
        return (self.product_price or 0.0) + (self.delivery_fee or 0.0)

    def __repr__(self):
        return f"<Order(id={self.id}, driver_id={self.driver_id}, status={self.status})>"
