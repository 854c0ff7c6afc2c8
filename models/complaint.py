from sqlalchemy import Column, String, DateTime, Text, Enum as SQLEnum
from datetime import datetime
from database import Base
import enum

class ComplaintType(str, enum.Enum):
    LATENESS = "Lateness"
    DAMAGED_ITEM = "Damaged Item"
    DRIVER_CONDUCT = "Driver Conduct"
    BILLING_ISSUE = "Billing Issue"
    OTHER = "Other"

class ComplaintStatus(str, enum.Enum):
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"

class Complaint(Base):
    """Customer complaint about an order, handled by support"""
    __tablename__ = "complaints"

    id = Column(String(20), primary_key=True, index=True)
    order_id = Column(String(20), nullable=False, index=True)
    customer_id = Column(String(20), nullable=False, index=True)
    customer_name = Column(String(200), nullable=False)
    complaint_type = Column(SQLEnum(ComplaintType), nullable=False, default=ComplaintType.OTHER)
    description = Column(Text, nullable=False)
    status = Column(SQLEnum(ComplaintStatus), nullable=False, default=ComplaintStatus.OPEN, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    resolved_at = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<Complaint(id={self.id}, order_id={self.order_id}, status={self.status})>"
