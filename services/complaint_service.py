"""
Customer complaints log. Customers file complaints against their orders;
support moves them from Open through In Progress to Resolved.
"""
from datetime import datetime
from typing import Callable, List, Optional
import logging
import threading

from models.complaint import Complaint, ComplaintType, ComplaintStatus
from repositories.base import FleetStore
from services.errors import ComplaintNotFoundError, OrderNotFoundError

logger = logging.getLogger(__name__)

COMPLAINT_ID_PREFIX = "CMP-"


def complaint_number(complaint: Complaint) -> int:
    suffix = complaint.id.rsplit("-", 1)[-1]
    return int(suffix) if suffix.isdigit() else 0


class ComplaintService:

    def __init__(self, store: FleetStore, clock: Callable[[], datetime] = datetime.utcnow):
        self.store = store
        self.clock = clock
        self._lock = threading.Lock()

    def add_complaint(
        self,
        order_id: str,
        customer_id: str,
        customer_name: str,
        complaint_type: ComplaintType,
        description: str,
    ) -> Complaint:
        if self.store.get_order(order_id) is None:
            raise OrderNotFoundError(order_id)

        with self._lock:
            complaint = Complaint(
                id=f"{COMPLAINT_ID_PREFIX}{self.store.count_complaints() + 1:03d}",
                order_id=order_id,
                customer_id=customer_id,
                customer_name=customer_name,
                complaint_type=complaint_type,
                description=description,
                status=ComplaintStatus.OPEN,
                created_at=self.clock(),
                resolved_at=None,
            )
            complaint = self.store.add_complaint(complaint)

        logger.info(f"Complaint {complaint.id} ({complaint_type.value}) filed by {customer_id} on order {order_id}")
        return complaint

    def list_complaints(self, customer_id: Optional[str] = None) -> List[Complaint]:
        """Complaints, newest first, optionally for one customer"""
        complaints = self.store.list_complaints(customer_id=customer_id)
        return sorted(complaints, key=lambda c: (c.created_at, complaint_number(c)), reverse=True)

    def update_status(self, complaint_id: str, status: ComplaintStatus) -> Complaint:
        with self._lock:
            complaint = self.store.get_complaint(complaint_id)
            if complaint is None:
                raise ComplaintNotFoundError(complaint_id)

            old_status = complaint.status
            complaint.status = status
            complaint.resolved_at = self.clock() if status == ComplaintStatus.RESOLVED else None
            complaint = self.store.save_complaint(complaint)

        logger.info(f"Complaint {complaint.id} status {old_status.value} -> {status.value}")
        return complaint
