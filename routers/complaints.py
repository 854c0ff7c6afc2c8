from fastapi import APIRouter, Depends
from pydantic import BaseModel, validator, Field
from typing import List, Optional
from datetime import datetime
from models.complaint import ComplaintType, ComplaintStatus
from models.user import User
from services.complaint_service import ComplaintService
from utils.auth_dependency import get_current_user
from utils.dependencies import get_complaint_service
import re

router = APIRouter(prefix="/api/complaints", tags=["Complaints"])

class ComplaintCreate(BaseModel):
    order_id: str = Field(..., min_length=1, max_length=20)
    customer_id: str = Field(..., min_length=1, max_length=20)
    customer_name: str = Field(..., min_length=1, max_length=200)
    complaint_type: ComplaintType
    description: str = Field(..., min_length=10, max_length=2000)

    @validator('description')
    def validate_description(cls, v):
        v = v.strip()
        if re.search(r'<\s*script|<\s*iframe|javascript:', v, re.IGNORECASE):
            raise ValueError('Invalid characters in description')
        if len(v) < 10:
            raise ValueError('Description must be at least 10 characters')
        return v

class ComplaintStatusUpdate(BaseModel):
    status: ComplaintStatus

class ComplaintResponse(BaseModel):
    id: str
    order_id: str
    customer_id: str
    customer_name: str
    complaint_type: ComplaintType
    description: str
    status: ComplaintStatus
    created_at: datetime
    resolved_at: Optional[datetime]

    class Config:
        from_attributes = True

@router.get("/", response_model=List[ComplaintResponse])
def get_complaints(
    customer_id: Optional[str] = None,
    service: ComplaintService = Depends(get_complaint_service),
    current_user: User = Depends(get_current_user)
):
    """Complaints, newest first; customer_id narrows to one customer"""
    return service.list_complaints(customer_id=customer_id)

@router.post("/", response_model=ComplaintResponse, status_code=201)
def add_complaint(
    request: ComplaintCreate,
    service: ComplaintService = Depends(get_complaint_service),
    current_user: User = Depends(get_current_user)
):
    return service.add_complaint(
        order_id=request.order_id,
        customer_id=request.customer_id,
        customer_name=request.customer_name,
        complaint_type=request.complaint_type,
        description=request.description
    )

@router.put("/{complaint_id}/status", response_model=ComplaintResponse)
def update_complaint_status(
    complaint_id: str,
    request: ComplaintStatusUpdate,
    service: ComplaintService = Depends(get_complaint_service),
    current_user: User = Depends(get_current_user)
):
    return service.update_status(complaint_id, request.status)
