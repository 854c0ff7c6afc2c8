from fastapi import APIRouter, Depends
from pydantic import BaseModel, validator, Field
from typing import List, Optional
from datetime import date, datetime
from models.order import Order, OrderStatus, PaymentType, ConfirmationMethod, STATUS_ALIASES
from models.user import User
from services.order_service import OrderService
from utils.auth_dependency import get_current_user
from utils.dependencies import get_order_service
import logging
import re

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders", tags=["Orders"])

def normalize_status(value):
    """Map legacy status wording onto OrderStatus"""
    if isinstance(value, str) and value in STATUS_ALIASES:
        logger.warning(f"Status alias '{value}' used; treating it as '{STATUS_ALIASES[value].value}'")
        return STATUS_ALIASES[value]
    return value

class Location(BaseModel):
    address: str = Field(..., min_length=1, max_length=500)
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)

    @validator('address')
    def validate_address(cls, v):
        v = ' '.join(v.split())
        if not v:
            raise ValueError('Address cannot be blank')
        if re.search(r'<\s*script|<\s*iframe|javascript:', v, re.IGNORECASE):
            raise ValueError('Invalid characters in address')
        return v

class OrderCreate(BaseModel):
    items: List[str] = Field(..., min_length=1)
    pickup: Location
    destination: Location
    recipient_name: str = Field(..., min_length=2, max_length=200)
    recipient_phone: str = Field(..., min_length=7, max_length=20)
    payment_type: PaymentType = PaymentType.PREPAID
    product_price: Optional[float] = Field(None, ge=0)
    delivery_fee: float = Field(0.0, ge=0)
    confirmation_method: ConfirmationMethod = ConfirmationMethod.SIGNATURE
    requested_delivery_time: Optional[datetime] = None
    driver_id: Optional[str] = None

    @validator('recipient_phone')
    def validate_phone(cls, v):
        v = v.strip()
        if not re.match(r'^\+?[0-9 ]{7,20}$', v):
            raise ValueError('Invalid phone number format')
        return v

    @validator('items')
    def validate_items(cls, v):
        items = [' '.join(item.split()) for item in v]
        if any(not item for item in items):
            raise ValueError('Order items cannot be blank')
        return items

class StatusUpdate(BaseModel):
    status: OrderStatus
    return_reason: Optional[str] = Field(None, max_length=200)

    @validator('status', pre=True)
    def accept_aliases(cls, v):
        return normalize_status(v)

class AssignDriverRequest(BaseModel):
    driver_id: str = Field(..., min_length=1)

class ConfirmationRequest(BaseModel):
    method: ConfirmationMethod
    payload: str = Field(..., min_length=1, description="Signature data, OTP, or base64 photo")

class OrderResponse(BaseModel):
    id: str
    driver_id: Optional[str]
    items: List[str]
    status: OrderStatus
    pickup: Location
    destination: Location
    recipient_name: str
    recipient_phone: str
    payment_type: PaymentType
    product_price: Optional[float]
    delivery_fee: float
    amount_to_collect: float
    confirmation_method: ConfirmationMethod
    order_date: date
    requested_delivery_time: Optional[datetime]
    completed_at: Optional[datetime]
    return_reason: Optional[str]
    return_photo_url: Optional[str]
    proof_method: Optional[ConfirmationMethod]

class QueueEntryResponse(BaseModel):
    order: OrderResponse
    actionable: bool

def order_to_response(order: Order) -> OrderResponse:
    return OrderResponse(
        id=order.id,
        driver_id=order.driver_id,
        items=list(order.items or []),
        status=order.status,
        pickup=Location(address=order.pickup_address, lat=order.pickup_lat, lng=order.pickup_lng),
        destination=Location(address=order.destination_address, lat=order.destination_lat, lng=order.destination_lng),
        recipient_name=order.recipient_name,
        recipient_phone=order.recipient_phone,
        payment_type=order.payment_type,
        product_price=order.product_price,
        delivery_fee=order.delivery_fee or 0.0,
        amount_to_collect=order.amount_to_collect,
        confirmation_method=order.confirmation_method,
        order_date=order.order_date,
        requested_delivery_time=order.requested_delivery_time,
        completed_at=order.completed_at,
        return_reason=order.return_reason,
        return_photo_url=order.return_photo_url,
        proof_method=order.proof_method
    )

@router.get("/", response_model=List[OrderResponse])
def get_orders(
    driver_id: Optional[str] = None,
    status: Optional[OrderStatus] = None,
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(get_current_user)
):
    """List orders, newest first, optionally filtered by driver and status"""
    return [order_to_response(o) for o in service.list_orders(driver_id=driver_id, status=status)]

@router.post("/", response_model=OrderResponse, status_code=201)
def create_order(
    request: OrderCreate,
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(get_current_user)
):
    order = Order(
        driver_id=request.driver_id,
        items=request.items,
        pickup_address=request.pickup.address,
        pickup_lat=request.pickup.lat,
        pickup_lng=request.pickup.lng,
        destination_address=request.destination.address,
        destination_lat=request.destination.lat,
        destination_lng=request.destination.lng,
        recipient_name=request.recipient_name,
        recipient_phone=request.recipient_phone,
        payment_type=request.payment_type,
        product_price=request.product_price,
        delivery_fee=request.delivery_fee,
        confirmation_method=request.confirmation_method,
        requested_delivery_time=request.requested_delivery_time
    )
    return order_to_response(service.create_order(order))

@router.get("/archived", response_model=List[OrderResponse])
def get_archived_orders(
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(get_current_user)
):
    return [order_to_response(o) for o in service.archived_orders()]

@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: str,
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(get_current_user)
):
    return order_to_response(service.get_order(order_id))

@router.put("/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: str,
    request: StatusUpdate,
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(get_current_user)
):
    """
    Set an order's status. Delivered, Cancelled and Returning stamp the
    completion time; Returning also records the return reason.
    """
    order = service.update_status(order_id, request.status, return_reason=request.return_reason)
    return order_to_response(order)

@router.post("/{order_id}/assign", response_model=OrderResponse)
def assign_driver(
    order_id: str,
    request: AssignDriverRequest,
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(get_current_user)
):
    return order_to_response(service.assign_driver(order_id, request.driver_id))

@router.post("/{order_id}/confirm", response_model=OrderResponse)
def confirm_delivery(
    order_id: str,
    request: ConfirmationRequest,
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(get_current_user)
):
    """
    Record delivery proof. PHOTO documents a return and keeps the status;
    SIGNATURE and OTP complete the delivery.
    """
    order = service.confirm_delivery(order_id, request.payload, request.method)
    return order_to_response(order)
