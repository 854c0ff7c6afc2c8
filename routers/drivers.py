from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from typing import List
from models.driver import DriverStatus, VehicleType
from models.user import User
from repositories.base import FleetStore
from routers.orders import OrderResponse, QueueEntryResponse, order_to_response
from services.order_service import OrderService
from utils.auth_dependency import get_current_user
from utils.dependencies import get_order_service, get_store

router = APIRouter(prefix="/api/drivers", tags=["Drivers"])

class DriverResponse(BaseModel):
    id: str
    name: str
    phone: str
    vehicle_type: VehicleType
    status: DriverStatus

    class Config:
        from_attributes = True

@router.get("/", response_model=List[DriverResponse])
def get_drivers(store: FleetStore = Depends(get_store), current_user: User = Depends(get_current_user)):
    return store.list_drivers()

@router.get("/{driver_id}", response_model=DriverResponse)
def get_driver(driver_id: str, store: FleetStore = Depends(get_store), current_user: User = Depends(get_current_user)):
    driver = store.get_driver(driver_id)
    if not driver:
        raise HTTPException(status_code=404, detail="Driver not found")
    return driver

@router.get("/{driver_id}/queue", response_model=List[QueueEntryResponse])
def get_driver_queue(
    driver_id: str,
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(get_current_user)
):
    """
    Work queue for the driver app: the order in progress first, then
    returns, then pending orders. Entries the driver cannot start yet
    come back with actionable=false.
    """
    return [
        QueueEntryResponse(order=order_to_response(entry.order), actionable=entry.actionable)
        for entry in service.driver_queue(driver_id)
    ]

@router.get("/{driver_id}/history", response_model=List[OrderResponse])
def get_driver_history(
    driver_id: str,
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(get_current_user)
):
    return [order_to_response(o) for o in service.driver_history(driver_id)]
