"""
Request-scoped accessors for the objects built in create_app
"""
from fastapi import Request
from config import Settings
from repositories.base import FleetStore
from services.complaint_service import ComplaintService
from services.order_service import OrderService
from services.sos_service import AlertService
from services.tally_service import TallyClient

def get_store(request: Request) -> FleetStore:
    return request.app.state.store

def get_order_service(request: Request) -> OrderService:
    return request.app.state.order_service

def get_alert_service(request: Request) -> AlertService:
    return request.app.state.alert_service

def get_tally_client(request: Request) -> TallyClient:
    return request.app.state.tally_client

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_complaint_service(request: Request) -> ComplaintService:
    return request.app.state.complaint_service
