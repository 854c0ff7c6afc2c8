from fastapi import APIRouter, Depends
from pydantic import BaseModel, validator, Field
from typing import Dict, List, Optional
from datetime import datetime
from models.sos_alert import ProblemCode, AlertSeverity
from models.user import User
from services.sos_service import AlertService
from utils.auth_dependency import get_current_user
from utils.dependencies import get_alert_service
import re

router = APIRouter(prefix="/api/sos", tags=["SOS"])

class SOSCreate(BaseModel):
    driver_id: str = Field(..., min_length=1, max_length=20)
    driver_name: Optional[str] = Field(None, max_length=100)
    message: Optional[str] = Field(None, max_length=2000)
    problem_code: Optional[ProblemCode] = None
    location: Optional[str] = Field(None, max_length=500)

    @validator('message')
    def validate_message(cls, v):
        if v is not None:
            v = v.strip()
            if re.search(r'<\s*script|<\s*iframe|javascript:', v, re.IGNORECASE):
                raise ValueError('Invalid characters in message')
        return v or None

class SOSResponse(BaseModel):
    id: str
    driver_id: str
    driver_name: str
    message: str
    problem_code: ProblemCode
    severity: AlertSeverity
    location: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True

@router.get("/", response_model=List[SOSResponse])
def get_sos_alerts(
    severity: Optional[AlertSeverity] = None,
    service: AlertService = Depends(get_alert_service),
    current_user: User = Depends(get_current_user)
):
    """All SOS alerts, newest first"""
    return service.list_alerts(severity=severity)

@router.post("/", response_model=SOSResponse, status_code=201)
def send_sos(
    request: SOSCreate,
    service: AlertService = Depends(get_alert_service),
    current_user: User = Depends(get_current_user)
):
    return service.send_sos(
        driver_id=request.driver_id,
        message=request.message,
        problem_code=request.problem_code,
        location=request.location,
        driver_name=request.driver_name
    )

@router.get("/problem-codes", response_model=Dict[str, List[str]])
def get_problem_codes(current_user: User = Depends(get_current_user)):
    return AlertService.problem_codes()
