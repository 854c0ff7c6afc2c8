from sqlalchemy import Column, String, DateTime, Text, Enum as SQLEnum
from datetime import datetime
from database import Base
import enum

class AlertSeverity(str, enum.Enum):
    CRITICAL = "critical"
    BLOCKAGE = "blockage"
    EXTERNAL_DELAY = "external-delay"
    CUSTOMER_ISSUE = "customer-issue"

class ProblemCode(str, enum.Enum):
    """Driver problem codes (TCAS taxonomy)"""
    ACCIDENT = "ACCIDENT"
    MEDICAL = "MEDICAL"
    THEFT = "THEFT"
    VEHICLE_BREAKDOWN = "VEHICLE_BREAKDOWN"
    ROAD_BLOCKED = "ROAD_BLOCKED"
    FLOODING = "FLOODING"
    CHECKPOINT = "CHECKPOINT"
    HEAVY_TRAFFIC = "HEAVY_TRAFFIC"
    FUEL_SHORTAGE = "FUEL_SHORTAGE"
    WEATHER = "WEATHER"
    RECIPIENT_UNAVAILABLE = "RECIPIENT_UNAVAILABLE"
    ADDRESS_NOT_FOUND = "ADDRESS_NOT_FOUND"
    PAYMENT_DISPUTE = "PAYMENT_DISPUTE"
    GOODS_REFUSED = "GOODS_REFUSED"
    OTHER = "OTHER"

PROBLEM_CODE_SEVERITY = {
    ProblemCode.ACCIDENT: AlertSeverity.CRITICAL,
    ProblemCode.MEDICAL: AlertSeverity.CRITICAL,
    ProblemCode.THEFT: AlertSeverity.CRITICAL,
    ProblemCode.VEHICLE_BREAKDOWN: AlertSeverity.CRITICAL,
    ProblemCode.ROAD_BLOCKED: AlertSeverity.BLOCKAGE,
    ProblemCode.FLOODING: AlertSeverity.BLOCKAGE,
    ProblemCode.CHECKPOINT: AlertSeverity.BLOCKAGE,
    ProblemCode.HEAVY_TRAFFIC: AlertSeverity.EXTERNAL_DELAY,
    ProblemCode.FUEL_SHORTAGE: AlertSeverity.EXTERNAL_DELAY,
    ProblemCode.WEATHER: AlertSeverity.EXTERNAL_DELAY,
    ProblemCode.RECIPIENT_UNAVAILABLE: AlertSeverity.CUSTOMER_ISSUE,
    ProblemCode.ADDRESS_NOT_FOUND: AlertSeverity.CUSTOMER_ISSUE,
    ProblemCode.PAYMENT_DISPUTE: AlertSeverity.CUSTOMER_ISSUE,
    ProblemCode.GOODS_REFUSED: AlertSeverity.CUSTOMER_ISSUE,
    ProblemCode.OTHER: AlertSeverity.EXTERNAL_DELAY,
}

class SOSAlert(Base):
    """Driver-submitted alert, append-only"""
    __tablename__ = "sos_alerts"

    id = Column(String(40), primary_key=True, index=True)
    driver_id = Column(String(20), nullable=False, index=True)
    driver_name = Column(String(100), nullable=False)
    message = Column(Text, nullable=False)
    problem_code = Column(SQLEnum(ProblemCode), nullable=False, default=ProblemCode.OTHER)
    location = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    @property
    def severity(self) -> AlertSeverity:
        return PROBLEM_CODE_SEVERITY[self.problem_code]
