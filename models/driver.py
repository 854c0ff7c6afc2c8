from sqlalchemy import Column, String, Enum as SQLEnum
from database import Base
import enum

class VehicleType(str, enum.Enum):
    MOTORBIKE = "Motorbike"
    CARGO_VAN = "Standard Cargo Van"
    HEAVY_TRUCK = "Heavy Duty Truck"

class DriverStatus(str, enum.Enum):
    AVAILABLE = "Available"
    ON_TRIP = "On-trip"
    OFFLINE = "Offline"

class Driver(Base):
    __tablename__ = "drivers"

    id = Column(String(20), primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=False)
    vehicle_type = Column(SQLEnum(VehicleType), nullable=False)
    status = Column(SQLEnum(DriverStatus), nullable=False, default=DriverStatus.AVAILABLE)

    def __repr__(self):
        return f"<Driver(id={self.id}, name={self.name}, status={self.status})>"
