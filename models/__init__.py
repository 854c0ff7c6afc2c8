from models.order import Order, OrderStatus, PaymentType, ConfirmationMethod, ReturnReason
from models.driver import Driver, DriverStatus, VehicleType
from models.sos_alert import SOSAlert, ProblemCode, AlertSeverity
from models.user import User, UserRole
from models.complaint import Complaint, ComplaintType, ComplaintStatus

__all__ = ["Order", "OrderStatus", "PaymentType", "ConfirmationMethod", "ReturnReason", "Driver", "DriverStatus", "VehicleType", "SOSAlert", "ProblemCode", "AlertSeverity", "User", "UserRole", "Complaint", "ComplaintType", "ComplaintStatus"]
