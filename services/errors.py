"""
Service-layer errors. Each carries the HTTP status the API answers with.
"""


class FleetError(Exception):
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(FleetError):
    status_code = 404


class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id: str):
        super().__init__("Order not found")
        self.order_id = order_id


class DriverNotFoundError(NotFoundError):
    def __init__(self, driver_id: str):
        super().__init__("Driver not found")
        self.driver_id = driver_id


class ActiveOrderConflictError(FleetError):
    status_code = 409

    def __init__(self, driver_id: str, active_order_id: str):
        super().__init__(
            f"Driver {driver_id} already has an active delivery (Order {active_order_id}). "
            "Complete it before starting a new one."
        )
        self.driver_id = driver_id
        self.active_order_id = active_order_id


class ProofValidationError(FleetError):
    status_code = 400


class AuthenticationError(FleetError):
    status_code = 401


class UpstreamServiceError(FleetError):
    status_code = 502


class ComplaintNotFoundError(NotFoundError):
    def __init__(self, complaint_id: str):
        super().__init__("Complaint not found")
        self.complaint_id = complaint_id
