from datetime import datetime
from typing import Callable, List, Optional
import logging
import threading
import time

from models.sos_alert import SOSAlert, ProblemCode, AlertSeverity, PROBLEM_CODE_SEVERITY
from repositories.base import FleetStore

logger = logging.getLogger(__name__)

DEFAULT_SOS_MESSAGE = "Requesting immediate assistance!"
UNKNOWN_DRIVER_NAME = "Unknown driver"


def alert_sequence(alert: SOSAlert) -> int:
    suffix = alert.id.rsplit("-", 1)[-1]
    return int(suffix) if suffix.isdigit() else 0


class AlertService:
    """Append-only log of driver SOS alerts"""

    def __init__(self, store: FleetStore, clock: Callable[[], datetime] = datetime.utcnow):
        self.store = store
        self.clock = clock
        self._lock = threading.Lock()
        self._last_id_ms = 0

    def _next_alert_id(self) -> str:
        # Millisecond timestamp, bumped so two alerts in the same tick stay distinct
        now_ms = int(time.time() * 1000)
        self._last_id_ms = max(now_ms, self._last_id_ms + 1)
        return f"SOS-{self._last_id_ms}"

    def send_sos(
        self,
        driver_id: str,
        message: Optional[str] = None,
        problem_code: Optional[ProblemCode] = None,
        location: Optional[str] = None,
        driver_name: Optional[str] = None,
    ) -> SOSAlert:
        if not driver_name:
            driver = self.store.get_driver(driver_id)
            driver_name = driver.name if driver else UNKNOWN_DRIVER_NAME

        with self._lock:
            alert = SOSAlert(
                id=self._next_alert_id(),
                driver_id=driver_id,
                driver_name=driver_name,
                message=message or DEFAULT_SOS_MESSAGE,
                problem_code=problem_code or ProblemCode.OTHER,
                location=location,
                created_at=self.clock(),
            )
            alert = self.store.add_alert(alert)

        level = logging.CRITICAL if alert.severity == AlertSeverity.CRITICAL else logging.WARNING
        logger.log(
            level,
            f"SOS {alert.id} from driver {alert.driver_id} [{alert.problem_code.value}/{alert.severity.value}]: "
            f"{alert.message} @ {alert.location or 'unknown location'}"
        )
        return alert

    def list_alerts(self, severity: Optional[AlertSeverity] = None) -> List[SOSAlert]:
        """All alerts, newest first"""
        alerts = self.store.list_alerts()
        if severity is not None:
            alerts = [a for a in alerts if PROBLEM_CODE_SEVERITY[a.problem_code] == severity]
        return sorted(alerts, key=lambda a: (a.created_at, alert_sequence(a)), reverse=True)

    @staticmethod
    def problem_codes() -> dict:
        """Problem codes grouped by severity"""
        grouped = {severity.value: [] for severity in AlertSeverity}
        for code, severity in PROBLEM_CODE_SEVERITY.items():
            grouped[severity.value].append(code.value)
        return grouped
