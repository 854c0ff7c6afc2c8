from datetime import date, datetime, timedelta
import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import create_app
from models.order import Order, OrderStatus, PaymentType, ConfirmationMethod
from models.driver import Driver, DriverStatus, VehicleType
from repositories.memory import InMemoryFleetStore
from services.order_service import OrderService
from services.sos_service import AlertService

ADMIN_ID = "admin001"
ADMIN_KEY = "secret1"


class FrozenClock:
    """Deterministic stand-in for datetime.utcnow"""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def make_order(order_id: str, driver_id="DRV-1", status=OrderStatus.PENDING, **overrides) -> Order:
    fields = dict(
        id=order_id,
        driver_id=driver_id,
        items=["10 Cases of Nestlé Milo"],
        status=status,
        pickup_address="Accra",
        pickup_lat=5.6037,
        pickup_lng=-0.1870,
        destination_address="Kumasi",
        destination_lat=6.6886,
        destination_lng=-1.6244,
        recipient_name="Melcome Shop",
        recipient_phone="0244123456",
        payment_type=PaymentType.PREPAID,
        product_price=None,
        delivery_fee=500.0,
        confirmation_method=ConfirmationMethod.SIGNATURE,
        order_date=date(2024, 5, 1),
        requested_delivery_time=None,
        completed_at=None,
        return_reason=None,
        return_photo_url=None,
        proof_method=None,
        proof_payload=None,
    )
    fields.update(overrides)
    return Order(**fields)


def make_driver(driver_id="DRV-1", name="Kofi Mensah") -> Driver:
    return Driver(
        id=driver_id,
        name=name,
        phone="+233555111222",
        vehicle_type=VehicleType.CARGO_VAN,
        status=DriverStatus.AVAILABLE,
    )


@pytest.fixture
def clock():
    return FrozenClock(datetime(2024, 5, 20, 9, 0, 0))


@pytest.fixture
def store():
    return InMemoryFleetStore()


@pytest.fixture
def upload_dir(tmp_path):
    return str(tmp_path / "uploads")


@pytest.fixture
def order_service(store, clock, upload_dir):
    return OrderService(store, upload_dir=upload_dir, clock=clock)


@pytest.fixture
def alert_service(store, clock):
    return AlertService(store, clock=clock)


@pytest.fixture
def settings(upload_dir):
    return Settings(
        database_url="",
        upload_dir=upload_dir,
        seed_demo_data=True,
        admin_user_id=ADMIN_ID,
        admin_api_key=ADMIN_KEY,
        tally_url="http://tally.test:9000",
    )


@pytest.fixture
def app(settings):
    return create_app(settings, store=InMemoryFleetStore())


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def auth_client(client):
    response = client.post("/api/auth/login", json={"id": ADMIN_ID, "key": ADMIN_KEY})
    assert response.status_code == 200
    client.headers["Authorization"] = f"Bearer {response.json()['access_token']}"
    return client
