"""
Demo data for the dashboards: four drivers and twenty orders around Ghana,
plus the admin account. Deterministic so the demo looks the same on every start.
"""
from datetime import datetime, timedelta
from typing import Callable, Optional
import logging
import os

from config import Settings
from models.order import Order, OrderStatus, PaymentType, ConfirmationMethod, ReturnReason
from models.driver import Driver, DriverStatus, VehicleType
from models.user import UserRole
from repositories.base import FleetStore
from services.auth_service import AuthService

logger = logging.getLogger(__name__)

GHANA_LOCATIONS = [
    ("Accra", 5.6037, -0.1870),
    ("Kumasi", 6.6886, -1.6244),
    ("Takoradi", 4.9048, -1.7553),
    ("Tamale", 9.4074, -0.8537),
    ("Tema", 5.6667, -0.0167),
    ("Cape Coast", 5.1054, -1.2466),
    ("Sunyani", 7.3333, -2.3333),
    ("Ho", 6.6119, 0.4713),
    ("Koforidua", 6.0881, -0.2597),
    ("Wa", 10.0577, -2.5020),
]

ITEM_BASES = [
    ("Nestlé Milo", "Cases"),
    ("Gino Tomato Mix", "Boxes"),
    ("Cowbell Milk Powder", "Sacks"),
    ("Frytol Cooking Oil", "Cartons"),
    ("Ideal Milk", "Pallets"),
    ("Indomie Noodles", "Boxes"),
    ("Omo Detergent", "Sacks"),
    ("Club Beer", "Cases"),
    ("Coca-Cola", "Crates"),
    ("Royal Aroma Rice", "Bags"),
]

RECIPIENT_NAMES = [
    "Shoprite Accra Mall", "Melcome Shop", "MaxMart - 37",
    "Palace Supermarket", "Koala Shopping Center", "CityDia - Tema",
    "Distributor - Koforidua", "Wholesale Supply - Takoradi", "Jumia Warehouse", "Local Market - Tamale",
]

DEMO_DRIVERS = [
    ("DRV-001", "Kofi Mensah", "+233555111222", VehicleType.CARGO_VAN, DriverStatus.AVAILABLE),
    ("DRV-002", "Abeiku Acquah", "+233555333444", VehicleType.MOTORBIKE, DriverStatus.AVAILABLE),
    ("DRV-003", "Esi Prah", "+233555555666", VehicleType.HEAVY_TRUCK, DriverStatus.ON_TRIP),
    ("DRV-004", "Yaw Asante", "+233555777888", VehicleType.CARGO_VAN, DriverStatus.AVAILABLE),
]

DEMO_ORDER_COUNT = 20
COMPLETED_CYCLE = [OrderStatus.DELIVERED, OrderStatus.RETURNING, OrderStatus.CANCELLED]
CONFIRMATION_CYCLE = [ConfirmationMethod.PHOTO, ConfirmationMethod.SIGNATURE, ConfirmationMethod.OTP]
PAYMENT_CYCLE = [PaymentType.PREPAID, PaymentType.PAY_ON_DELIVERY]

# Smallest well-formed JPEG (SOI + EOI); stands in for the photos of seeded returns
PLACEHOLDER_PHOTO = b"\xff\xd8\xff\xd9"


def _demo_items(i: int) -> list:
    count = 3 if i % 5 == 2 else 2 if i % 5 == 4 else 1
    items = []
    for k in range(count):
        product, unit = ITEM_BASES[(i + k * 3) % len(ITEM_BASES)]
        quantity = 5 + (i * 7 + k * 11) % 50
        items.append(f"{quantity} {unit} of {product}")
    return items


def _demo_status(i: int, driver_id: str) -> OrderStatus:
    if driver_id == "DRV-001":
        if i == 1:
            return OrderStatus.MOVING
        if 1 < i < 7:
            return OrderStatus.PENDING
        return COMPLETED_CYCLE[i % len(COMPLETED_CYCLE)]
    return OrderStatus.PENDING if i == 0 else OrderStatus.DELIVERED


def build_demo_order(i: int, now: datetime) -> Order:
    order_id = f"ORD-{101 + i}"
    driver_id = "DRV-002" if i % 4 == 0 else "DRV-001"
    status = _demo_status(i, driver_id)

    pickup = GHANA_LOCATIONS[i % len(GHANA_LOCATIONS)]
    destination = GHANA_LOCATIONS[(i * 3 + 1) % len(GHANA_LOCATIONS)]
    if destination == pickup:
        destination = GHANA_LOCATIONS[(i + 1) % len(GHANA_LOCATIONS)]

    payment_type = PAYMENT_CYCLE[i % len(PAYMENT_CYCLE)]
    terminal = status in (OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.RETURNING)
    returning = status == OrderStatus.RETURNING

    return Order(
        id=order_id,
        driver_id=driver_id,
        items=_demo_items(i),
        status=status,
        pickup_address=pickup[0],
        pickup_lat=pickup[1],
        pickup_lng=pickup[2],
        destination_address=destination[0],
        destination_lat=destination[1],
        destination_lng=destination[2],
        recipient_name=RECIPIENT_NAMES[i % len(RECIPIENT_NAMES)],
        recipient_phone=f"0{200000000 + (i * 7919) % 100000000}",
        payment_type=payment_type,
        product_price=float(50 + (i * 137) % 1000) if payment_type != PaymentType.PREPAID else None,
        delivery_fee=0.0 if destination[0] == "Kumasi" else 500.0,
        confirmation_method=CONFIRMATION_CYCLE[i % len(CONFIRMATION_CYCLE)],
        order_date=(now - timedelta(days=DEMO_ORDER_COUNT - i)).date(),
        requested_delivery_time=now + timedelta(hours=6 + (i % 3) * 24),
        completed_at=now - timedelta(days=i % 10) if terminal else None,
        return_reason=ReturnReason.CR.value if returning else None,
        return_photo_url=f"/uploads/returns/{order_id}-photo.jpg" if returning else None,
        proof_method=None,
        proof_payload=None,
    )


def _write_placeholder_photo(upload_dir: str, photo_url: str) -> None:
    path = os.path.join(upload_dir, "returns", os.path.basename(photo_url))
    if os.path.exists(path):
        return
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as buffer:
        buffer.write(PLACEHOLDER_PHOTO)


def seed_demo_data(
    store: FleetStore,
    clock: Callable[[], datetime] = datetime.utcnow,
    upload_dir: Optional[str] = None,
) -> None:
    if not store.is_empty():
        logger.info("Store already holds data, skipping demo seed")
        return

    for driver_id, name, phone, vehicle_type, status in DEMO_DRIVERS:
        store.add_driver(Driver(id=driver_id, name=name, phone=phone, vehicle_type=vehicle_type, status=status))

    now = clock()
    for i in range(DEMO_ORDER_COUNT):
        order = store.add_order(build_demo_order(i, now))
        if upload_dir and order.return_photo_url:
            _write_placeholder_photo(upload_dir, order.return_photo_url)

    logger.info(f"Seeded {len(DEMO_DRIVERS)} drivers and {DEMO_ORDER_COUNT} orders")


def ensure_admin_user(store: FleetStore, settings: Settings) -> None:
    """Create the admin account on first start"""
    if store.get_user(settings.admin_user_id):
        logger.info("Admin account already exists")
        return

    admin = AuthService.create_user(
        store,
        user_id=settings.admin_user_id,
        name="Admin",
        key=settings.admin_api_key,
        role=UserRole.ADMIN
    )
    logger.info(f"Admin account created: {admin.id}")
