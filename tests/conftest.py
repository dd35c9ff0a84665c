"""Pytest fixtures for mye_backend tests."""

import pytest
from fastapi.testclient import TestClient

from mye_backend.core.config import Settings
from mye_backend.db.base import Base
from mye_backend.db.seed import seed_defaults
from mye_backend.db.session import Database
from mye_backend.main import create_app
from mye_backend.models.product import Product, StockStatus
from mye_backend.services.notifications import Notifier


class RecordingNotifier(Notifier):
    """Collects status change events instead of sending them."""

    def __init__(self, fail: bool = False):
        self.events = []
        self.fail = fail

    def send_status_change(self, event):
        if self.fail:
            raise ConnectionError("smtp is down")
        self.events.append(event)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL="sqlite://",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        MAX_UPLOAD_SIZE=4096,
        DB_CONNECT_RETRIES=1,
        DB_CONNECT_DELAY=0,
        SECRET_KEY="test-secret",
        ENVIRONMENT="development",
        SMTP_HOST="",
    )


@pytest.fixture
def database(settings):
    """In-memory SQLite with the full schema and seeded catalogs."""
    db = Database(settings.DATABASE_URL)
    db.start()
    Base.metadata.create_all(db.engine)
    with db.session() as session:
        seed_defaults(session)
    yield db
    db.shutdown()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(settings, database, notifier):
    app = create_app(settings=settings, database=database, notifier=notifier)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_product(database):
    """Insert a product directly and return its id."""

    def _make(sku="MCB-16A", name="MCB 16A", quantity=5, price=100.0, brand="ABB", **extra):
        with database.session() as session:
            product = Product(
                name=name,
                sku=sku,
                brand=brand,
                original_price=price,
                current_price=price,
                stock_quantity=quantity,
                stock_status=StockStatus.in_stock,
                images=[],
                **extra,
            )
            session.add(product)
            session.commit()
            return product.id

    return _make


def checkout_payload(cart_items=None, email="ayse@example.com", **overrides):
    """A valid checkout body in the shape the storefront sends."""
    if cart_items is None:
        cart_items = [{"id": "1", "name": "MCB 16A", "price": 100.0, "quantity": 1}]
    payload = {
        "personalInfo": {
            "firstName": "Ayse",
            "lastName": "Yilmaz",
            "email": email,
            "phone": "+905551112233",
        },
        "deliveryAddress": {
            "address": "Ataturk Cad. No:1",
            "city": "Istanbul",
            "district": "Kadikoy",
            "postalCode": "34710",
        },
        "paymentInfo": {
            "cardNumber": "4111 1111 1111 1111",
            "cardName": "AYSE YILMAZ",
            "expiryDate": "12/29",
            "cvv": "123",
        },
        "cartItems": cart_items,
        "totalPrice": 300.0,
        "kdv": 60.0,
        "grandTotal": 360.0,
    }
    payload.update(overrides)
    return payload
