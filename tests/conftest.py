import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PAYSTACK_SECRET_KEY"] = "test-secret"
os.environ["REDIS_URL"] = "redis://localhost:6379/0"

from decimal import Decimal

import fakeredis
import pytest
from fastapi.testclient import TestClient

from storefront.api import deps
from storefront.celery_worker import celery_app
from storefront.data.database import Base, SessionLocal, engine, get_db
from storefront.data.models import ProductModel, SupermarketModel
from storefront.domain.schemas import Buyer
from storefront.main import app
from storefront.services.cart_store import CartStore
from storefront.services.lock_service import LockService
from storefront.services.payment_client import PaymentGatewayError

celery_app.conf.task_always_eager = True


class FakePaymentClient:
    def __init__(self):
        self.calls = []
        self.error = None

    def initialize_transaction(self, email, amount, reference):
        self.calls.append({"email": email, "amount": amount, "reference": reference})
        if self.error is not None:
            raise self.error
        return {
            "status": True,
            "message": "Authorization URL created",
            "data": {
                "authorization_url": f"https://checkout.paystack.com/{reference}",
                "reference": reference,
            },
        }

    def fail_with(self, status_code=400, body=None):
        self.error = PaymentGatewayError(status_code, body or {"status": False, "message": "Invalid key"})


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def send_payment_notification(self, order_id, status):
        self.sent.append((order_id, status))


@pytest.fixture
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def redis_client():
    return fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture
def cart_store(redis_client):
    return CartStore(client=redis_client)


@pytest.fixture
def lock_service(redis_client):
    return LockService(client=redis_client)


@pytest.fixture
def payment_client():
    return FakePaymentClient()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def buyer():
    return Buyer(id="user-1", email="buyer@example.com", role="user")


@pytest.fixture
def supermarket(db):
    market = SupermarketModel(id="s1", name="Washington Fresh")
    db.add(market)
    db.commit()
    return market


@pytest.fixture
def make_product(db, supermarket):
    def _make(product_id, price, stock, name=None, category=None):
        product = ProductModel(
            id=product_id,
            supermarket_id=supermarket.id,
            name=name or f"Product {product_id}",
            price=Decimal(str(price)),
            stock=stock,
            category=category,
        )
        db.add(product)
        db.commit()
        return product

    return _make


@pytest.fixture
def current(buyer):
    """Mutable holder for the signed-in buyer; set ["buyer"] to None to sign out."""
    return {"buyer": buyer}


@pytest.fixture
def client(db, cart_store, lock_service, payment_client, notifier, current):
    def override_db():
        yield db

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[deps.get_cart_store] = lambda: cart_store
    app.dependency_overrides[deps.get_lock_service] = lambda: lock_service
    app.dependency_overrides[deps.get_payment_client] = lambda: payment_client
    app.dependency_overrides[deps.get_notification_service] = lambda: notifier
    app.dependency_overrides[deps.get_optional_buyer] = lambda: current["buyer"]

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
