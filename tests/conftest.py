import os

# must be set before gifty reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["CHECKOUT_LOCK_ATTEMPTS"] = "5"
os.environ["JWT_SECRET"] = "test-secret"

from decimal import Decimal

import fakeredis
import pytest
from fastapi.testclient import TestClient

from gifty.api.deps import get_lock_service
from gifty.data.database import Base, SessionLocal, engine
from gifty.data.models import CartItemModel, CartModel, GiftBoxModel, ProductModel, UserModel
from gifty.main import app
from gifty.services.lock_service import LockService
from gifty.utils.security import create_access_token, hash_password


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def redis_client():
    return fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture
def lock_service(redis_client):
    return LockService(client=redis_client)


@pytest.fixture
def client(lock_service):
    app.dependency_overrides[get_lock_service] = lambda: lock_service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


class RecordingNotifications:
    def __init__(self):
        self.placed = []
        self.status_changes = []

    def send_order_notification(self, user_id, order_id):
        self.placed.append((user_id, order_id))

    def send_status_notification(self, user_id, order_id, status):
        self.status_changes.append((user_id, order_id, status))


@pytest.fixture
def notifications():
    return RecordingNotifications()


# --- factories, every one commits so HTTP requests can see the rows ---

def make_user(db, name="Alice", email="alice@example.com", role="customer", password="secret"):
    user = UserModel(name=name, email=email, password=hash_password(password), role=role)
    db.add(user)
    db.commit()
    return user


def make_product(db, name="Candle", price="10.00", is_active=True, stock=10, category="general"):
    product = ProductModel(
        name=name,
        description="",
        price=Decimal(price),
        image="",
        category=category,
        stock=stock,
        is_active=is_active,
    )
    db.add(product)
    db.commit()
    return product


def make_gift_box(db, name="Medium Box", base_price="3.00"):
    box = GiftBoxModel(name=name, theme="classic", max_items=5, base_price=Decimal(base_price))
    db.add(box)
    db.commit()
    return box


def make_cart(db, user, lines, gift_box=None):
    """lines: [(product, quantity)]"""
    cart = CartModel(
        user_id=user.id,
        gift_box_id=gift_box.id if gift_box else None,
        version=1,
        items=[CartItemModel(product_id=p.id, quantity=q) for p, q in lines],
    )
    db.add(cart)
    db.commit()
    # carts get deleted by other sessions on checkout and their ids reused
    db.expunge(cart)
    return cart


def auth_header(user):
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


DELIVERY = {"name": "Jane Doe", "phone": "555-0100", "city": "Springfield", "address": "1 Main St"}
