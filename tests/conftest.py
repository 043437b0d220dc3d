"""Pytest fixtures for storefront tests."""

import os

# przed importem storefront: baza w pamieci, broker bez redisa
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.data.database import Base
from storefront.data.models import (
    CategoryModel,
    HeroSlideModel,
    OrderItemModel,
    OrderModel,
    ProductModel,
)
from storefront.domain.schemas import CartLine, ShippingInfo
from storefront.services.cart_store import CartStore, MemoryCartStorage


class FakeLockService:
    """Lock w pamieci z tym samym API co LockService."""

    def __init__(self):
        self.held = {}
        self.released = []

    @staticmethod
    def new_token():
        return "token"

    def acquire_checkout_lock(self, session_id, token, ttl):
        if session_id in self.held:
            return False
        self.held[session_id] = token
        return True

    def release_checkout_lock(self, session_id, token):
        self.released.append(session_id)
        if self.held.get(session_id) == token:
            del self.held[session_id]
            return True
        return False


class FakeNotificationService:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    def send_order_confirmation(self, order, customer_email):
        if self.fail:
            raise ConnectionError("broker unavailable")
        self.sent.append((order, customer_email))


class FakeMailer:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    def send_order_confirmation(self, order, customer_email):
        if self.fail:
            raise OSError("connection refused")
        self.sent.append((order, customer_email))
        return "<message-1@storefront>"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def cart_store():
    return CartStore(MemoryCartStorage())


@pytest.fixture
def lock_service():
    return FakeLockService()


@pytest.fixture
def notifications():
    return FakeNotificationService()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def catalog(db):
    """Dwie kategorie i trzy produkty (jeden ukryty)."""
    rings = CategoryModel(name="Rings", image_url="/img/rings.jpg")
    necklaces = CategoryModel(name="Necklaces", image_url="/img/necklaces.jpg")
    db.add_all([rings, necklaces])
    db.flush()

    ring = ProductModel(
        name="Silver ring",
        description="Sterling silver",
        sku="RNG-001",
        price=Decimal("100.00"),
        sale_price=Decimal("80.00"),
        colors=[
            {"name": "red", "image_url": "/img/ring-red.jpg"},
            {"name": "gold", "image_url": "/img/ring-gold.jpg"},
        ],
        sizes=["S", "M", "L"],
        categories=[rings.id],
        quantity=10,
        rating=4.9,
        is_top_seller=True,
    )
    necklace = ProductModel(
        name="Pearl necklace",
        description="Pearls",
        sku="NCK-001",
        price=Decimal("150.00"),
        colors=[{"name": "white", "image_url": "/img/pearl.jpg"}],
        sizes=[],
        categories=[necklaces.id, rings.id],
        quantity=3,
        rating=4.1,
    )
    hidden = ProductModel(
        name="Hidden bracelet",
        description="Not for sale",
        price=Decimal("40.00"),
        colors=[{"name": "black", "image_url": "/img/bracelet.jpg"}],
        sizes=[],
        categories=[rings.id],
        quantity=1,
        is_visible=False,
    )
    db.add_all([ring, necklace, hidden])
    db.add(HeroSlideModel(title="Second", description="", image_url="/img/h2.jpg", position=2))
    db.add(HeroSlideModel(title="First", description="", image_url="/img/h1.jpg", position=1))
    db.commit()

    return {"rings": rings, "necklaces": necklaces, "ring": ring, "necklace": necklace, "hidden": hidden}


@pytest.fixture
def shipping():
    return ShippingInfo(
        full_name="Layla Haddad",
        email="layla@example.com",
        address="12 Olive St, Haifa",
        phone="0501234567",
    )


def make_line(**overrides):
    data = {
        "product_id": "p1",
        "name": "Silver ring",
        "price": Decimal("100"),
        "sale_price": Decimal("80"),
        "color": "red",
        "color_image_url": "/img/ring-red.jpg",
        "size": "M",
        "quantity": 2,
    }
    data.update(overrides)
    return CartLine(**data)


def make_order(db, **overrides):
    """Zamowienie wpisane bezposrednio do bazy (panel admina, sledzenie)."""
    created_at = overrides.pop("created_at", datetime.now(timezone.utc))
    data = {
        "full_name": "Layla Haddad",
        "email": "layla@example.com",
        "shipping_address": "12 Olive St",
        "phone_number": "0501234567",
        "payment_method": "Cash on Delivery",
        "subtotal": Decimal("160.00"),
        "delivery_fee": Decimal("20.00"),
        "discount": Decimal("16.00"),
        "total": Decimal("164.00"),
        "status": "pending",
        "expected_arrival": (created_at + timedelta(days=7)).date().isoformat(),
        "tracking_number": "TK-ABCDEFGH",
    }
    data.update(overrides)
    order = OrderModel(
        created_at=created_at,
        items=[OrderItemModel(product_id="p1", name="Silver ring", price=Decimal("80.00"), quantity=2, color="red", size="M")],
        **data,
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    return order


@pytest.fixture
def client(session_factory, cart_store, lock_service, notifications, mailer):
    """TestClient z podmienionymi zaleznosciami (sqlite, koszyk w pamieci, fake lock/mail)."""
    from storefront.api import deps
    from storefront.data.database import get_db
    from storefront.main import app

    def override_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[deps.get_cart_store] = lambda: cart_store
    app.dependency_overrides[deps.get_lock_service] = lambda: lock_service
    app.dependency_overrides[deps.get_notification_service] = lambda: notifications
    app.dependency_overrides[deps.get_mailer] = lambda: mailer

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
