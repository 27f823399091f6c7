import os

# Point the application engine at an in-memory database before anything imports it
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from uuid import uuid4
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from storefront.database.core import Base, get_db
from storefront.database.models import Product, StoreInventory, Address, CartItem
from storefront.api.deps import get_catalog_cache
from storefront.auth.service import create_access_token
from storefront.services.cache import ReadThroughCache

# Use an in-memory SQLite database for testing
TEST_SQLALCHEMY_DATABASE_URL = "sqlite://"


class FakeClock:
    """Monotonic clock in seconds that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture(scope="function")
def db_session():
    """
    Creates a new, isolated in-memory database session for each test.
    """
    engine = create_engine(
        TEST_SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ReadThroughCache(clock=clock)


@pytest.fixture
def user_id():
    return str(uuid4())


@pytest.fixture
def make_product(db_session):
    def _make(name="Product", price=10.0, stock_value=10, user_visibility=True, **kwargs):
        product = Product(
            name=name,
            price=price,
            stock_value=stock_value,
            user_visibility=user_visibility,
            **kwargs
        )
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product
    return _make


@pytest.fixture
def add_cart_line(db_session, user_id):
    """Insert a cart row directly, bypassing the cart service."""
    def _add(product_id, quantity=1, owner=None):
        line = CartItem(user_id=owner or user_id, product_id=product_id, quantity=quantity)
        db_session.add(line)
        db_session.commit()
        return line
    return _add


@pytest.fixture
def address(db_session, user_id):
    address = Address(
        user_id=user_id,
        address_line="12 MG Road, Indiranagar",
        phone="9876543210",
        pincode="560038",
        delivery_instructions="Ring the bell twice",
        latitude=12.9716,
        longitude=77.6412,
        is_default=True,
    )
    db_session.add(address)
    db_session.commit()
    db_session.refresh(address)
    return address


@pytest.fixture
def inventory_row(db_session):
    def _link(product_id, store_id="store-1"):
        row = StoreInventory(store_id=store_id, product_id=product_id)
        db_session.add(row)
        db_session.commit()
        return row
    return _link


def stock_of(db, product_id):
    db.expire_all()
    return db.get(Product, product_id).stock_value


@pytest.fixture(scope="function")
def client(db_session, cache):
    """
    Creates a TestClient for the app, overriding the database and cache dependencies.
    """
    from main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_catalog_cache] = lambda: cache

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(user_id):
    token = create_access_token(user_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    token = create_access_token(str(uuid4()), role="admin")
    return {"Authorization": f"Bearer {token}"}
