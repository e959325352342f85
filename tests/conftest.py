"""Pytest configuration and fixtures"""
import os

# Test environment, must be set before cartkeeper.utils.settings is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["JWT_ALGORITHM"] = "HS256"
os.environ["PRODUCT_SERVICE_URL"] = "http://products.test"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"

from decimal import Decimal

import jwt
import pytest

import cartkeeper.data.models  # noqa: F401
from cartkeeper.data.database import Base, SessionLocal, engine
from cartkeeper.domain.schemas import ProductInfo
from cartkeeper.services.cart_service import CartService


class FakeCatalog:
    """In-memory stand-in for the product service."""

    def __init__(self):
        self.products = {}

    def put(self, product_id, price, stock=10, is_available=True, name=None, image=None):
        self.products[product_id] = ProductInfo(
            id=product_id,
            name=name or f"Product {product_id}",
            price=Decimal(str(price)),
            stock=stock,
            is_available=is_available,
            image=image,
        )

    def get_by_id(self, product_id):
        return self.products.get(product_id)

    def get_for_display(self, product_id):
        return self.get_by_id(product_id)


def _encode_token(account_id, secret="test-secret", **claims):
    return jwt.encode({"sub": str(account_id), **claims}, secret, algorithm="HS256")


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def catalog():
    c = FakeCatalog()
    c.put(1, "10.00", stock=5, name="Keyboard", image="/img/keyboard.jpg")
    c.put(2, "25.50", stock=100, name="Mouse")
    c.put(3, "99.99", stock=0, is_available=False, name="Webcam")
    return c


@pytest.fixture
def service(db, catalog):
    return CartService(db=db, product_client=catalog)


@pytest.fixture
def make_token():
    """Bearer token factory, as the login flow would issue it."""
    return _encode_token
