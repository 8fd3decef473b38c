"""
Pytest fixtures for the storefront tests.
Provides an in-memory database per test, a session, factories and an API client.
"""
import os
import uuid
from decimal import Decimal

# Set required environment variables before importing app modules
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from storefront.database import create_db_and_tables, get_session
from storefront.models.product import Product
from storefront.models.user import User
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.services.cart_service import CartService
from storefront.services.product_service import ProductService
from storefront.services.profile_service import ProfileService

TEST_SECRET = os.environ["JWT_SECRET"]


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database, shared by every session of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def cart_repo():
    return CartRepository()


@pytest.fixture
def cart_service(cart_repo):
    return CartService(cart_repo, ProductRepository(), max_attempts=3)


@pytest.fixture
def product_service():
    return ProductService(ProductRepository(), default_page_size=10, max_page_size=50)


@pytest.fixture
def profile_service():
    return ProfileService()


@pytest.fixture
def make_product(session):
    """Factory inserting a product; keyword arguments override the defaults."""

    def _make(**overrides) -> Product:
        data = dict(
            name="Wireless Mouse",
            description="Ergonomic mouse with USB receiver",
            price=Decimal("20.00"),
            category="electronics",
            brand="Logi",
            stock=10,
        )
        data.update(overrides)
        product = Product(**data)
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make


@pytest.fixture
def make_user(session):
    def _make(role: str = "user", email: str | None = None) -> User:
        user_id = uuid.uuid4()
        user = User(
            id=user_id,
            email=email or f"{user_id.hex[:8]}@example.com",
            name="tester",
            role=role,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def user(make_user):
    return make_user()


def _encode_token(user_id: uuid.UUID, email: str) -> str:
    return jwt.encode(
        {"sub": str(user_id), "email": email},
        TEST_SECRET,
        algorithm="HS256",
    )


@pytest.fixture
def make_token():
    """Sign a token the way the identity provider would."""
    return _encode_token


@pytest.fixture
def auth_header():
    def _header(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {_encode_token(user.id, user.email)}"}

    return _header


@pytest.fixture
def client(engine):
    """API client whose requests use the test database."""
    from storefront.main import app

    def _get_test_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_test_session
    yield TestClient(app)
    app.dependency_overrides.clear()
