"""Shared fixtures: in-memory SQLite database and a fake object store."""

import os

# Must be set before product_service.db builds its engine
os.environ["DATABASE_URL"] = "sqlite://"

from collections.abc import Callable, Generator
from decimal import Decimal
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from product_service import commands
from product_service.db import Base, SessionLocal, engine
from product_service.deps import get_object_store
from product_service.main import app
from product_service.models import Product
from product_service.schemas import ProductCreate
from product_service.storage import ObjectStore


class FakeObjectStore(ObjectStore):
    """Keeps uploads in memory instead of talking to S3."""

    def __init__(self, bucket: str = "test-bucket", error: Exception | None = None):
        super().__init__(client=None, bucket=bucket, public_url=f"https://{bucket}.s3.amazonaws.com")
        self.objects: dict[tuple[str, str], tuple[bytes, str]] = {}
        self.error = error

    def put(self, bucket: str, key: str, body: bytes, content_type: str) -> str:
        if self.error is not None:
            raise self.error
        self.objects[(bucket, key)] = (body, content_type)
        return "etag"


@pytest.fixture(autouse=True)
def reset_db() -> Generator[None, None, None]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db() -> Generator[Session, None, None]:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def client(store: FakeObjectStore) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_object_store] = lambda: store
    # Schema is managed by reset_db, so the app lifespan is not entered here
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_product(db: Session) -> Callable[..., Product]:
    """Create a product through the command layer with sensible defaults."""

    def _make(**overrides: Any) -> Product:
        fields = {"name": "Widget", "price": Decimal("9.99"), "category": "tools"}
        fields.update(overrides)
        return commands.create_product(db, ProductCreate(**fields))

    return _make


def naive(dt):
    """SQLite hands back naive datetimes; compare everything in naive UTC."""
    return dt.replace(tzinfo=None) if dt is not None else None
