"""Pytest configuration: in-memory SQLite, fake image store and notifier."""

import os

# must be set before warranty_hub.utils.settings is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-with-at-least-32-bytes!!"
os.environ.setdefault("NOTIFY_EMAIL", "desk@example.com")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from warranty_hub.api.deps import get_image_store, get_notification_service
from warranty_hub.data.database import Base, SessionLocal, engine
from warranty_hub.domain.schemas import ProductFields
from warranty_hub.main import app
from warranty_hub.services.auth_service import issue_token
from warranty_hub.services.category_service import CategoryService
from warranty_hub.services.image_store import ImageStore
from warranty_hub.services.product_service import ProductService

import warranty_hub.data.models  # noqa: F401


class FakeImageStore(ImageStore):
    """Trzyma pliki w pamięci, podpisany URL jest deterministyczny."""

    def __init__(self):
        super().__init__(bucket="test-bucket")
        self.objects = {}

    def put(self, data: bytes, content_type: str, filename: str) -> str:
        key = f"products/{len(self.objects) + 1}-{filename}"
        self.objects[key] = (data, content_type)
        return key

    def sign(self, key: str, ttl_seconds: int = 3600) -> str:
        return f"https://signed.test/{key}?ttl={ttl_seconds}"


class FakeNotifier:
    def __init__(self):
        self.sent = []

    def warranty_registered(self, **kwargs):
        self.sent.append(("warranty_registered", kwargs))

    def warranty_status_changed(self, **kwargs):
        self.sent.append(("warranty_status_changed", kwargs))

    def contact_received(self, **kwargs):
        self.sent.append(("contact_received", kwargs))


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
def image_store():
    return FakeImageStore()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def client(image_store, notifier):
    app.dependency_overrides[get_image_store] = lambda: image_store
    app.dependency_overrides[get_notification_service] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {issue_token(1, 'admin@example.com')}"}


@pytest.fixture
def category(db):
    return CategoryService(db).create_category("Laptops")


@pytest.fixture
def make_product(db, image_store, category):
    """Tworzy produkt przez ProductService; zwraca jego id."""

    def _make(name="ThinkPad X1", serials=None, quantity=None, images=None):
        fields = ProductFields(
            name=name,
            description="14 inch business laptop",
            price=Decimal("1999.99"),
            quantity=quantity,
            category_id=category.id,
        )
        return ProductService(db, image_store).create(fields, serials or [], images or [])

    return _make
