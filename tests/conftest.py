import os
import uuid
from datetime import datetime, timedelta, timezone

# Settings are read at import time; point them at throwaway values first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from storefront.database import get_session
from storefront.main import app
from storefront.models.product import Product

HOSTED_IMAGE_URL = (
    "https://proj.supabase.co/storage/v1/object/public/products/products/img.png"
)


@pytest.fixture(scope="function")
def db_session():
    """
    Creates a new, isolated in-memory database session for each test.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def storage(mocker):
    """
    Replaces object storage calls made by the catalog service.
    """
    upload = mocker.patch(
        "storefront.services.product_service.upload_to_storage",
        return_value=HOSTED_IMAGE_URL,
    )
    delete = mocker.patch("storefront.services.product_service.delete_public_url")
    return {"upload": upload, "delete": delete}


@pytest.fixture(scope="function")
def client(db_session, storage):
    """
    TestClient bound to the per-test database.
    """

    def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def register(client, email, password="secret123", name="Test User", is_admin=False):
    response = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password, "isAdmin": is_admin},
    )
    assert response.status_code == 201, response.text
    return response.json()


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def user_headers(client):
    return bearer(register(client, "alice@example.com", name="Alice")["token"])


@pytest.fixture(scope="function")
def other_headers(client):
    return bearer(register(client, "bob@example.com", name="Bob")["token"])


@pytest.fixture(scope="function")
def admin_headers(client):
    return bearer(
        register(client, "admin@example.com", name="Admin", is_admin=True)["token"]
    )


@pytest.fixture(scope="function")
def make_product(db_session):
    """
    Inserts a product directly; keyword arguments override defaults.
    """
    created = []

    def _make(**overrides):
        base = datetime.now(timezone.utc)
        fields = {
            "name": "Silver Ring",
            "description": "Sterling silver band",
            "price": 100.0,
            "category": "rings",
            "image_url": HOSTED_IMAGE_URL,
            "created_by": uuid.uuid4(),
            "created_at": base + timedelta(seconds=len(created)),
        }
        fields.update(overrides)
        product = Product(**fields)
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        created.append(product)
        return product

    return _make
