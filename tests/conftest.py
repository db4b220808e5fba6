"""
Shared test fixtures — SQLite test database, test client, auth helpers.
"""

import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Set JWT_SECRET before importing app modules
os.environ["JWT_SECRET"] = "test-secret-key-for-testing-only"
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["ENVIRONMENT"] = "test"

from construlab import models
from construlab.database import Base, get_db
from construlab.main import app


TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def db():
    """Direct database session for test setup/assertions."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


def register_user(client, email, password="strongpassword123", name="Test User"):
    """Register through the API. Returns the full response JSON."""
    response = client.post("/api/auth/register", json={
        "email": email,
        "password": password,
        "name": name,
    })
    assert response.status_code == 200, response.text
    return response.json()


def set_role(db, user_id, role, status):
    user = db.query(models.User).filter(models.User.id == user_id).first()
    user.role = role
    user.subscription_status = status
    db.commit()


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(client):
    """Register a free user and return auth headers."""
    data = register_user(client, "free@builder.pt")
    return bearer(data["access_token"])


@pytest.fixture
def pro_headers(client, db):
    """Register a user, promote to PRO (no expiry) and return auth headers."""
    data = register_user(client, "pro@builder.pt", name="Pro Builder")
    set_role(db, data["user_id"], "pro", "active")
    return bearer(data["access_token"])


@pytest.fixture
def admin_headers(client, db):
    """Register a user, promote to admin and return auth headers."""
    data = register_user(client, "admin@construlab.pro", name="Admin")
    set_role(db, data["user_id"], "admin", "active")
    return bearer(data["access_token"])
