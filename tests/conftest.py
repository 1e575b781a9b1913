import os
import uuid

# must be set before taskboard.config is imported
os.environ["DATABASE_URL"] = "sqlite:///./test_taskboard.db"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient

from taskboard.database import Base, SessionLocal, engine
from taskboard.main import app

PASSWORD = "Secret123!"


# Recreate all tables for each test
@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


def unique_email(prefix="user"):
    return f"{prefix}_{uuid.uuid4().hex[:8]}@example.com"


@pytest.fixture
def register_user(client):
    """Register a fresh user; returns (user json, auth headers)."""

    def _register(name="Test User", email=None, password=PASSWORD):
        r = client.post("/register", json={
            "name": name,
            "email": email or unique_email(),
            "password": password,
            "password_confirmation": password,
        })
        assert r.status_code == 201, r.text
        body = r.json()
        return body["user"], {"Authorization": f"Bearer {body['token']}"}

    return _register


@pytest.fixture
def auth(register_user):
    return register_user()[1]


@pytest.fixture
def other_auth(register_user):
    return register_user(name="Other User")[1]
