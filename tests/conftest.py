# tests/conftest.py
import os

# Settings are read once per process, so the environment must be set before
# anything under app/ is imported.
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PASSWORD_HASH_TIME_COST"] = "1"

import pytest
from fastapi.testclient import TestClient

from app.auth import get_token_codec
from app.database import Base, SessionLocal, engine
from app.main import app
from app.schemas.user import TokenData


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def codec():
    return get_token_codec()


@pytest.fixture()
def register(client):
    """Register a user and return ``(user_json, auth_headers)``."""
    def _register(username, role="employee", email=None, password="secret123"):
        resp = client.post("/api/auth/register", json={
            "username": username,
            "email": email or f"{username}@example.com",
            "password": password,
            "role": role,
        })
        assert resp.status_code == 201, resp.text
        body = resp.json()
        return body["user"], {"Authorization": f"Bearer {body['token']}"}
    return _register


@pytest.fixture()
def token_headers(codec):
    """Auth headers for arbitrary claims, bypassing registration."""
    def _headers(user_id=1, username="someone", role="admin"):
        token = codec.issue(TokenData(id=user_id, username=username, role=role))
        return {"Authorization": f"Bearer {token}"}
    return _headers
