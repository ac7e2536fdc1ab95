import pytest
from fastapi.testclient import TestClient

from lost_found_api.app.core.config import Settings
from lost_found_api.app.main import create_app


@pytest.fixture
def settings():
    return Settings(database_url=":memory:", secret_key="test-secret", log_level="WARNING")


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(app, client):
    """The connected database of the running test app."""
    return app.state.db


@pytest.fixture
def register(client):
    """Register a user and return ``(token, user)``."""

    def _register(email, password="s3cret-pass", name=None, role=None):
        body = {"email": email, "password": password}
        if name is not None:
            body["name"] = name
        if role is not None:
            body["role"] = role
        response = client.post("/api/auth/register", json=body)
        assert response.status_code == 200, response.text
        data = response.json()
        return data["token"], data["user"]

    return _register


@pytest.fixture
def post_item(client):
    """Post an item with the given token and return the created item."""

    def _post_item(token, **fields):
        response = client.post("/api/items", json=fields, headers={"x-auth-token": token})
        assert response.status_code == 200, response.text
        return response.json()

    return _post_item


def auth(token):
    return {"x-auth-token": token}
