import pytest

from billsplit import create_app
from billsplit.config import TestConfig
from billsplit.extensions import STORE_KEY


@pytest.fixture
def app():
    return create_app(TestConfig)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    return app.extensions[STORE_KEY]


@pytest.fixture
def john(store):
    return store.users.get("1")


@pytest.fixture
def jane(store):
    return store.users.get("2")


@pytest.fixture
def guest(store):
    return store.users.get("3")


@pytest.fixture
def login(client):
    """Return a function giving Authorization headers for a demo account."""
    def _login(email="john@example.com", password="password123"):
        res = client.post("/api/v1/auth/login", json={"email": email, "password": password})
        assert res.status_code == 200, res.get_json()
        return {"Authorization": f"Bearer {res.get_json()['access_token']}"}
    return _login
