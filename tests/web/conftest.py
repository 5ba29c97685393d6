"""Web test fixtures: TestClient over a shared in-memory SQLite database."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.pool import StaticPool

from tests.conftest import create_schema


def _make_test_engine():
    """Create a fresh in-memory SQLite engine with shared connection pool."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    with engine.connect() as conn:
        create_schema(conn)

    return engine


def register_user(client, name="Asha Rao", email="asha@example.com", password="secret1") -> str:
    """Register through the API and return the bearer token."""
    response = client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["token"]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(autouse=True)
def web_test_db(monkeypatch):
    """Set up in-memory DB and patch the web app to use it."""
    engine = _make_test_engine()

    import web.deps as deps_module

    monkeypatch.setattr(deps_module, "get_engine", lambda: engine)

    import web.app as app_module

    monkeypatch.setattr(app_module, "initialize_db", lambda: None)

    yield engine

    engine.dispose()


@pytest.fixture(autouse=True)
def reset_rate_limits():
    import web.auth as auth_module

    auth_module._login_attempts.clear()
    auth_module._otp_attempts.clear()
    yield
    auth_module._login_attempts.clear()
    auth_module._otp_attempts.clear()


@pytest.fixture()
def mock_mailer(monkeypatch) -> MagicMock:
    """Replace the Brevo mailer; sent codes are readable from call_args."""
    mailer = MagicMock()
    mailer.send_otp_email.return_value = True

    import web.deps as deps_module

    monkeypatch.setattr(deps_module, "get_mailer", lambda: mailer)
    return mailer


@pytest.fixture()
def client():
    from starlette.testclient import TestClient

    from web.app import app

    return TestClient(app)


@pytest.fixture()
def token(client) -> str:
    return register_user(client)


@pytest.fixture()
def auth_headers(token) -> dict:
    return bearer(token)
