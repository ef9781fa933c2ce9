"""
Pytest fixtures for SafeSpace tests. Uses a temporary SQLite DB per test for the scan store.
"""

from __future__ import annotations

import pytest

TEST_JWT_SECRET = "safespace-test-secret-0123456789abcdef"
USER_ID = "6650c0ffee0000000000aaaa"
OTHER_USER_ID = "6650c0ffee0000000000bbbb"


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'scans.db'}"


@pytest.fixture
def scan_store(db_url):
    """Fresh ScanStore on a temp SQLite file with schema created."""
    from backend_safespace.database import SQLAlchemyBackend, ScanStore

    backend = SQLAlchemyBackend(db_url)
    store = ScanStore(backend)
    store.ensure_schema()
    yield store
    backend.dispose()


@pytest.fixture
def unavailable_store(tmp_path):
    """ScanStore whose SQLite file lives in a directory that does not exist."""
    from backend_safespace.database import SQLAlchemyBackend, ScanStore

    backend = SQLAlchemyBackend(f"sqlite:///{tmp_path / 'missing' / 'scans.db'}")
    yield ScanStore(backend)
    backend.dispose()


@pytest.fixture
def settings(db_url):
    from backend_safespace.config import Settings

    return Settings(app_env="test", database_url=db_url, jwt_secret=TEST_JWT_SECRET)


@pytest.fixture
def make_token(settings):
    """Factory: bearer token for a user id, signed with the test secret."""
    from backend_safespace.api_server.auth import issue_token

    def _make(user_id: str = USER_ID, **kwargs) -> str:
        return issue_token(user_id, settings.jwt_secret, **kwargs)

    return _make


@pytest.fixture
def auth_headers(make_token):
    return {"Authorization": f"Bearer {make_token(USER_ID)}"}


@pytest.fixture
def other_auth_headers(make_token):
    return {"Authorization": f"Bearer {make_token(OTHER_USER_ID)}"}


@pytest.fixture
def client(settings, scan_store):
    """FastAPI TestClient wired to the temp scan store."""
    from fastapi.testclient import TestClient

    from backend_safespace.api_server.server import create_app

    return TestClient(create_app(settings, store=scan_store))
