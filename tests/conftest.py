from __future__ import annotations

from datetime import datetime

import pytest

from src.gestao_system.gestao_system.common import datetime_utils
from src.gestao_system.gestao_system.entities.memory_store import InMemoryEntityStore
from src.gestao_system.gestao_system.main import create_app

FIXED_NOW = datetime(2025, 2, 10, 9, 30, 0)


@pytest.fixture
def store():
    return InMemoryEntityStore()


@pytest.fixture
def fixed_now(monkeypatch):
    monkeypatch.setattr(datetime_utils, "now_local", lambda: FIXED_NOW)
    return FIXED_NOW


@pytest.fixture
def app(monkeypatch, store):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(store=store)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(client):
    resp = client.post("/api/auth/login", json={"username": "admin", "password": "admin123"})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}
