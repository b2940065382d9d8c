# tests/conftest.py

from __future__ import annotations

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from todolist.client import TodoClient
from todolist.config import Settings
from todolist.server import create_app
from todolist.store import TodoStore


@pytest.fixture()
def settings() -> Settings:
    """Explicit settings so tests never read the environment or a .env file."""
    return Settings(app_name="todolist-test", seed_default_lists=False)


@pytest.fixture()
def store() -> TodoStore:
    return TodoStore(seed_default_lists=False)


@pytest.fixture()
def seeded_store() -> TodoStore:
    return TodoStore()


@pytest.fixture()
def http(store: TodoStore, settings: Settings) -> TestClient:
    return TestClient(create_app(store, settings))


@pytest.fixture()
def api(http: TestClient) -> TodoClient:
    """TodoClient talking to the in-process app (TestClient is an httpx.Client)."""
    return TodoClient(http=http)


@pytest.fixture()
def now() -> datetime:
    return datetime(2024, 5, 10, 15, 30)
