"""Test configuration and fixtures for pytest.

Provides fixtures for:
- An in-memory waitlist store (healthy and failing variants)
- A FastAPI test app with the store dependency overridden
- Settings cache reset
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from waitlist.api import api_router
from waitlist.config import get_settings
from waitlist.errors import StoreUnavailableError, WriteFailedError
from waitlist.schemas import WaitlistEntry
from waitlist.signup import SignupHandler
from waitlist.store import WaitlistStore, get_store

FIXED_NOW = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


class FakeWaitlistStore(WaitlistStore):
    """In-memory store recording inserted documents."""

    def __init__(self, fail_with: Exception | None = None):
        self.documents: list[dict] = []
        self.fail_with = fail_with
        self.insert_calls = 0
        self.closed = False

    def insert(self, entry: WaitlistEntry) -> str:
        self.insert_calls += 1
        if self.fail_with is not None:
            raise self.fail_with
        inserted_id = f"{len(self.documents) + 1:024x}"
        self.documents.append({"_id": inserted_id, **entry.to_document()})
        return inserted_id

    def ping(self) -> bool:
        return self.fail_with is None

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_store() -> FakeWaitlistStore:
    """Healthy in-memory store."""
    return FakeWaitlistStore()


@pytest.fixture
def unavailable_store() -> FakeWaitlistStore:
    """Store that cannot connect."""
    return FakeWaitlistStore(
        fail_with=StoreUnavailableError("MONGODB_URI environment variable is not set")
    )


@pytest.fixture
def write_failing_store() -> FakeWaitlistStore:
    """Store that connects but rejects the write."""
    return FakeWaitlistStore(fail_with=WriteFailedError("Insert failed: not primary"))


@pytest.fixture
def handler(fake_store: FakeWaitlistStore) -> SignupHandler:
    """Signup handler over the fake store with a fixed clock."""
    return SignupHandler(fake_store, now=lambda: FIXED_NOW)


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch):
    """Settings are cached; make each test start from a clean environment."""
    monkeypatch.delenv("MONGODB_URI", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@asynccontextmanager
async def noop_lifespan(app: FastAPI):
    """No-op lifespan for testing."""
    yield


def create_test_app(store: WaitlistStore) -> FastAPI:
    """Create FastAPI app with the routers used in production and the given store."""
    app = FastAPI(title="Waitlist API (Test)", lifespan=noop_lifespan)
    app.include_router(api_router)
    app.dependency_overrides[get_store] = lambda: store
    return app


@pytest.fixture
def test_app(fake_store: FakeWaitlistStore) -> Generator[FastAPI, None, None]:
    """Test app backed by the healthy fake store."""
    app = create_test_app(fake_store)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def test_client(test_app: FastAPI) -> TestClient:
    """Create test client."""
    return TestClient(test_app)


@pytest.fixture
def app_factory():
    """Build a test app around any store."""
    return create_test_app


@pytest.fixture
def fixed_now() -> datetime:
    """Clock value used by the ``handler`` fixture."""
    return FIXED_NOW
