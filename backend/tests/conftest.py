"""Shared fixtures: in-memory SQLite, a fixed clock, deterministic ids."""
import itertools
import os

# Must be set before subledger.core.config is imported
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ.pop("API_TOKEN", None)
os.environ.pop("OWNER_ID", None)

import pytest
from fastapi.testclient import TestClient

from subledger.api.deps import get_clock
from subledger.db.base import Base
from subledger.db.session import SessionLocal, engine
from subledger.main import app
from subledger.services.backends import InMemorySubscriptionBackend
from subledger.services.store import OwnerSlot, SubscriptionStore

OWNER = "owner-principal"


class FakeClock:
    """Clock that returns a settable time in seconds."""

    def __init__(self, now: int = 1000):
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture(autouse=True)
def fresh_schema():
    """Recreate all tables for every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def clock():
    return FakeClock(1000)


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f"sub-{next(counter):04d}"


@pytest.fixture
def owner_slot():
    return OwnerSlot(OWNER)


@pytest.fixture
def memory_backend():
    return InMemorySubscriptionBackend()


@pytest.fixture
def store(memory_backend, owner_slot, clock, id_factory):
    return SubscriptionStore(memory_backend, owner=owner_slot, clock=clock, id_factory=id_factory)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(clock):
    """API client with a fresh owner slot and the fake clock."""
    app.state.owner = OwnerSlot(None)
    app.dependency_overrides[get_clock] = lambda: clock
    yield TestClient(app)
    app.dependency_overrides.clear()
