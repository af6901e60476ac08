"""Pytest fixtures: file-backed SQLite database recreated for every test."""
from typing import Optional

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from event_admin.cache import QueryCache, query_cache
from event_admin.database import Base, get_db
from event_admin.main import app
from event_admin.store.base import Store, StoreError
from event_admin.store.sql_store import SqlStore

SQLITE_URL = "sqlite:///./test.db"


class RecordingStore(Store):
    """Delegates to a real store, recording each call; inserts into ``fail_table`` raise."""

    def __init__(self, inner: Store, fail_table: Optional[str] = None):
        self.inner = inner
        self.fail_table = fail_table
        self.calls = []

    def select(self, table, filters=()):
        self.calls.append(("select", table))
        return self.inner.select(table, filters)

    def insert(self, table, rows):
        self.calls.append(("insert", table))
        if table == self.fail_table:
            raise StoreError("insert failed", table=table)
        return self.inner.insert(table, rows)

    def update(self, table, patch, filters):
        self.calls.append(("update", table))
        return self.inner.update(table, patch, filters)

    def delete(self, table, filters):
        self.calls.append(("delete", table))
        return self.inner.delete(table, filters)


class FakeClock:
    """Manually advanced monotonic clock for freshness-window tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    return SqlStore(db)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return QueryCache(clock=clock)


@pytest.fixture(scope="function")
def client(db_engine):
    """FastAPI TestClient with the database dependency overridden and the query cache emptied."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    query_cache.clear()
    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    query_cache.clear()


# ---------------------------------------------------------------------------
# Helpers: create records via the API, return the JSON response dict
# ---------------------------------------------------------------------------
def create_test_meeting_category(client: TestClient, name: str = "Finance") -> dict:
    resp = client.post("/api/meeting-categories/", json={"name": name})
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_test_event_category(client: TestClient, name: str = "Workshop") -> dict:
    resp = client.post("/api/event-categories/", json={"name": name})
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_test_participant(client: TestClient, name: str = "Ana", meeting_category_ids: list = None) -> dict:
    resp = client.post("/api/participants/", json={
        "name": name,
        "meeting_category_ids": meeting_category_ids or [],
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_test_meeting(client: TestClient, meeting_category_id: str, subject: str = "Monthly meeting",
                        date: str = "2024-02-01") -> dict:
    resp = client.post("/api/meetings/", json={
        "subject": subject,
        "meeting_category_id": meeting_category_id,
        "date": date,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


# ---------------------------------------------------------------------------
# Helpers: seed rows straight through the store
# ---------------------------------------------------------------------------
def seed_category(store, table: str, name: str) -> str:
    return store.insert(table, [{"name": name}])[0]["id"]


def seed_participant(store, name: str) -> str:
    return store.insert("participants", [{"name": name}])[0]["id"]


def seed_company(store, name: str, tax_id: str = "J-00000000-0") -> str:
    return store.insert("directorio_empresas", [{
        "nombre_establecimiento": name,
        "rif_compania": tax_id,
    }])[0]["id_establecimiento"]
