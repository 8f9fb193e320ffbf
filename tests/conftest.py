from __future__ import annotations

from datetime import date
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from studypace.api.deps import get_sync_queue
from studypace.core.config import settings
from studypace.db import Base
from studypace.db.deps import get_db
from studypace.db.store import RelationalStore
from studypace.main import app
from studypace.services.local_storage import MemoryLocalStorage
from studypace.services.sync_queue import SyncQueue, backend_writer


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):  # pragma: no cover - sqlite setup
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    engine.dispose()


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def store(db) -> RelationalStore:
    return RelationalStore(db)


@pytest.fixture()
def user_id() -> UUID:
    return uuid4()


@pytest.fixture()
def queue(session_factory) -> SyncQueue:
    return SyncQueue(MemoryLocalStorage(), backend_writer(session_factory))


@pytest.fixture()
def client(session_factory, queue, monkeypatch):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    monkeypatch.setattr(settings, "sync_drain_on_startup", False)
    app.state.sync_queue = queue
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_sync_queue] = lambda: queue
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def make_task(store, user_id):
    def make(due_date: date, **values):
        values.setdefault("title", "Read chapter")
        values.setdefault("priority", "medium")
        values.setdefault("user_id", user_id)
        return store.insert("tasks", {"due_date": due_date, **values})

    return make
