import os

os.environ["ENV"] = "test"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

import app.models  # noqa: F401
from app.core.app_state import state
from app.core.realtime import RoomRegistry
from app.db import Base, build_engine, get_db
from app.main import create_app

pytest_plugins = [
    "tests.fixtures.user_fixtures",
    "tests.fixtures.plan_fixtures",
    "tests.fixtures.chat_fixtures",
]


@pytest.fixture(scope="function")
def engine():
    """Fresh schema per test; in-memory SQLite unless TEST_DATABASE_URL is set."""
    engine = build_engine(os.environ.get("TEST_DATABASE_URL") or "sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def rooms():
    """Isolate the process-wide room registry between tests."""
    state.rooms = RoomRegistry(send_timeout=1.0)
    return state.rooms


@pytest.fixture(scope="function")
def client(db, setup_user):
    """Client acting as ``setup_user`` via the gateway identity header."""
    app = create_app(testing=True)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app, headers={"X-User-Id": str(setup_user.id)}) as c:
        yield c
    app.dependency_overrides.clear()
