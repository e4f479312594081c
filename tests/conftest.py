import os
from datetime import datetime, timedelta, timezone

# Must be set before app modules build the engine
os.environ["ENV"] = "test"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

import app.models  # noqa: E402,F401
from app.config import get_settings  # noqa: E402
from app.db import Base, SessionLocal, engine, get_db  # noqa: E402
from app.main import create_app  # noqa: E402

pytest_plugins = [
    "tests.fixtures.user_fixtures",
    "tests.fixtures.chat_fixtures",
]


class FakeClock:
    """Deterministic clock: every reading is `step` later than the previous one."""

    def __init__(self, start=None, step=timedelta(seconds=1)):
        self.current = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self):
        now = self.current
        self.current = self.current + self.step
        return now

    def advance(self, seconds=0, minutes=0):
        self.current = self.current + timedelta(seconds=seconds, minutes=minutes)


@pytest.fixture(scope="function")
def db():
    """Fresh schema per test on the test database."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def clock():
    return FakeClock()


@pytest.fixture(scope="function")
def client(db):
    """TestClient sharing the test db session."""
    app = create_app(testing=True)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def settings_factory():
    """Build Settings with selected fields overridden."""

    def _factory(**overrides):
        return get_settings().model_copy(update=overrides)

    return _factory
