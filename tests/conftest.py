from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool

from app.core.config import settings
from app.core.google import get_google_client
from app.core.stripe import get_stripe_client
from app.db.base import Base
from app.db.session import get_db
from app.main import create_app
from app.models.user import User

from ._factories import FakeGoogleClient, FakeStripeClient, GooglePersonFactory


@pytest.fixture(autouse=True)
def test_settings(monkeypatch):
    """Run every test as local development with known secrets."""
    monkeypatch.setattr(settings, "environment", "development")
    monkeypatch.setattr(settings, "cookie_secret", "test-cookie-secret")
    monkeypatch.setattr(settings, "google_client_id", "test-client-id")
    monkeypatch.setattr(settings, "google_client_secret", "test-client-secret")
    monkeypatch.setattr(settings, "google_redirect_uri", "http://localhost:3000/login")
    monkeypatch.setattr(settings, "stripe_secret_key", "sk_test_123")
    monkeypatch.setattr(settings, "stripe_client_id", "ca_test_123")
    yield settings


@pytest.fixture
def db_path(tmp_path):
    """SQLite database file with the schema already created."""
    path = tmp_path / "stayhub-test.db"
    engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(engine)
    engine.dispose()
    return path


@pytest.fixture
def session_factory(db_path):
    # NullPool: every session opens its connection on the loop that uses it.
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def load_user(db_path):
    """Read a user straight from the database file, bypassing any session cache."""
    engine = create_engine(f"sqlite:///{db_path}")

    def _load(user_id: str) -> Optional[User]:
        with Session(engine, expire_on_commit=False) as session:
            user = session.get(User, user_id)
            if user is not None:
                session.expunge(user)
            return user

    yield _load
    engine.dispose()


@pytest.fixture
def seed_user(db_path):
    """Insert a user directly into the database file."""
    engine = create_engine(f"sqlite:///{db_path}")

    def _seed(**fields) -> None:
        values = {
            "id": "g-1",
            "token": "old-token",
            "name": "Ann",
            "avatar": "http://a",
            "contact": "a@x.com",
            "income": 0,
            "listings": [],
            "bookings": [],
        }
        values.update(fields)
        with Session(engine) as session:
            session.add(User(**values))
            session.commit()

    yield _seed
    engine.dispose()


@pytest.fixture(scope="session")
def person_factory() -> GooglePersonFactory:
    return GooglePersonFactory()


@pytest.fixture
def google(person_factory) -> FakeGoogleClient:
    return FakeGoogleClient({"abc": person_factory.make()})


@pytest.fixture
def stripe() -> FakeStripeClient:
    return FakeStripeClient({"ac_code": "acct_123"})


@pytest.fixture
def client(session_factory, google, stripe):
    app = create_app()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_google_client] = lambda: google
    app.dependency_overrides[get_stripe_client] = lambda: stripe
    # Not used as a context manager: the lifespan would create tables on the default engine.
    return TestClient(app)
