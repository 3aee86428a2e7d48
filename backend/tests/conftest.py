import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from devcamper.config import settings
from devcamper.domain.roles import UserRole
from devcamper.infrastructure.db import models  # noqa: F401
from devcamper.infrastructure.db.session import Base, get_db
from devcamper.main import app
from tests.helpers.factories import create_user


class FakeRedisClient:
    def __init__(self):
        self.store: dict[str, str] = {}

    def ping(self) -> bool:
        return True

    def get(self, key: str) -> str | None:
        return self.store.get(key)

    def setex(self, key: str, ttl_seconds: int, value: str) -> None:
        self.store[key] = value

    def delete(self, key: str) -> None:
        self.store.pop(key, None)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "geocoder_api_key", None)
    monkeypatch.setattr(settings, "file_upload_path", str(tmp_path / "uploads"))


@pytest.fixture
def fake_redis():
    return FakeRedisClient()


@pytest.fixture
def db_session(monkeypatch, engine, fake_redis):
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = testing_session_local()
    monkeypatch.setattr("devcamper.interfaces.api.v1.routes.ping.get_redis_client", lambda: fake_redis)
    monkeypatch.setattr("devcamper.infrastructure.cache.cache_service.get_redis_client", lambda: fake_redis)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def seeded_users(db_session):
    return {
        "admin": create_user(db_session, "admin@example.com", name="Admin One", role=UserRole.admin, password="admin123"),
        "publisher": create_user(
            db_session, "publisher@example.com", name="Publisher One", role=UserRole.publisher, password="publisher123"
        ),
        "other_publisher": create_user(
            db_session, "publisher2@example.com", name="Publisher Two", role=UserRole.publisher, password="publisher123"
        ),
        "user": create_user(db_session, "user@example.com", name="User One", role=UserRole.user, password="user123"),
        "other_user": create_user(db_session, "user2@example.com", name="User Two", role=UserRole.user, password="user123"),
    }
