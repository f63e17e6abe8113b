import os
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker

# CRITICAL: Set test settings BEFORE importing any app modules
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["TESTING"] = "true"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from app.main import app
from app.config import settings
from app.database import Base
from app.models.user import AdminUser
from app.services.auth_service import create_access_token, get_password_hash
from app.services.cache_service import CategoryCache
import app.database as db_module
import app.dependencies as dependencies_module
import app.main as main_module


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture(scope="session")
def test_engine():
    return create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # share same in-memory DB across connections
    )


@pytest.fixture()
def db_session(test_engine):
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )
    # Fresh schema per test to avoid cross-test data
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def patch_sessionlocal(monkeypatch, test_engine, db_session):
    monkeypatch.setattr(db_module, "engine", test_engine, raising=False)

    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )
    monkeypatch.setattr(db_module, "SessionLocal", TestingSessionLocal, raising=True)
    # get_db() looks SessionLocal up in app.dependencies at call time
    monkeypatch.setattr(
        dependencies_module, "SessionLocal", TestingSessionLocal, raising=True
    )
    monkeypatch.setattr(main_module, "SessionLocal", TestingSessionLocal, raising=True)

    # Disable rate limiter globally for tests
    if hasattr(app.state, "limiter"):
        setattr(app.state.limiter, "enabled", False)
    yield


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def category_cache(clock):
    cache = CategoryCache(ttl_seconds=settings.CATEGORIES_CACHE_TTL_SECONDS, clock=clock)
    previous = app.state.category_cache
    app.state.category_cache = cache
    yield cache
    app.state.category_cache = previous


@pytest.fixture(autouse=True)
def upload_dir(monkeypatch, tmp_path):
    path = tmp_path / "uploads"
    path.mkdir()
    monkeypatch.setattr(settings, "UPLOAD_PATH", str(path))
    return path


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def admin_user(db_session):
    user = AdminUser(username="admin", password_hash=get_password_hash("secret"))
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture()
def auth_headers(admin_user):
    token = create_access_token(
        admin_user.username, admin_user.id, "admin", timedelta(minutes=30)
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def stored_files(upload_dir):
    def _list():
        return sorted(p for p in upload_dir.rglob("*") if p.is_file())

    return _list
