import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ADMIN_EMAILS", "")
os.environ.setdefault("AGENT_EMAILS", "")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from unittest import mock


def passthrough_decorator(*args, **kwargs):
    """Passthrough decorator that doesn't do rate limiting"""

    def decorator(func):
        return func

    return decorator


mock.patch("slowapi.Limiter.limit", passthrough_decorator).start()
mock.patch("slowapi.Limiter.shared_limit", passthrough_decorator).start()

# ruff: noqa: E402
from app.main import app
from app.database import Base
from app.database import get_db as database_get_db
from app.core.admin_roster import ADMIN_EMAILS_KEY, AGENT_EMAILS_KEY
from app.core.audit import AuditSink
from app.core.cache import TTLCache, maintenance_cache
from app.core.config import settings
from app.core.hashing import Hasher
from app.core.maintenance_gate import MaintenanceGate
from app.core.maintenance_state import MaintenanceStore
from app.core.admin_roster import AdminRoster
from app.core.exceptions import StoreUnavailable
from app.dependencies import build_maintenance_gate
from app import models

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

ADMIN_EMAIL = "admin@example.com"
AGENT_EMAIL = "agent@example.com"
NEW_AGENT_EMAIL = "new.agent@example.com"
AGENT_PASSWORD = "Agent123!"
ADMIN_PASSWORD = "Admin123!"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakePropertyStore:
    """in-memory stand-in for PropertyStore"""

    def __init__(self, values=None, broken=False):
        self.values = dict(values or {})
        self.broken = broken
        self.reads = 0
        self.writes = 0

    def get(self, key):
        self.reads += 1
        if self.broken:
            raise StoreUnavailable("store offline")
        return self.values.get(key)

    def set(self, key, value):
        if self.broken:
            raise StoreUnavailable("store offline")
        self.writes += 1
        self.values[key] = value


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture(autouse=True)
def clear_maintenance_cache():
    """the process-wide cache must not leak state between tests"""
    maintenance_cache.clear()
    yield
    maintenance_cache.clear()


@pytest.fixture
def properties():
    return FakePropertyStore({ADMIN_EMAILS_KEY: f" {ADMIN_EMAIL.upper()} , lead@example.com"})


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(properties, clock):
    return MaintenanceStore(properties, cache=TTLCache(clock=clock), ttl=300)


@pytest.fixture
def gate(store, properties):
    return MaintenanceGate(store=store, roster=AdminRoster(properties, fallback=""), audit=AuditSink())


@pytest.fixture(scope="function")
def db_session():
    """create a fresh database session for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """create a test client with overridden database dependency"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[database_get_db] = override_get_db

    async def passthrough_middleware(self, request, call_next):
        """passthrough middleware that doesnt do rate limiting"""
        response = await call_next(request)
        return response

    with mock.patch("slowapi.middleware.SlowAPIMiddleware.dispatch", passthrough_middleware):
        with TestClient(app, base_url="http://localhost:8000") as test_client:
            yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def admin_roster(db_session):
    """store the ADMIN_EMAILS property"""
    db_session.add(models.ScriptProperty(key=ADMIN_EMAILS_KEY, value=ADMIN_EMAIL))
    db_session.commit()


@pytest.fixture(scope="function")
def agent_roster(db_session):
    """store the AGENT_EMAILS property: the sales agents allowed to register"""
    db_session.add(models.ScriptProperty(key=AGENT_EMAILS_KEY, value=f"{NEW_AGENT_EMAIL},{AGENT_EMAIL}"))
    db_session.commit()


@pytest.fixture(scope="function")
def db_gate(db_session):
    """gate wired to the test database, as the routers build it"""
    return build_maintenance_gate(db_session)


def _create_user(db_session, email, password):
    user = models.User(
        email=email,
        hashed_password=Hasher.get_password_hash(password),
        is_active=True,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def _login(client, email, password):
    response = client.post(
        f"{settings.API_V1_STR}/users/token",
        data={"username": email, "password": password},
    )
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def test_user(db_session):
    """create a sales agent"""
    return _create_user(db_session, AGENT_EMAIL, AGENT_PASSWORD)


@pytest.fixture(scope="function")
def test_admin(db_session, admin_roster):
    """create a user listed in the admin roster"""
    return _create_user(db_session, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture(scope="function")
def auth_headers(client, test_user):
    """get authentication headers for the sales agent"""
    return _login(client, AGENT_EMAIL, AGENT_PASSWORD)


@pytest.fixture(scope="function")
def admin_auth_headers(client, test_admin):
    """get authentication headers for the admin"""
    return _login(client, ADMIN_EMAIL, ADMIN_PASSWORD)
