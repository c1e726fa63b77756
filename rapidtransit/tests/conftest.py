"""
Centralized Test Configuration.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import Pool

from rapidtransit.app.main import app
from rapidtransit.app.db.session import get_db, Base
from rapidtransit.app.models.enums import UserRole
from rapidtransit.app.models.user import User
from rapidtransit.app.core.security import get_password_hash
from rapidtransit.app.services.sms_dispatcher import SmsDispatcher, get_sms_dispatcher
import rapidtransit.app.core.redis_client as redis_client_module

# Per-test SQLite file; background SMS tasks open their own connections
TEST_DATABASE_URL = "sqlite+aiosqlite:///{path}"


@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)).lower():
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Mock Redis for reliability in CI/CD
class MockRedis:
    def __init__(self):
        self.store = {}

    async def ping(self):
        return True

    async def setex(self, key, ttl, value):
        self.store[key] = value
        return True

    async def exists(self, key):
        return 1 if key in self.store else 0

    async def flushdb(self):
        self.store = {}


class RecordingSender:
    """Stands in for the Twilio sender and remembers every message."""

    def __init__(self, result: bool = True):
        self.result = result
        self.sent = []

    async def send_text(self, to_phone, message):
        self.sent.append((to_phone, message))
        return self.result


class ExplodingSender:
    """Messaging collaborator that raises on every call."""

    def __init__(self):
        self.calls = 0

    async def send_text(self, to_phone, message):
        self.calls += 1
        raise RuntimeError("SMS provider unreachable")


@pytest.fixture
async def engine(tmp_path):
    test_engine = create_async_engine(
        TEST_DATABASE_URL.format(path=tmp_path / "test.db"),
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def mock_redis(monkeypatch):
    redis = MockRedis()
    monkeypatch.setattr(redis_client_module, "redis_client", redis)
    return redis


@pytest.fixture
def sms_sender():
    return RecordingSender()


@pytest.fixture
def dispatcher(sms_sender, session_factory):
    return SmsDispatcher(sms_sender, session_factory=session_factory)


@pytest.fixture(autouse=True)
async def apply_overrides(session_factory, dispatcher, mock_redis):
    """Point the app at the per-test database, fake SMS dispatcher and mock redis."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_sms_dispatcher] = lambda: dispatcher
    yield
    await dispatcher.drain()
    app.dependency_overrides = {}


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def customer(db_session):
    """A persisted customer user."""
    user = User(
        email="thandi@test.com",
        username="thandi",
        hashed_password=get_password_hash("password123"),
        first_name="Thandi",
        last_name="Nkosi",
        role=UserRole.CUSTOMER,
    )
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture
async def customer_token(client):
    response = await client.post("/v1/auth/register", json={
        "email": "sender@test.com",
        "username": "sender",
        "password": "password123",
        "first_name": "Sipho",
        "last_name": "Dlamini",
        "phone": "0821112222",
    })
    assert response.status_code == 201
    return response.json()["access_token"]


@pytest.fixture
async def operator_token(client):
    response = await client.post("/v1/auth/register", json={
        "email": "ops@test.com",
        "username": "depot_ops",
        "password": "password123",
        "role": "OPERATOR",
    })
    assert response.status_code == 201
    return response.json()["access_token"]


@pytest.fixture
def parcel_payload():
    return {
        "sender_phone": "0821112222",
        "pickup_address": "12 Long Street, Cape Town",
        "recipient_name": "Jane",
        "recipient_phone": "082 123 4567",
        "delivery_address": "5 Church Street, Durban",
        "parcel_size": "medium",
        "priority": "express",
        "description": "Books",
    }
