"""Test configuration and fixtures"""

from datetime import date
from typing import List

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from uuid import uuid4

from hostmate.main import app
from hostmate.database import Base, get_db
from hostmate.models.table import DiningTable
from hostmate.models.user import User, UserRole
from hostmate.schemas.llm import LLMCompletion, LLMMessage
from hostmate.agent import ReservationAgent
from hostmate.api.agent import get_reservation_agent
from hostmate.api.auth import get_password_hash


# Test database URL (use in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Fixed "today" for the conversational agent
AGENT_TODAY = date(2024, 5, 20)


def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class FakeLLM:
    """Stands in for the LLM adapter; records calls and returns a canned answer"""

    def __init__(self, content: str = "We are open daily from 9:00 AM to 10:30 PM.", fail: bool = False):
        self.content = content
        self.fail = fail
        self.calls: List[dict] = []

    async def complete(
        self,
        system_prompt: str,
        messages: List[LLMMessage],
        temperature: float = 0.4,
        max_tokens: int = 512,
    ) -> LLMCompletion:
        self.calls.append({"system_prompt": system_prompt, "messages": messages})
        if self.fail:
            raise TimeoutError()
        return LLMCompletion(content=self.content, provider="fake", model="fake-model")


@pytest.fixture
async def test_db():
    """Create test database"""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def file_db_engine(tmp_path):
    """File-backed database so separate sessions get separate connections"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'hostmate.db'}", echo=False)
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def file_sessions(file_db_engine):
    return async_sessionmaker(file_db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_tables(test_db):
    """Create a small dining room: two 2-tops, a 4-top and a 6-top"""
    tables = [
        DiningTable(id=uuid4(), number=1, capacity=2),
        DiningTable(id=uuid4(), number=2, capacity=2),
        DiningTable(id=uuid4(), number=3, capacity=4),
        DiningTable(id=uuid4(), number=4, capacity=6),
    ]

    for table in tables:
        test_db.add(table)

    await test_db.commit()
    return tables


@pytest.fixture
async def test_user(test_db):
    """Create a test customer"""
    user = User(
        id=uuid4(),
        email="test@example.com",
        hashed_password=get_password_hash("testpass123"),
        full_name="Test User",
        phone="555-123-4567",
        role=UserRole.CUSTOMER,
        is_active=True,
        email_verified=True,
    )
    test_db.add(user)
    await test_db.commit()

    return user


@pytest.fixture
async def test_admin_user(test_db):
    """Create a staff admin user"""
    user = User(
        id=uuid4(),
        email="admin@example.com",
        hashed_password=get_password_hash("adminpass123"),
        full_name="Admin User",
        role=UserRole.ADMIN,
        is_active=True,
        email_verified=True,
    )
    test_db.add(user)
    await test_db.commit()

    return user


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
async def client(test_db, fake_llm):
    """Create test client with overridden database and agent"""
    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_reservation_agent] = lambda: ReservationAgent(
        llm=fake_llm, today=lambda: AGENT_TODAY
    )

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def authenticated_client(client, test_user):
    """Create authenticated test client"""
    from hostmate.api.auth import create_access_token

    token = create_access_token(test_user)
    client.headers["Authorization"] = f"Bearer {token}"

    return client


@pytest.fixture
async def admin_client(client, test_admin_user):
    """Create admin authenticated test client"""
    from hostmate.api.auth import create_access_token

    token = create_access_token(test_admin_user)
    client.headers["Authorization"] = f"Bearer {token}"

    return client
