"""Shared test fixtures and configuration."""
import os
from typing import Dict, List
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("OPENAI_API_KEY", "")
os.environ.setdefault("USE_AI", "false")

from app.main import app
from app.db.models import Base
from app.core.config import Settings
from app.core.dependencies import build_session_manager, get_session_manager
from app.services.call_session.store import InMemorySessionStore
from app.services.interview.completion import TextCompletionClient
from app.services.interview.generator import ResponseGenerator
from app.services.interview.stages import StageTable


# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingCompletionClient(TextCompletionClient):
    """Completion client that returns a fixed reply and records requests."""

    def __init__(self, reply: str = "आपने जो बताया उसके लिए धन्यवाद। यह समस्या कब से है?"):
        self.reply = reply
        self.requests: List[List[Dict[str, str]]] = []

    async def complete(self, messages: List[Dict[str, str]], timeout: float) -> str:
        self.requests.append(messages)
        return self.reply


@pytest.fixture
def test_settings():
    """Override settings for testing."""
    return Settings(
        openai_api_key="",
        database_url=TEST_DATABASE_URL,
        use_ai=False,
        session_idle_timeout_seconds=3600,
        session_sweep_interval_seconds=300,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    """Empty session store driven by the fake clock."""
    return InMemorySessionStore(clock=clock)


@pytest.fixture
def stage_table():
    return StageTable()


@pytest.fixture
def completion_client():
    return RecordingCompletionClient()


@pytest.fixture
def session_manager(test_settings, store):
    """Session manager with augmentation disabled."""
    return build_session_manager(test_settings, store)


@pytest.fixture
def ai_generator(stage_table, completion_client):
    """Response generator with augmentation enabled."""
    return ResponseGenerator(
        stage_table,
        completion_client=completion_client,
        use_ai=True,
        timeout_seconds=1.0,
    )


@pytest.fixture
def mock_openai():
    """Mock OpenAI API client."""
    mock_client = Mock()
    mock_completion = Mock()
    mock_completion.choices = [
        Mock(message=Mock(content="  समझ गया। यह समस्या कितने लोगों को प्रभावित कर रही है?  "))
    ]
    mock_client.chat.completions.create = AsyncMock(return_value=mock_completion)
    return mock_client


@pytest.fixture
async def test_db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def test_session_factory(test_db_engine):
    return async_sessionmaker(
        test_db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    """Create test database session."""
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def test_client(session_manager, test_settings, monkeypatch):
    """Create FastAPI test client with the session manager overridden."""
    monkeypatch.setattr("app.api.webhooks.voice.settings", test_settings)
    app.dependency_overrides[get_session_manager] = lambda: session_manager

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
