# tests/conftest.py
import os

# Set up test environment variables BEFORE any other imports
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ["GEMINI_API_KEY"] = ""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.domains.chat.service import ChatService
from app.main import create_app
from app.services.inference_service import InferenceClient
from app.storage import InMemoryChatStore


class FakeClock:
    """Deterministic clock advancing one second per reading."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)):
        self.current = start or datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
        self.step = step

    def __call__(self) -> datetime:
        now = self.current
        self.current += self.step
        return now


@pytest.fixture
def clock():
    """Clock shared by the store under test."""
    return FakeClock()


@pytest.fixture
def store(clock):
    """Fresh in-memory store."""
    return InMemoryChatStore(clock=clock)


@pytest.fixture
def conversation(store):
    """A conversation created with the client's default title."""
    return store.create_conversation("New Chat")


@pytest.fixture
def mock_inference():
    """Inference client returning a fixed reply."""
    mock = MagicMock(spec=InferenceClient)
    mock.complete = AsyncMock(return_value="Hello! How can I help you today?")
    return mock


@pytest.fixture
def chat_service(store, mock_inference):
    """Message pipeline wired to the in-memory store and mocked inference."""
    return ChatService(store, mock_inference)


@pytest.fixture
def test_app(store, mock_inference):
    """Application using the test store and mocked inference."""
    return create_app(store=store, inference_client=mock_inference)


@pytest_asyncio.fixture
async def client(test_app):
    """HTTP client talking to the application in-process."""
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as ac:
        yield ac


# Utility fixtures
@pytest.fixture
def png_bytes():
    """Smallest valid PNG header-ish payload."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
