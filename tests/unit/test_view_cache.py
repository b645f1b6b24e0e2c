"""Unit tests for the client view cache."""

from unittest.mock import AsyncMock

import pytest

from app.client.cache import ViewCache


@pytest.mark.asyncio
class TestViewCache:
    """Test cases for ViewCache."""

    async def test_fetches_once_until_invalidated(self):
        cache = ViewCache()
        fetch = AsyncMock(return_value=["a"])

        assert await cache.get(("conversations",), fetch) == ["a"]
        assert await cache.get(("conversations",), fetch) == ["a"]
        fetch.assert_awaited_once()

        cache.invalidate(("conversations",))
        await cache.get(("conversations",), fetch)
        assert fetch.await_count == 2

    async def test_invalidate_by_prefix(self):
        cache = ViewCache()
        await cache.get(("conversations",), AsyncMock(return_value=[]))
        await cache.get(("conversations", "c1", "messages"), AsyncMock(return_value=[]))
        await cache.get(("settings",), AsyncMock(return_value={}))

        cache.invalidate(("conversations",))

        assert ("conversations",) not in cache
        assert ("conversations", "c1", "messages") not in cache
        assert ("settings",) in cache

    async def test_invalidate_specific_key_keeps_parent(self):
        cache = ViewCache()
        await cache.get(("conversations",), AsyncMock(return_value=[]))
        await cache.get(("conversations", "c1", "messages"), AsyncMock(return_value=[]))

        cache.invalidate(("conversations", "c1", "messages"))

        assert ("conversations",) in cache
        assert ("conversations", "c1", "messages") not in cache

    async def test_clear(self):
        cache = ViewCache()
        await cache.get(("x",), AsyncMock(return_value=1))
        cache.clear()
        assert ("x",) not in cache
