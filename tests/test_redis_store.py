"""Tests for the Redis secret store (mocked Redis client)."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from otp_gateway.errors import StoreError
from otp_gateway.store.redis_store import RedisSecretStore


@pytest.fixture
def client():
    return AsyncMock()


@pytest.fixture
def redis_store(client):
    return RedisSecretStore(client)


@pytest.mark.asyncio
async def test_set_uses_expiry(redis_store, client):
    await redis_store.set("otp:code:x", "abc", ttl=600)
    client.set.assert_awaited_once_with("otp:code:x", "abc", ex=600)


@pytest.mark.asyncio
async def test_get_returns_value(redis_store, client):
    client.get.return_value = "abc"
    assert await redis_store.get("otp:code:x") == "abc"


@pytest.mark.asyncio
async def test_connection_failure_is_wrapped(redis_store, client):
    client.get.side_effect = RedisConnectionError("connection refused")

    with pytest.raises(StoreError) as excinfo:
        await redis_store.get("otp:code:+233200000000")

    assert excinfo.value.operation == "get"
    assert excinfo.value.key == "otp:code:+233200000000"
    assert isinstance(excinfo.value.cause, RedisConnectionError)


@pytest.mark.asyncio
async def test_delete_many(redis_store, client):
    await redis_store.delete("a", "b")
    client.delete.assert_awaited_once_with("a", "b")


@pytest.mark.asyncio
async def test_incr_seeded_runs_in_transaction(redis_store, client):
    pipe = MagicMock()
    pipe.__aenter__ = AsyncMock(return_value=pipe)
    pipe.__aexit__ = AsyncMock(return_value=False)
    pipe.execute = AsyncMock(return_value=[True, 1])
    client.pipeline = MagicMock(return_value=pipe)

    assert await redis_store.incr("otp:ratelimit:x", ttl=3600) == 1

    client.pipeline.assert_called_once_with(transaction=True)
    pipe.set.assert_called_once_with("otp:ratelimit:x", 0, ex=3600, nx=True)
    pipe.incr.assert_called_once_with("otp:ratelimit:x")


@pytest.mark.asyncio
async def test_incr_existing_only_uses_script(redis_store, client):
    client.eval.return_value = 2
    assert await redis_store.incr("otp:attempts:x", existing_only=True) == 2

    client.eval.return_value = None
    assert await redis_store.incr("otp:attempts:x", existing_only=True) is None
    client.incr.assert_not_called()


@pytest.mark.asyncio
async def test_plain_incr(redis_store, client):
    client.incr.return_value = 5
    assert await redis_store.incr("counter") == 5


@pytest.mark.asyncio
async def test_ttl(redis_store, client):
    client.ttl.return_value = 42
    assert await redis_store.ttl("k") == 42
