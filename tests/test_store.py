"""Tests for the session stores, using fakeredis for Redis."""

import json

import fakeredis.aioredis
import pytest

from models import KundliSession, KundliStep, Language
from store import (
    SESSION_TIMEOUT_SECONDS,
    InMemorySessionStore,
    RedisSessionStore,
    session_from_dict,
    session_to_dict,
)

STARTED_AT = 1_700_000_000.0


@pytest.fixture
def sample_session():
    return KundliSession(
        step=KundliStep.ASK_TIME,
        language=Language.HINGLISH,
        started_at=STARTED_AT,
        name="Aman",
        date="1989-01-31",
    )


@pytest.fixture
async def redis_client():
    client = fakeredis.aioredis.FakeRedis()
    yield client
    await client.aclose()


@pytest.fixture(params=["memory", "redis"])
async def store(request, redis_client):
    if request.param == "memory":
        yield InMemorySessionStore()
    else:
        yield RedisSessionStore(client=redis_client)


def test_session_dict_keeps_every_field(sample_session):
    data = session_to_dict(sample_session)
    assert data["step"] == "ASK_TIME"
    assert data["language"] == "hinglish"
    assert data["startedAt"] == STARTED_AT
    assert session_from_dict(data) == sample_session


async def test_set_and_get(store, sample_session):
    await store.set("user-1", sample_session)
    assert await store.get("user-1") == sample_session


async def test_missing_user(store):
    assert await store.get("no-such-user") is None


async def test_delete(store, sample_session):
    await store.set("user-1", sample_session)
    await store.delete("user-1")
    assert await store.get("user-1") is None


async def test_delete_missing_user_is_a_no_op(store):
    await store.delete("no-such-user")


async def test_one_session_per_user(store, sample_session):
    await store.set("user-1", sample_session)
    restarted = KundliSession(
        step=KundliStep.ASK_NAME, language=Language.ENGLISH, started_at=STARTED_AT + 5
    )
    await store.set("user-1", restarted)
    assert await store.get("user-1") == restarted


async def test_sweep_removes_only_expired(store, sample_session):
    fresh = KundliSession(
        step=KundliStep.ASK_NAME, language=Language.ENGLISH, started_at=STARTED_AT + 500
    )
    await store.set("old", sample_session)
    await store.set("new", fresh)

    removed = await store.sweep(600, now=STARTED_AT + 700)

    assert removed == 1
    assert await store.get("old") is None
    assert await store.get("new") == fresh


async def test_redis_key_and_ttl(redis_client, sample_session):
    store = RedisSessionStore(client=redis_client)
    await store.set("user-1", sample_session)

    raw = await redis_client.get("kundli:session:user-1")
    assert json.loads(raw)["name"] == "Aman"
    ttl = await redis_client.ttl("kundli:session:user-1")
    assert 0 < ttl <= SESSION_TIMEOUT_SECONDS


async def test_redis_discards_unreadable_session(redis_client):
    await redis_client.set("kundli:session:user-1", "not json")
    store = RedisSessionStore(client=redis_client)

    assert await store.get("user-1") is None
    assert await redis_client.exists("kundli:session:user-1") == 0
