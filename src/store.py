"""Persistence for in-progress Kundli acquisition sessions."""

import json
import logging
import os
import time
from abc import ABC, abstractmethod

import redis.asyncio as redis

from models import KundliSession, KundliStep, Language

logger = logging.getLogger("store")

SESSION_TIMEOUT_SECONDS = 10 * 60


def session_to_dict(session: KundliSession) -> dict:
    return {
        "step": session.step.value,
        "language": session.language.value,
        "startedAt": session.started_at,
        "name": session.name,
        "date": session.date,
        "time": session.time,
        "place": session.place,
    }


def session_from_dict(data: dict) -> KundliSession:
    return KundliSession(
        step=KundliStep(data["step"]),
        language=Language(data["language"]),
        started_at=float(data["startedAt"]),
        name=data.get("name"),
        date=data.get("date"),
        time=data.get("time"),
        place=data.get("place"),
    )


class SessionStore(ABC):
    """One session per user id. Expiry is enforced by the caller on read."""

    @abstractmethod
    async def get(self, user_id: str) -> KundliSession | None: ...

    @abstractmethod
    async def set(self, user_id: str, session: KundliSession) -> None: ...

    @abstractmethod
    async def delete(self, user_id: str) -> None: ...

    @abstractmethod
    async def sweep(self, timeout: float, now: float | None = None) -> int:
        """Delete every session older than ``timeout`` seconds. Returns the count."""

    async def close(self) -> None:
        return None


class InMemorySessionStore(SessionStore):
    """Process-local store backed by a dict."""

    def __init__(self):
        self._sessions: dict[str, KundliSession] = {}

    async def get(self, user_id: str) -> KundliSession | None:
        return self._sessions.get(user_id)

    async def set(self, user_id: str, session: KundliSession) -> None:
        self._sessions[user_id] = session

    async def delete(self, user_id: str) -> None:
        self._sessions.pop(user_id, None)

    async def sweep(self, timeout: float, now: float | None = None) -> int:
        now = time.time() if now is None else now
        expired = [
            user_id
            for user_id, session in self._sessions.items()
            if now - session.started_at > timeout
        ]
        for user_id in expired:
            del self._sessions[user_id]
        if expired:
            logger.info(f"Swept {len(expired)} expired Kundli sessions")
        return len(expired)


class RedisSessionStore(SessionStore):
    """Async Redis store, for sharing sessions between processes.

    Keys carry a TTL equal to the session timeout, so Redis drops abandoned
    sessions on its own; ``sweep`` only has to catch entries whose TTL was
    reset by a later write.
    """

    def __init__(
        self,
        client: redis.Redis | None = None,
        ttl_seconds: int = SESSION_TIMEOUT_SECONDS,
    ):
        if client is not None:
            self._redis = client
        else:
            url = os.getenv("REDIS_URL", "redis://localhost:6379")
            self._redis = redis.from_url(url)
        self._ttl = ttl_seconds

    def _key(self, user_id: str) -> str:
        return f"kundli:session:{user_id}"

    async def get(self, user_id: str) -> KundliSession | None:
        raw = await self._redis.get(self._key(user_id))
        if not raw:
            return None
        try:
            return session_from_dict(json.loads(raw))
        except (ValueError, KeyError) as e:
            logger.warning(f"Discarding unreadable session for {user_id}: {e}")
            await self.delete(user_id)
            return None

    async def set(self, user_id: str, session: KundliSession) -> None:
        await self._redis.set(
            self._key(user_id), json.dumps(session_to_dict(session)), ex=self._ttl
        )

    async def delete(self, user_id: str) -> None:
        await self._redis.delete(self._key(user_id))

    async def sweep(self, timeout: float, now: float | None = None) -> int:
        now = time.time() if now is None else now
        removed = 0
        async for key in self._redis.scan_iter(match="kundli:session:*"):
            raw = await self._redis.get(key)
            if not raw:
                continue
            try:
                started_at = float(json.loads(raw)["startedAt"])
            except (ValueError, KeyError):
                started_at = 0.0
            if now - started_at > timeout:
                await self._redis.delete(key)
                removed += 1
        if removed:
            logger.info(f"Swept {removed} expired Kundli sessions")
        return removed

    async def close(self) -> None:
        """Close the Redis connection."""
        await self._redis.aclose()
