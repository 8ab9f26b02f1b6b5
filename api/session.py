"""Session management with Redis backend and in-memory fallback."""

import json
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any
from uuid import uuid4

import redis.asyncio as redis
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired
from redis.exceptions import RedisError

from config import config
from logging_utils import get_logger

logger = get_logger(__name__)

SESSION_KEY_PREFIX = "war:session:"


class SessionSigner:
    """Sign and verify session IDs using itsdangerous."""

    def __init__(self, secret_key: str | None = None) -> None:
        self._serializer = URLSafeTimedSerializer(secret_key or config.security.secret_key)

    def sign(self, session_id: str) -> str:
        """Create a signed token from a session ID."""
        return self._serializer.dumps(session_id)

    def unsign(self, token: str, max_age: int | None = None) -> str | None:
        """
        Verify and extract session_id from a signed token.

        Args:
            token: The signed token to verify
            max_age: Maximum age in seconds (defaults to session_ttl)

        Returns:
            The session ID if valid, None otherwise
        """
        try:
            return self._serializer.loads(token, max_age=max_age or config.session_ttl)
        except (BadSignature, SignatureExpired):
            return None


# Global signer instance
_session_signer: SessionSigner | None = None


def get_session_signer() -> SessionSigner:
    """Get or create the session signer."""
    global _session_signer
    if _session_signer is None:
        _session_signer = SessionSigner()
    return _session_signer


class SessionStore(ABC):
    """Abstract session store keyed by raw (unsigned) session ID."""

    @abstractmethod
    async def get(self, session_id: str) -> dict[str, Any] | None:
        """Get session data, None once it has expired."""
        ...

    @abstractmethod
    async def set(self, session_id: str, data: dict[str, Any], ttl: int | None = None) -> None:
        """Set session data for ttl seconds (defaults to session_ttl)."""
        ...


class InMemorySessionStore(SessionStore):
    """
    In-memory session store for local development and tests.

    Expired entries are dropped on every write, so the store never holds
    more than one session_ttl worth of sessions.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, tuple[dict[str, Any], datetime]] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    async def get(self, session_id: str) -> dict[str, Any] | None:
        entry = self._sessions.get(session_id)
        if entry is None:
            return None

        data, expiry = entry
        if expiry <= datetime.now():
            del self._sessions[session_id]
            return None
        return data

    async def set(
        self,
        session_id: str,
        data: dict[str, Any],
        ttl: int | None = None,
    ) -> None:
        now = datetime.now()
        self._purge_expired(now)
        self._sessions[session_id] = (data, now + timedelta(seconds=ttl or config.session_ttl))

    def _purge_expired(self, now: datetime) -> None:
        expired = [sid for sid, (_, expiry) in self._sessions.items() if expiry <= now]
        for sid in expired:
            del self._sessions[sid]


class RedisSessionStore(SessionStore):
    """Redis-backed session store; Redis expires keys itself."""

    def __init__(self, redis_client: redis.Redis) -> None:
        self._redis = redis_client

    @staticmethod
    def _key(session_id: str) -> str:
        return f"{SESSION_KEY_PREFIX}{session_id}"

    async def get(self, session_id: str) -> dict[str, Any] | None:
        data = await self._redis.get(self._key(session_id))
        return json.loads(data) if data is not None else None

    async def set(
        self,
        session_id: str,
        data: dict[str, Any],
        ttl: int | None = None,
    ) -> None:
        await self._redis.setex(self._key(session_id), ttl or config.session_ttl, json.dumps(data))


# Global session store instance
_session_store: SessionStore | None = None


async def get_session_store() -> SessionStore:
    """Get or create the session store, preferring Redis when it answers."""
    global _session_store

    if _session_store is not None:
        return _session_store

    client = redis.from_url(config.redis.url)
    try:
        await client.ping()
    except (RedisError, OSError) as exc:
        await client.aclose()
        logger.warning("Redis unavailable at %s (%s), using in-memory sessions", config.redis.url, exc)
        _session_store = InMemorySessionStore()
    else:
        _session_store = RedisSessionStore(client)
    return _session_store


def set_session_store(store: SessionStore | None) -> None:
    """Replace the global store (None forces a new lookup on next use)."""
    global _session_store
    _session_store = store


def extract_session_id(token: str) -> str | None:
    """
    Extract the raw session ID from a signed token.

    Args:
        token: The signed session token

    Returns:
        The raw session ID if valid, None otherwise
    """
    return get_session_signer().unsign(token)


async def create_session(data: dict[str, Any] | None = None) -> str:
    """Store a new session and return its signed token."""
    session_id = str(uuid4())
    store = await get_session_store()
    await store.set(session_id, data or {})
    return get_session_signer().sign(session_id)


async def get_session(token: str) -> dict[str, Any] | None:
    """Session data for a signed token; None if the token is bad or the session expired."""
    session_id = extract_session_id(token)
    if session_id is None:
        return None
    store = await get_session_store()
    return await store.get(session_id)


async def update_session(token: str, data: dict[str, Any]) -> bool:
    """Replace session data and restart its TTL. False if the token is bad."""
    session_id = extract_session_id(token)
    if session_id is None:
        return False
    store = await get_session_store()
    await store.set(session_id, data)
    return True
