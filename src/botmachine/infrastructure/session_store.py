"""Session persistence layer for per-user dialogue state.

This module provides abstract and concrete implementations for session storage,
supporting both in-memory (for development) and Redis-backed (for production)
persistence strategies. Stores are injected into the session middleware; no
business logic references a store directly.
"""

import copy
import json
import time
from abc import ABC, abstractmethod

from redis import asyncio as aioredis

from ..models.config import Settings, get_settings


class SessionStore(ABC):
    """Abstract base class for session storage implementations."""

    @abstractmethod
    async def get(self, key: str) -> dict | None:
        """Load a session.

        Args:
            key: Stable identifier of the session owner

        Returns:
            Session mapping if found, None otherwise
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: dict) -> None:
        """Persist a session, replacing any previous value.

        Args:
            key: Stable identifier of the session owner
            value: Session mapping to persist
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete a session. Deleting a missing key is a no-op.

        Args:
            key: Stable identifier of the session owner
        """
        pass

    async def close(self) -> None:
        """Release connections held by the store. No-op by default."""


class InMemorySessionStore(SessionStore):
    """In-memory session store for development and testing.

    Values are deep-copied on the way in and out, so callers never share a
    mutable mapping with the store. Not suitable for multi-process deployments.
    """

    def __init__(self, ttl: int | None = None) -> None:
        """Initialize the in-memory store.

        Args:
            ttl: Optional time-to-live in seconds; sessions never expire when None
        """
        self.ttl = ttl
        self._store: dict[str, tuple[dict, float | None]] = {}  # (value, expiry_time)

    async def get(self, key: str) -> dict | None:
        """Load a session."""
        if key not in self._store:
            return None

        value, expiry_time = self._store[key]

        if expiry_time is not None and time.time() > expiry_time:
            del self._store[key]
            return None

        return copy.deepcopy(value)

    async def set(self, key: str, value: dict) -> None:
        """Persist a session."""
        expiry_time = time.time() + self.ttl if self.ttl else None
        self._store[key] = (copy.deepcopy(value), expiry_time)
        # Clean up expired sessions opportunistically
        await self._cleanup_expired()

    async def delete(self, key: str) -> None:
        """Delete a session."""
        self._store.pop(key, None)

    async def _cleanup_expired(self) -> None:
        """Remove expired sessions from the store."""
        current_time = time.time()
        expired_keys = [
            key
            for key, (_, expiry_time) in self._store.items()
            if expiry_time is not None and current_time > expiry_time
        ]
        for key in expired_keys:
            del self._store[key]

    def __len__(self) -> int:
        return len(self._store)


class RedisSessionStore(SessionStore):
    """Redis-backed session store for production use.

    Sessions are stored as JSON strings under a namespaced key, with an
    optional TTL refreshed on every save.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        prefix: str = "botmachine:session:",
        ttl: int | None = None,
    ) -> None:
        """Initialize Redis session store.

        Args:
            redis_url: Redis connection URL
            prefix: Key prefix for namespacing sessions
            ttl: Optional time-to-live in seconds
        """
        self.redis_url = redis_url
        self.prefix = prefix
        self.ttl = ttl
        self._client: aioredis.Redis | None = None

    async def _get_client(self) -> aioredis.Redis:
        """Get or create Redis client."""
        if self._client is None:
            self._client = aioredis.from_url(
                self.redis_url, encoding="utf-8", decode_responses=True
            )
        return self._client

    def _make_key(self, key: str) -> str:
        """Create prefixed Redis key for a session key."""
        return f"{self.prefix}{key}"

    async def get(self, key: str) -> dict | None:
        """Load a session."""
        client = await self._get_client()
        serialized = await client.get(self._make_key(key))

        if serialized is None:
            return None

        return json.loads(serialized)

    async def set(self, key: str, value: dict) -> None:
        """Persist a session."""
        client = await self._get_client()
        serialized = json.dumps(value)
        await client.set(self._make_key(key), serialized, ex=self.ttl)

    async def delete(self, key: str) -> None:
        """Delete a session."""
        client = await self._get_client()
        await client.delete(self._make_key(key))

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def get_session_store(settings: Settings | None = None) -> SessionStore:
    """Factory function to create the session store selected by configuration.

    Settings used:
        session_store: Type of store ('memory' or 'redis'), default: 'memory'
        redis_url: Redis URL, default: 'redis://localhost:6379'
        session_prefix: Key prefix, default: 'botmachine:session:'
        session_ttl_seconds: Optional TTL in seconds

    Returns:
        Configured session store instance
    """
    settings = settings or get_settings()
    store_type = settings.session_store.lower()

    if store_type == "redis":
        return RedisSessionStore(
            redis_url=settings.redis_url,
            prefix=settings.session_prefix,
            ttl=settings.session_ttl_seconds,
        )
    elif store_type == "memory":
        return InMemorySessionStore(ttl=settings.session_ttl_seconds)

    raise ValueError(f"Unknown session store: {settings.session_store}")
