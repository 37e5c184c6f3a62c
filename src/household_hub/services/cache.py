"""Query cache with request de-duplication and optimistic updates."""

import asyncio
import hashlib
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

_logger = logging.getLogger(__name__)


class Cache(Protocol):
    """Cache interface for simple key-value data."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: object, ttl_seconds: int | None = None) -> None:
        """Store a cached value with a TTL in seconds."""

    def invalidate(self, prefix: str) -> None:
        """Drop the entry at a key and every entry nested below it."""


@dataclass
class _CacheEntry:
    value: object
    expires_at: datetime


@dataclass(frozen=True, eq=False)
class PendingMutation:
    """Tentative local patch awaiting the server's answer."""

    key: str
    previous: object
    tentative: object


def scoped_key(token: str, *parts: str) -> str:
    """Build a cache key private to the holder of an auth token."""
    scope = hashlib.sha256(token.encode()).hexdigest()[:16]
    return ":".join((scope, *parts))


class QueryCache(Cache):
    """In-memory query cache shared by the services of one process."""

    def __init__(self, ttl_seconds: int = 30) -> None:
        self.ttl_seconds = ttl_seconds
        self._entries: dict[str, _CacheEntry] = {}
        self._inflight: dict[str, asyncio.Task[object]] = {}
        self._pending: dict[str, list[PendingMutation]] = {}

    def get(self, key: str) -> object | None:
        """Return a cached value if it hasn't expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if datetime.now(tz=UTC) >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: object, ttl_seconds: int | None = None) -> None:
        """Store a cached value with a TTL."""
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        expires_at = datetime.now(tz=UTC) + timedelta(seconds=ttl)
        self._entries[key] = _CacheEntry(value=value, expires_at=expires_at)

    def invalidate(self, prefix: str) -> None:
        """Drop the entry at a key and every entry below it."""
        nested = prefix + ":"
        stale = [
            key for key in self._entries if key == prefix or key.startswith(nested)
        ]
        for key in stale:
            del self._entries[key]

    async def fetch(
        self,
        key: str,
        loader: Callable[[], Awaitable[object]],
        ttl_seconds: int | None = None,
    ) -> object:
        """Return the cached value or load it, sharing concurrent loads.

        A cancelled caller only drops its own wait; the shared load keeps
        running for the others and still fills the cache.
        """
        cached = self.get(key)
        if cached is not None:
            return cached
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._load(key, loader, ttl_seconds))
            self._inflight[key] = task
            task.add_done_callback(lambda done: self._finish(key, done))
        return await asyncio.shield(task)

    async def _load(
        self,
        key: str,
        loader: Callable[[], Awaitable[object]],
        ttl_seconds: int | None,
    ) -> object:
        value = await loader()
        self.set(key, value, ttl_seconds)
        return value

    def _finish(self, key: str, task: "asyncio.Task[object]") -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        if not task.cancelled() and task.exception() is not None:
            _logger.info("Load of %s failed: %s", key, task.exception())

    def apply_optimistic(
        self, key: str, patch: Callable[[object], object]
    ) -> PendingMutation | None:
        """Apply a tentative patch to a cached value and track it as pending.

        Returns ``None`` when nothing is cached under the key.
        """
        current = self.get(key)
        if current is None:
            return None
        tentative = patch(current)
        self.set(key, tentative)
        pending = PendingMutation(key=key, previous=current, tentative=tentative)
        self._pending.setdefault(key, []).append(pending)
        return pending

    def confirm(self, pending: PendingMutation, server_value: object = None) -> None:
        """Replace a pending patch with server truth.

        Without a server value the key is invalidated so the next read
        reloads it.
        """
        self._forget(pending)
        if server_value is None:
            self._entries.pop(pending.key, None)
        else:
            self.set(pending.key, server_value)

    def rollback(self, pending: PendingMutation) -> None:
        """Undo a pending patch after the server rejected it."""
        self._forget(pending)
        entry = self._entries.get(pending.key)
        if entry is not None and entry.value is pending.tentative:
            self.set(pending.key, pending.previous)
            return
        # Superseded by a newer write; reload instead of guessing.
        _logger.info("Rollback of superseded entry %s, invalidating", pending.key)
        self._entries.pop(pending.key, None)

    def is_pending(self, key: str) -> bool:
        """Return whether a key has unacknowledged optimistic patches."""
        return bool(self._pending.get(key))

    def _forget(self, pending: PendingMutation) -> None:
        mutations = self._pending.get(pending.key, [])
        if pending in mutations:
            mutations.remove(pending)
        if not mutations:
            self._pending.pop(pending.key, None)
