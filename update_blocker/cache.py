"""
Transient Stores

The host's site-transient cache, where update-check results live between
checks. The update filter only ever deletes from it; get/set exist so hosts
and tests can use the same store for the whole update flow.

Provides:
- TransientStore protocol
- InMemoryTransientStore: process-local LRU with TTL
- RedisTransientStore: shared store backed by Redis
"""

from __future__ import annotations

import json
import logging
import time
from collections import OrderedDict
from typing import Any, Protocol

import redis

logger = logging.getLogger(__name__)


class TransientStore(Protocol):
    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any, ttl: int | None = None) -> None: ...

    def delete(self, key: str) -> bool: ...


class InMemoryTransientStore:
    """
    Simple in-memory transient store.

    Entries expire after their TTL; the least recently used entry is evicted
    once ``max_size`` is exceeded.
    """

    def __init__(self, max_size: int = 1000, clock=time.time):
        self._cache: OrderedDict = OrderedDict()
        self._max_size = max_size
        self._clock = clock

    def get(self, key: str) -> Any | None:
        """Get value and move to end (most recently used)."""
        if key not in self._cache:
            return None
        self._cache.move_to_end(key)
        value, expiry = self._cache[key]
        if expiry is not None and self._clock() > expiry:
            del self._cache[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Set value with optional TTL in seconds."""
        expiry = self._clock() + ttl if ttl else None
        if key in self._cache:
            self._cache.move_to_end(key)
        self._cache[key] = (value, expiry)

        # Evict oldest if over capacity
        while len(self._cache) > self._max_size:
            self._cache.popitem(last=False)

    def delete(self, key: str) -> bool:
        if key in self._cache:
            del self._cache[key]
            return True
        return False

    def __contains__(self, key: str) -> bool:
        if key not in self._cache:
            return False
        _, expiry = self._cache[key]
        return expiry is None or self._clock() <= expiry

    def __len__(self) -> int:
        return len(self._cache)


class RedisTransientStore:
    """
    Transient store backed by Redis, for hosts running several processes.

    Values are stored as JSON under ``<prefix><key>``. Connection failures on
    get and delete are logged and reported as a miss / nothing deleted.
    """

    PREFIX = "transient:site:"

    def __init__(self, client: redis.Redis, prefix: str = PREFIX):
        self._redis = client
        self._prefix = prefix

    @classmethod
    def from_url(cls, url: str, prefix: str = PREFIX) -> RedisTransientStore:
        return cls(redis.Redis.from_url(url, decode_responses=True), prefix)

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def get(self, key: str) -> Any | None:
        try:
            raw = self._redis.get(self._key(key))
        except redis.RedisError as exc:
            logger.warning("Transient get error for %s: %s", key, exc)
            return None
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        payload = json.dumps(value, default=str)
        if ttl:
            self._redis.setex(self._key(key), ttl, payload)
        else:
            self._redis.set(self._key(key), payload)

    def delete(self, key: str) -> bool:
        try:
            return bool(self._redis.delete(self._key(key)))
        except redis.RedisError as exc:
            logger.warning("Transient delete error for %s: %s", key, exc)
            return False
