# followgraph/services/follow_cache.py
"""
Read-through cache for follower/following lists and counts.

Only default queries are cached: lists fetched without extra filters, and
counts. Entries are deleted (never updated) when a relationship touching
them is created or removed.
"""
import enum
import json
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

import redis
from redis.exceptions import RedisError

from followgraph.core.config import settings

logger = logging.getLogger(__name__)


class _Miss:
    """Marker for "no cache entry". An empty list or zero is a valid hit."""

    def __repr__(self):
        return "CACHE_MISS"

    def __bool__(self):
        return False


CACHE_MISS = _Miss()


class QueryKind(str, enum.Enum):
    FOLLOWERS = "followers"
    FOLLOWING = "following"
    FOLLOWERS_COUNT = "followers_count"
    FOLLOWING_COUNT = "following_count"


@dataclass(frozen=True)
class CacheKey:
    """Typed cache key.

    `object` is the count namespace ('user', 'user_blogs', 'blogs') and is
    left empty for list entries, which are keyed by follow type alone.
    """
    kind: QueryKind
    subject_id: int
    follow_type: str = ""
    object: str = ""

    def render(self, prefix: str) -> str:
        return f"{prefix}:{self.kind.value}:{self.object}:{self.follow_type}:{self.subject_id}"


def count_objects(follow_type: str) -> Tuple[str, ...]:
    """Every count namespace a relationship of `follow_type` can appear under."""
    if not follow_type:
        return ("user",)
    return (f"user_{follow_type}", follow_type)


def relationship_keys(leader_id: int, follower_id: int, follow_type: str) -> List[CacheKey]:
    """Cache entries that go stale when (leader, follower, type) changes."""
    keys = [
        CacheKey(QueryKind.FOLLOWERS, leader_id, follow_type),
        CacheKey(QueryKind.FOLLOWING, follower_id, follow_type),
    ]
    for obj in count_objects(follow_type):
        for subject_id in (leader_id, follower_id):
            keys.append(CacheKey(QueryKind.FOLLOWERS_COUNT, subject_id, follow_type, obj))
            keys.append(CacheKey(QueryKind.FOLLOWING_COUNT, subject_id, follow_type, obj))
    return keys


class CacheStore(ABC):
    """Key-value backend for the follow cache."""

    @abstractmethod
    def get(self, key: str) -> Any:
        """Cached value, or CACHE_MISS."""

    @abstractmethod
    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        pass

    @abstractmethod
    def delete_many(self, keys: Iterable[str]) -> int:
        pass


class InMemoryCacheStore(CacheStore):
    """Process-local cache store."""

    def __init__(self, default_ttl: Optional[int] = None):
        self.default_ttl = default_ttl
        self._data: Dict[str, Tuple[Any, Optional[float]]] = {}

    def get(self, key: str) -> Any:
        entry = self._data.get(key)
        if entry is None:
            return CACHE_MISS

        value, expires_at = entry
        if expires_at is not None and expires_at <= time.monotonic():
            del self._data[key]
            return CACHE_MISS
        return list(value) if isinstance(value, list) else value

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        ttl = self.default_ttl if ttl is None else ttl
        expires_at = time.monotonic() + ttl if ttl else None
        # Copy lists so callers can't mutate cached state
        self._data[key] = (list(value) if isinstance(value, list) else value, expires_at)
        return True

    def delete_many(self, keys: Iterable[str]) -> int:
        deleted = 0
        for key in keys:
            if self._data.pop(key, None) is not None:
                deleted += 1
        return deleted


class RedisCacheStore(CacheStore):
    """
    Redis-backed cache store.

    Connection or command failures are logged and treated as a miss; the
    cache only holds derived data.
    """

    def __init__(self, redis_client=None, redis_url: Optional[str] = None, default_ttl: Optional[int] = None):
        self.default_ttl = default_ttl

        if redis_client is not None:
            self.redis_client = redis_client
            self.connected = True
            return

        self.redis_url = redis_url or settings.REDIS_URL
        try:
            self.redis_client = redis.from_url(
                self.redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
                health_check_interval=30
            )

            # Test connection
            self.redis_client.ping()
            logger.info(f"Follow cache connected to {self.redis_url}")
            self.connected = True

        except RedisError as e:
            logger.warning(f"Redis connection failed: {e}. Follow cache will be disabled.")
            self.redis_client = None
            self.connected = False

    def get(self, key: str) -> Any:
        if not self.connected or not self.redis_client:
            return CACHE_MISS

        try:
            value = self.redis_client.get(key)
        except RedisError as e:
            logger.warning(f"Follow cache get error for {key}: {e}")
            return CACHE_MISS

        if value is None:
            return CACHE_MISS

        try:
            return json.loads(value)
        except (TypeError, ValueError):
            logger.warning(f"Discarding undecodable follow cache entry {key}")
            return CACHE_MISS

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        if not self.connected or not self.redis_client:
            return False

        ttl = self.default_ttl if ttl is None else ttl
        try:
            if ttl:
                self.redis_client.setex(key, ttl, json.dumps(value))
            else:
                self.redis_client.set(key, json.dumps(value))
            return True
        except RedisError as e:
            logger.warning(f"Follow cache set error for {key}: {e}")
            return False

    def delete_many(self, keys: Iterable[str]) -> int:
        keys = list(keys)
        if not keys or not self.connected or not self.redis_client:
            return 0

        try:
            return self.redis_client.delete(*keys)
        except RedisError as e:
            logger.error(f"Follow cache invalidation error: {e}")
            return 0


class FollowCache:
    """Typed-key facade over a CacheStore, with hit/miss statistics."""

    def __init__(self, store: CacheStore, prefix: Optional[str] = None, ttl: Optional[int] = None):
        self.store = store
        self.prefix = prefix or settings.FOLLOW_CACHE_PREFIX
        self.ttl = ttl
        self.stats = {"hits": 0, "misses": 0, "sets": 0, "invalidations": 0}

    def get(self, key: CacheKey) -> Any:
        value = self.store.get(key.render(self.prefix))
        if value is CACHE_MISS:
            self.stats["misses"] += 1
            logger.debug(f"Follow cache miss: {key}")
        else:
            self.stats["hits"] += 1
            logger.debug(f"Follow cache hit: {key}")
        return value

    def set(self, key: CacheKey, value: Any) -> None:
        if self.store.set(key.render(self.prefix), value, self.ttl):
            self.stats["sets"] += 1

    def invalidate(self, keys: Iterable[CacheKey]) -> int:
        deleted = self.store.delete_many(key.render(self.prefix) for key in keys)
        self.stats["invalidations"] += deleted
        return deleted

    def invalidate_relationship(self, leader_id: int, follower_id: int, follow_type: str) -> int:
        deleted = self.invalidate(relationship_keys(leader_id, follower_id, follow_type))
        logger.debug(f"Invalidated {deleted} follow cache entries for {leader_id}<-{follower_id} ({follow_type or 'user'})")
        return deleted


def build_cache_store() -> CacheStore:
    """Cache store selected by CACHE_BACKEND."""
    ttl = settings.FOLLOW_CACHE_TTL or None
    if settings.CACHE_BACKEND == "redis":
        return RedisCacheStore(redis_url=settings.REDIS_URL, default_ttl=ttl)
    return InMemoryCacheStore(default_ttl=ttl)
