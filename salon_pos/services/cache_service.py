"""
Redis cache for read-heavy account data (the POS catalog).

Entries live under ``{prefix}:{user_id}:{module}:g{generation}:{key}``.
Invalidating a module bumps its generation counter, so stale entries are
never read again and simply expire with their TTL. When Redis is down or
disabled every call degrades to a miss and the loader runs.
"""

import json
import logging
from typing import Any, Callable, Optional

import redis
from redis.exceptions import RedisError
from flask import Flask, current_app

logger = logging.getLogger(__name__)


class CacheService:

    def __init__(self, app: Optional[Flask] = None):
        self.client: Optional[redis.Redis] = None
        self.prefix = 'salon_pos'
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        self.prefix = app.config.get('CACHE_KEY_PREFIX', self.prefix)

        if not app.config.get('CACHE_ENABLED', True):
            logger.info("[CACHE] disabled by configuration")
            return

        url = app.config.get('REDIS_URL', 'redis://localhost:6379/0')
        try:
            client = redis.from_url(url, decode_responses=True, socket_connect_timeout=2, socket_timeout=2)
            client.ping()
        except RedisError as e:
            logger.warning(f"[CACHE] Redis unreachable at {url}: {e}; running without cache")
            return

        self.client = client
        logger.info(f"[CACHE] using {url}")

    @property
    def available(self) -> bool:
        return self.client is not None

    def _generation_key(self, user_id: str, module: str) -> str:
        return f"{self.prefix}:{user_id}:{module}:gen"

    def _key(self, user_id: str, module: str, key: str) -> str:
        generation = self.client.get(self._generation_key(user_id, module)) or '0'
        return f"{self.prefix}:{user_id}:{module}:g{generation}:{key}"

    def get(self, user_id: str, module: str, key: str) -> Optional[Any]:
        if not self.available:
            return None
        try:
            raw = self.client.get(self._key(user_id, module, key))
        except RedisError as e:
            logger.warning(f"[CACHE] read failed: {e}")
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning(f"[CACHE] dropping unreadable entry {module}:{key}")
            return None

    def set(self, user_id: str, module: str, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Store a JSON-serializable value. Returns False when nothing was written."""
        if not self.available:
            return False
        if ttl is None:
            ttl = current_app.config.get('CACHE_DEFAULT_TTL', 60)
        try:
            self.client.setex(self._key(user_id, module, key), ttl, json.dumps(value))
        except (RedisError, TypeError) as e:
            logger.warning(f"[CACHE] write failed: {e}")
            return False
        return True

    def memoize(self, user_id: str, module: str, key: str, loader: Callable[[], Any],
                ttl: Optional[int] = None) -> Any:
        """Cached value, or the loader's result (stored for next time)."""
        cached = self.get(user_id, module, key)
        if cached is not None:
            logger.debug(f"[CACHE] hit {user_id}:{module}:{key}")
            return cached
        value = loader()
        self.set(user_id, module, key, value, ttl)
        return value

    def invalidate_module(self, user_id: str, module: str) -> None:
        """Forget every entry of a module for one account."""
        if not self.available:
            return
        try:
            self.client.incr(self._generation_key(user_id, module))
        except RedisError as e:
            logger.warning(f"[CACHE] invalidation of {module} failed: {e}")


_cache: Optional[CacheService] = None


def init_cache(app: Flask) -> CacheService:
    global _cache
    _cache = CacheService(app)
    app.extensions['cache'] = _cache
    return _cache


def get_cache() -> CacheService:
    if _cache is None:
        raise RuntimeError("Cache not initialized; call init_cache(app) first.")
    return _cache
