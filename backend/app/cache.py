"""
Caching layer for external Uber price quotes.
Uses Redis for shared caching when configured, in-memory cache otherwise.
"""

import json
import logging
import time
from typing import Any, Dict, List, Optional

import redis

from app.config import settings

logger = logging.getLogger(__name__)


class QuoteCache:
    """
    Two-level cache for external price quotes:
    1. In-memory dict with TTL (process level)
    2. Redis cache (shared across processes)

    Quotes are plain lists of estimate dicts. Only successful external
    responses are stored; mock estimates are never cached.
    """

    def __init__(self, redis_url: Optional[str] = None, ttl: int = 60, max_entries: int = 1024):
        """
        Initialize cache with optional Redis connection.

        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379)
            ttl: Time to live in seconds
            max_entries: Upper bound on quotes held in memory
        """
        self.ttl = ttl
        self.max_entries = max_entries
        self.redis_client = None

        self._memory_cache: Dict[str, Any] = {}
        self._cache_timestamps: Dict[str, float] = {}

        if redis_url:
            try:
                self.redis_client = redis.from_url(redis_url)
                self.redis_client.ping()
                logger.info("Redis quote cache initialized")
            except redis.RedisError as e:
                logger.warning(f"Redis connection failed: {e}. Using in-memory cache only.")
                self.redis_client = None

    @staticmethod
    def make_key(start_lat: float, start_lng: float, end_lat: float, end_lng: float) -> str:
        """Generate cache key for a coordinate pair (about 11 m precision)."""
        return "quote:uber:" + ":".join(
            f"{value:.4f}" for value in (start_lat, start_lng, end_lat, end_lng)
        )

    def _is_memory_cache_valid(self, key: str) -> bool:
        if key not in self._cache_timestamps:
            return False
        return (time.time() - self._cache_timestamps[key]) < self.ttl

    def _drop_memory(self, key: str):
        self._memory_cache.pop(key, None)
        self._cache_timestamps.pop(key, None)

    def _store_memory(self, key: str, quote: List[dict]):
        # Re-insert so dict order stays oldest first
        self._drop_memory(key)
        if len(self._memory_cache) >= self.max_entries:
            for expired in [k for k in self._memory_cache if not self._is_memory_cache_valid(k)]:
                self._drop_memory(expired)
        while self._memory_cache and len(self._memory_cache) >= self.max_entries:
            self._drop_memory(next(iter(self._memory_cache)))

        self._memory_cache[key] = quote
        self._cache_timestamps[key] = time.time()

    def get(self, key: str) -> Optional[List[dict]]:
        """Return a cached quote, or None on a miss."""
        if key in self._memory_cache:
            if self._is_memory_cache_valid(key):
                return self._memory_cache[key]
            self._drop_memory(key)

        if self.redis_client:
            try:
                cached_value = self.redis_client.get(key)
                if cached_value:
                    quote = json.loads(cached_value)
                    self._store_memory(key, quote)
                    return quote
            except (redis.RedisError, ValueError) as e:
                logger.warning(f"Redis get error: {e}")

        return None

    def set(self, key: str, quote: List[dict]):
        """Store a quote in all cache levels."""
        self._store_memory(key, quote)

        if self.redis_client:
            try:
                self.redis_client.setex(key, self.ttl, json.dumps(quote))
            except redis.RedisError as e:
                logger.warning(f"Redis set error: {e}")

    def invalidate(self, key: Optional[str] = None):
        """
        Invalidate cache entries.
        If a key is given, drop that entry, otherwise drop every quote.
        """
        if key:
            self._drop_memory(key)
            if self.redis_client:
                try:
                    self.redis_client.delete(key)
                except redis.RedisError as e:
                    logger.warning(f"Redis delete error: {e}")
        else:
            self._memory_cache.clear()
            self._cache_timestamps.clear()
            if self.redis_client:
                try:
                    for redis_key in self.redis_client.scan_iter("quote:*"):
                        self.redis_client.delete(redis_key)
                except redis.RedisError as e:
                    logger.warning(f"Redis clear error: {e}")


# Global cache instance (singleton pattern)
_quote_cache: Optional[QuoteCache] = None


def get_quote_cache() -> QuoteCache:
    """Get singleton quote cache instance."""
    global _quote_cache
    if _quote_cache is None:
        _quote_cache = QuoteCache(
            redis_url=settings.REDIS_URL,
            ttl=settings.QUOTE_CACHE_TTL,
            max_entries=settings.QUOTE_CACHE_MAX_ENTRIES,
        )
    return _quote_cache
