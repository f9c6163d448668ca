# app/infrastructure/cache/redis_content_cache.py
from __future__ import annotations

import json
import logging
from typing import Any, Optional

import redis

from app.utils.content_hash import content_digest

logger = logging.getLogger(__name__)

DEFAULT_TTL_SEC = 30 * 24 * 3600



"""
Content-addressed cache of generated copy (shared by every worker through Redis).
    key:   {prefix}:{sha256(canonical JSON of the optimized batch)}
    value: JSON of the generated product list, SETEX with TTL (30 days by default)

Best effort only: a Redis or decode failure is logged and treated as a miss
(read) or dropped (write), generation carries on without the cache.
"""
class ContentCache:

    def __init__(self, client, *, prefix: str = "ai:products", ttl_sec: int = DEFAULT_TTL_SEC):
        self.r = client
        self.prefix = prefix.rstrip(":")
        self.ttl_sec = int(ttl_sec)


    """
       Build the cache from settings; None when disabled or no Redis URL is configured.
    """
    @classmethod
    def from_settings(cls) -> ContentCache | None:
        from app.core.config import settings

        if not settings.CONTENT_CACHE_ENABLED:
            return None

        url = settings.redis_for_cache
        if not url:
            logger.warning("Content cache disabled (no redis url).")
            return None

        return cls(
            client=redis.from_url(url, decode_responses=True),
            prefix=settings.CONTENT_CACHE_KEY_PREFIX,
            ttl_sec=settings.CONTENT_CACHE_TTL_SEC,
        )


    def key_for(self, batch: Any) -> str:
        return f"{self.prefix}:{content_digest(batch)}"


    def get(self, key: str) -> Optional[Any]:
        try:
            raw = self.r.get(key)
        except redis.RedisError as e:
            logger.warning("content cache get failed key=%s err=%s", key, e)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.warning("content cache entry unreadable key=%s err=%s", key, e)
            return None


    def set(self, key: str, content: Any, ttl: Optional[int] = None) -> bool:
        try:
            self.r.setex(key, int(ttl or self.ttl_sec), json.dumps(content, ensure_ascii=False))
            return True
        except (redis.RedisError, TypeError, ValueError) as e:
            logger.warning("content cache set failed key=%s err=%s", key, e)
            return False


    def delete(self, key: str) -> bool:
        try:
            return bool(self.r.delete(key))
        except redis.RedisError as e:
            logger.warning("content cache delete failed key=%s err=%s", key, e)
            return False


    """
        Drop every entry under this prefix (SCAN, never KEYS); returns the number deleted.
    """
    def clear(self) -> int:
        removed = 0
        try:
            batch = []
            for key in self.r.scan_iter(match=f"{self.prefix}:*", count=500):
                batch.append(key)
                if len(batch) >= 500:
                    removed += self.r.delete(*batch)
                    batch = []
            if batch:
                removed += self.r.delete(*batch)
        except redis.RedisError as e:
            logger.warning("content cache clear failed prefix=%s err=%s", self.prefix, e)
        return removed
