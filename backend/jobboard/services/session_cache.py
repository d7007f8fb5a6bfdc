"""
Identity Cache - short-lived Redis cache for resolved credentials

Resolving a bearer token costs an identity-provider call plus a profile
lookup. This cache keeps the result for a few seconds so bursts of requests
from one client resolve once. Entries are dropped on sign-out, so a revoked
token is never served from cache; other staleness is bounded by the TTL.

Cache Key Pattern:
    ident:{sha256(credential)} - {"id", "email", "role"}

Provides graceful degradation when Redis is unavailable: every error is
logged and treated as a miss.
"""

import json
import hashlib
import logging
from typing import Any, Dict, Optional

import redis.asyncio as redis

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 5
KEY_PREFIX = "ident"


def hash_credential(credential: str) -> str:
    """Hex SHA-256 of a credential; raw tokens are never used as keys."""
    return hashlib.sha256(credential.encode()).hexdigest()


class IdentityCache:
    """
    Redis-backed cache of resolved identities.

    Attributes:
        redis: Async Redis client (created lazily)
        ttl: Entry lifetime in seconds
        stats: Hit/miss counters
    """

    def __init__(self, redis_url: str, ttl: int = DEFAULT_TTL_SECONDS):
        self.redis_url = redis_url
        self.ttl = ttl
        self.redis: Optional[redis.Redis] = None
        self.stats: Dict[str, int] = {"hits": 0, "misses": 0}

    async def _ensure_connected(self) -> Optional[redis.Redis]:
        if self.redis is None:
            try:
                self.redis = redis.from_url(
                    self.redis_url,
                    encoding="utf-8",
                    decode_responses=True
                )
            except Exception as e:
                logger.warning(f"Failed to connect to Redis: {e}")
                return None
        return self.redis

    def _key(self, credential: str) -> str:
        return f"{KEY_PREFIX}:{hash_credential(credential)}"

    async def get(self, credential: str) -> Optional[Dict[str, Any]]:
        """
        Look up a resolved identity.

        Returns:
            Cached identity dict or None on miss/error
        """
        try:
            client = await self._ensure_connected()
            if not client:
                return None

            cached = await client.get(self._key(credential))
            if cached:
                self.stats["hits"] += 1
                return json.loads(cached)

            self.stats["misses"] += 1
            return None

        except Exception as e:
            logger.warning(f"Redis get error (identity cache): {e}")
            self.stats["misses"] += 1
            return None

    async def set(self, credential: str, identity: Dict[str, Any]) -> bool:
        try:
            client = await self._ensure_connected()
            if not client:
                return False

            await client.setex(self._key(credential), self.ttl, json.dumps(identity))
            return True

        except Exception as e:
            logger.warning(f"Redis set error (identity cache): {e}")
            return False

    async def invalidate(self, credential: str) -> bool:
        """Drop the entry for a credential (sign-out)."""
        try:
            client = await self._ensure_connected()
            if not client:
                return False

            result = await client.delete(self._key(credential))
            return result > 0

        except Exception as e:
            logger.warning(f"Redis delete error (identity cache): {e}")
            return False

    async def close(self) -> None:
        if self.redis:
            await self.redis.close()
            self.redis = None
