"""
Redis connection helpers for the Redis document backend.
"""

import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from coffee_golf_bot.config import Config

logger = logging.getLogger(__name__)

LOCAL_REDIS_URL = 'redis://localhost:6379'


class RedisUtils:
    """Resolves and checks the Redis URL, then opens a client."""

    @staticmethod
    def is_secure_url(redis_url: str) -> bool:
        """TLS plus credentials; anything else is only acceptable with DEBUG on."""
        return redis_url.startswith('rediss://') and '@' in redis_url

    @staticmethod
    def resolve_redis_url() -> Optional[str]:
        redis_url = Config.REDIS_URL
        if not redis_url:
            if Config.DEBUG:
                logger.warning(f"REDIS_URL not set, falling back to {LOCAL_REDIS_URL} (DEBUG mode)")
                return LOCAL_REDIS_URL
            logger.error("REDIS_URL is required when STORAGE_BACKEND is 'redis'")
            return None

        if not RedisUtils.is_secure_url(redis_url):
            if not Config.DEBUG:
                logger.error("REDIS_URL must use rediss:// with credentials outside DEBUG mode")
                return None
            logger.warning("Using an unencrypted Redis connection (DEBUG mode)")
        return redis_url

    @staticmethod
    async def create_redis_client() -> Optional['redis.Redis']:
        """Open and ping a client. Returns None if Redis can't be reached."""
        redis_url = RedisUtils.resolve_redis_url()
        if not redis_url:
            return None

        client = redis.from_url(redis_url, decode_responses=True)
        try:
            await client.ping()
        except RedisError as e:
            logger.error(f"Failed to connect to Redis: {e}")
            await client.aclose()
            return None

        logger.info("Connected to Redis")
        return client
