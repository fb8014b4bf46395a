"""
Response Cache
Caches JSON-serializable endpoint results in Redis.
"""

import json
import logging
from functools import wraps

import redis.asyncio as redis
from fastapi import Request

logger = logging.getLogger(__name__)


def create_redis_client(redis_url: str):
    """Return a Redis client, or None when caching is not configured."""
    if not redis_url:
        return None
    return redis.from_url(redis_url, decode_responses=True)


def cache_response(prefix: str):
    """
    Cache the decorated endpoint's result for `stats_cache_ttl_seconds`.

    The endpoint must accept a `request: Request` parameter. The cache key is
    the prefix plus the request's query string. Redis failures fall through
    to the endpoint.
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            request: Request = kwargs["request"]
            client = request.app.state.redis
            if client is None:
                return await func(*args, **kwargs)

            key = f"cache:{prefix}:{request.url.query}"
            try:
                cached = await client.get(key)
                if cached:
                    return json.loads(cached)
            except redis.RedisError as e:
                logger.warning(f"Cache read error for {key}: {e}")

            result = await func(*args, **kwargs)

            try:
                ttl = request.app.state.settings.stats_cache_ttl_seconds
                await client.setex(key, ttl, json.dumps(result))
            except redis.RedisError as e:
                logger.warning(f"Cache write error for {key}: {e}")

            return result
        return wrapper
    return decorator
