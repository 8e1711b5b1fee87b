# app/core/redis.py

import redis.asyncio as redis

from app.core.config import REDIS_URL


# decode_responses so flag and session values come back as str
redis_client = redis.from_url(REDIS_URL, decode_responses=True)


def get_redis():
    """FastAPI dependency returning the shared async Redis client."""
    return redis_client
