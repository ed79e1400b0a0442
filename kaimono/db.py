"""
Redis client construction and key layout.

Carts live in Upstash Redis when ``CART_STORE=redis``.
"""

from upstash_redis.asyncio import Redis as AsyncRedis

from kaimono.config import Settings


def create_redis(settings: Settings) -> AsyncRedis:
    """
    Build an async Upstash Redis client.

    Uses the standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    if not settings.redis_url or not settings.redis_token:
        raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
    return AsyncRedis(url=settings.redis_url, token=settings.redis_token)


class RedisKeys:
    """Redis key prefixes for cart data."""

    CART = "cart:"  # cart:{cart_id} -> cart JSON
    SESSION_CART = "session:cart:"  # session:cart:{session_token} -> cart_id
    CART_SESSION = "cart_session:"  # cart_session:{cart_id} -> session_token

    @staticmethod
    def cart_key(cart_id: str) -> str:
        return f"{RedisKeys.CART}{cart_id}"

    @staticmethod
    def session_cart_key(session_token: str) -> str:
        return f"{RedisKeys.SESSION_CART}{session_token}"

    @staticmethod
    def cart_session_key(cart_id: str) -> str:
        return f"{RedisKeys.CART_SESSION}{cart_id}"
