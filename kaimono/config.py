"""
Application settings.

All values come from environment variables; nothing is read from disk.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache


def _get_env(key: str, default: str = "") -> str:
    value = os.environ.get(key)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def _get_list(key: str, default: str = "") -> tuple[str, ...]:
    raw = _get_env(key, default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    cart_store: str = "memory"
    redis_url: str = ""
    redis_token: str = ""
    session_cookie_name: str = "kaimono_session"
    session_ttl_days: int = 7
    admin_user_ids: tuple[str, ...] = field(default_factory=tuple)
    cors_origins: tuple[str, ...] = ("*",)

    @classmethod
    def from_env(cls) -> "Settings":
        store = _get_env("CART_STORE", "memory").lower()
        if store not in ("memory", "redis"):
            raise ValueError(f"CART_STORE must be 'memory' or 'redis', got {store!r}")

        settings = cls(
            cart_store=store,
            redis_url=_get_env("UPSTASH_REDIS_REST_URL"),
            redis_token=_get_env("UPSTASH_REDIS_REST_TOKEN"),
            session_cookie_name=_get_env("SESSION_COOKIE_NAME", "kaimono_session"),
            session_ttl_days=int(_get_env("SESSION_TTL_DAYS", "7")),
            admin_user_ids=_get_list("ADMIN_USER_IDS"),
            cors_origins=_get_list("CORS_ORIGINS", "*"),
        )

        if settings.cart_store == "redis" and not (settings.redis_url and settings.redis_token):
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")

        return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings loaded once per process."""
    return Settings.from_env()
