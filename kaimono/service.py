"""
Cart service container and the handler-boundary helpers.

``CartService`` bundles the collaborators every route needs. Routes call
one collaborator at a time and pass failures through ``raise_for_step``
with the status codes that step is allowed to produce.
"""

from __future__ import annotations

import logging
from typing import Mapping, NoReturn, Optional

from fastapi import HTTPException, Request
from pydantic import ValidationError

from kaimono.auth import (
    AdminAuthorizer,
    Authorizer,
    SessionRegistry,
    SessionUserContextResolver,
    UserContextResolver,
)
from kaimono.cart import Cart, CartStore, InMemoryCartStore, RedisCartStore, UpdateCartRequest
from kaimono.config import Settings
from kaimono.db import create_redis
from kaimono.errors import ERROR_DECODE_FAILED, ErrorKind, classify
from kaimono.logging import get_logger

logger = get_logger(__name__)


class CartService:
    def __init__(
        self,
        store: CartStore,
        resolver: UserContextResolver,
        authorizer: Authorizer,
        logger: Optional[logging.Logger] = None,
    ):
        self.store = store
        self.resolver = resolver
        self.authorizer = authorizer
        self.logger = logger or get_logger("kaimono.service")

    @classmethod
    def from_settings(cls, settings: Settings, sessions: Optional[SessionRegistry] = None) -> "CartService":
        """Wire the default collaborators for ``settings``."""
        if sessions is None:
            sessions = SessionRegistry(ttl_days=settings.session_ttl_days)
        resolver = SessionUserContextResolver(sessions, cookie_name=settings.session_cookie_name)
        authorizer = AdminAuthorizer(resolver, settings.admin_user_ids)

        if settings.cart_store == "redis":
            store: CartStore = RedisCartStore(create_redis(settings), sessions)
        else:
            store = InMemoryCartStore(sessions)

        return cls(store=store, resolver=resolver, authorizer=authorizer)


def raise_for_step(
    exc: Exception,
    status_codes: Mapping[ErrorKind, int],
    log: Optional[logging.Logger] = None,
) -> NoReturn:
    """
    Classify ``exc`` once and raise the matching HTTPException.

    Kinds missing from ``status_codes`` are infrastructure errors (500).
    """
    log = log or logger
    kind = classify(exc)
    status_code = status_codes.get(kind, 500)

    if status_code >= 500:
        log.error(f"Unexpected {kind.value} error: {exc}", exc_info=exc)
    else:
        log.info(f"Request failed with {status_code} ({kind.value})")

    raise HTTPException(status_code=status_code, detail=str(exc)) from exc


async def decode_cart(request: Request) -> Cart:
    """Decode a ``{"data": Cart}`` body; any failure is a 400."""
    raw = await request.body()
    try:
        return UpdateCartRequest.model_validate_json(raw).data
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
            for err in e.errors()
        )
        raise HTTPException(status_code=400, detail=f"{ERROR_DECODE_FAILED}: {problems}") from e
