"""Cart store backed by Upstash Redis."""
from typing import Optional

from pydantic import ValidationError

from kaimono.auth.session import SessionRegistry
from kaimono.db import RedisKeys
from kaimono.errors import AlreadyExistsError, CartNotFoundError, SessionNotFoundError
from kaimono.logging import get_logger, sanitize_id_for_logging

from .models import Cart
from .storage import CartStore

logger = get_logger(__name__)


class RedisCartStore(CartStore):
    """
    Carts are JSON strings under ``cart:{id}``.

    Session binding uses two keys so either side can be resolved.
    ``SET NX`` on the session key makes concurrent creates for one
    session resolve to a single winner; ``SET XX`` keeps ``replace``
    from resurrecting a deleted cart.
    """

    def __init__(self, redis, sessions: SessionRegistry):
        self.redis = redis
        self._sessions = sessions

    def _require_session(self, session_token: str) -> None:
        if not self._sessions.exists(session_token):
            raise SessionNotFoundError()

    async def _unbind(self, cart_id: str) -> None:
        """Drop both session side keys for ``cart_id``."""
        session_token = await self.redis.get(RedisKeys.cart_session_key(cart_id))
        await self.redis.delete(RedisKeys.cart_session_key(cart_id))
        if not session_token:
            return

        session_key = RedisKeys.session_cart_key(session_token)
        # The session may have been rebound since
        if await self.redis.get(session_key) == cart_id:
            await self.redis.delete(session_key)

    async def _load(self, cart_id: str) -> Cart:
        key = RedisKeys.cart_key(cart_id)
        data = await self.redis.get(key)
        if not data:
            raise CartNotFoundError()

        try:
            return Cart.model_validate_json(data)
        except ValidationError as e:
            # Corrupted data - clear it with its binding and report as missing
            logger.warning(f"Corrupted cart data for {sanitize_id_for_logging(cart_id)}: {e}")
            await self.redis.delete(key)
            await self._unbind(cart_id)
            raise CartNotFoundError() from e

    async def _bound_cart(self, session_key: str) -> Optional[Cart]:
        """
        Return the cart ``session_key`` points at.

        A binding whose cart is gone is cleared and reported as None.
        """
        bound_id = await self.redis.get(session_key)
        if not bound_id:
            return None
        try:
            return await self._load(bound_id)
        except CartNotFoundError:
            logger.warning(f"Clearing stale binding to cart {sanitize_id_for_logging(bound_id)}")
            if await self.redis.get(session_key) == bound_id:
                await self.redis.delete(session_key, RedisKeys.cart_session_key(bound_id))
            return None

    async def _write(self, cart: Cart, **flags):
        return await self.redis.set(
            RedisKeys.cart_key(cart.id),
            cart.model_dump_json(by_alias=True),
            **flags,
        )

    async def lookup_by_id(self, cart_id: str) -> Cart:
        return await self._load(cart_id)

    async def lookup_by_session(self, session_token: str) -> Cart:
        self._require_session(session_token)
        cart_id = await self.redis.get(RedisKeys.session_cart_key(session_token))
        if not cart_id:
            raise CartNotFoundError()
        return await self._load(cart_id)

    async def create_unbound(self) -> Cart:
        cart = Cart.empty()
        await self._write(cart)
        return cart

    async def create_for_session(self, session_token: str) -> Cart:
        self._require_session(session_token)

        cart = Cart.empty()
        await self._write(cart)
        session_key = RedisKeys.session_cart_key(session_token)

        # Retry once after a stale binding was cleared
        for _ in range(2):
            if await self.redis.set(session_key, cart.id, nx=True):
                await self.redis.set(RedisKeys.cart_session_key(cart.id), session_token)
                return cart

            existing = await self._bound_cart(session_key)
            if existing is not None:
                # Lost the race or a cart already existed; drop the orphan
                await self.redis.delete(RedisKeys.cart_key(cart.id))
                raise AlreadyExistsError(cart=existing)

        await self.redis.delete(RedisKeys.cart_key(cart.id))
        raise AlreadyExistsError()

    async def replace(self, cart: Cart) -> Cart:
        updated = await self._write(cart, xx=True)
        if not updated:
            raise CartNotFoundError()
        return cart

    async def delete_by_id(self, cart_id: str) -> None:
        deleted = await self.redis.delete(RedisKeys.cart_key(cart_id))
        if not deleted:
            raise CartNotFoundError()
        await self._unbind(cart_id)

    async def assign_to_session(self, cart_id: str, session_token: str) -> None:
        self._require_session(session_token)
        await self._load(cart_id)

        session_key = RedisKeys.session_cart_key(session_token)
        for _ in range(2):
            if await self.redis.set(session_key, cart_id, nx=True):
                break

            existing = await self._bound_cart(session_key)
            if existing is None:
                continue
            if existing.id == cart_id:
                return
            raise AlreadyExistsError(cart=existing)
        else:
            raise AlreadyExistsError()

        previous = await self.redis.get(RedisKeys.cart_session_key(cart_id))
        if previous:
            await self.redis.delete(RedisKeys.session_cart_key(previous))
        await self.redis.set(RedisKeys.cart_session_key(cart_id), session_token)
