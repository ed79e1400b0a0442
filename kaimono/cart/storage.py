"""Cart storage contract and the in-memory implementation."""
import asyncio
from abc import ABC, abstractmethod
from typing import Dict

from kaimono.auth.session import SessionRegistry
from kaimono.errors import AlreadyExistsError, CartNotFoundError, SessionNotFoundError
from kaimono.logging import get_logger, sanitize_id_for_logging

from .models import Cart

logger = get_logger(__name__)


class CartStore(ABC):
    """
    Persists carts by ID and keeps the session -> cart side table.

    None of these methods check permissions; callers authorize first.
    Carts are returned as copies, never as live references.
    """

    @abstractmethod
    async def lookup_by_id(self, cart_id: str) -> Cart:
        """Raises CartNotFoundError if no cart has this ID."""

    @abstractmethod
    async def lookup_by_session(self, session_token: str) -> Cart:
        """
        Raises SessionNotFoundError for unknown sessions and
        CartNotFoundError if the session has no cart.
        """

    @abstractmethod
    async def create_unbound(self) -> Cart:
        """Create an empty cart not assigned to any session."""

    @abstractmethod
    async def create_for_session(self, session_token: str) -> Cart:
        """
        Create an empty cart bound to the session.

        Raises SessionNotFoundError for unknown sessions. If the session
        already has a cart, raises AlreadyExistsError carrying that cart.
        """

    @abstractmethod
    async def replace(self, cart: Cart) -> Cart:
        """Overwrite the cart matching ``cart.id``. Raises CartNotFoundError."""

    @abstractmethod
    async def delete_by_id(self, cart_id: str) -> None:
        """Delete the cart and its session binding. Raises CartNotFoundError."""

    @abstractmethod
    async def assign_to_session(self, cart_id: str, session_token: str) -> None:
        """
        Bind an existing cart to a session, moving it off any previous one.

        Raises SessionNotFoundError, CartNotFoundError, or AlreadyExistsError
        if the session is already bound to a different cart.
        """


class InMemoryCartStore(CartStore):
    """Dict-backed store; every operation runs under one asyncio lock."""

    def __init__(self, sessions: SessionRegistry):
        self._sessions = sessions
        self._lock = asyncio.Lock()
        self._carts: Dict[str, Cart] = {}
        self._session_carts: Dict[str, str] = {}
        self._cart_sessions: Dict[str, str] = {}

    def _require_session(self, session_token: str) -> None:
        if not self._sessions.exists(session_token):
            raise SessionNotFoundError()

    def _get(self, cart_id: str) -> Cart:
        cart = self._carts.get(cart_id)
        if cart is None:
            raise CartNotFoundError()
        return cart.model_copy(deep=True)

    async def lookup_by_id(self, cart_id: str) -> Cart:
        async with self._lock:
            return self._get(cart_id)

    async def lookup_by_session(self, session_token: str) -> Cart:
        async with self._lock:
            self._require_session(session_token)
            cart_id = self._session_carts.get(session_token)
            if cart_id is None:
                raise CartNotFoundError()
            return self._get(cart_id)

    async def create_unbound(self) -> Cart:
        cart = Cart.empty()
        async with self._lock:
            self._carts[cart.id] = cart
        return cart.model_copy(deep=True)

    async def create_for_session(self, session_token: str) -> Cart:
        async with self._lock:
            self._require_session(session_token)

            existing_id = self._session_carts.get(session_token)
            if existing_id is not None:
                raise AlreadyExistsError(cart=self._get(existing_id))

            cart = Cart.empty()
            self._carts[cart.id] = cart
            self._session_carts[session_token] = cart.id
            self._cart_sessions[cart.id] = session_token

        logger.debug(f"Bound cart {sanitize_id_for_logging(cart.id)} to session")
        return cart.model_copy(deep=True)

    async def replace(self, cart: Cart) -> Cart:
        async with self._lock:
            if cart.id not in self._carts:
                raise CartNotFoundError()
            self._carts[cart.id] = cart.model_copy(deep=True)
        return cart.model_copy(deep=True)

    async def delete_by_id(self, cart_id: str) -> None:
        async with self._lock:
            if self._carts.pop(cart_id, None) is None:
                raise CartNotFoundError()
            session_token = self._cart_sessions.pop(cart_id, None)
            if session_token is not None:
                self._session_carts.pop(session_token, None)

    async def assign_to_session(self, cart_id: str, session_token: str) -> None:
        async with self._lock:
            self._require_session(session_token)
            if cart_id not in self._carts:
                raise CartNotFoundError()

            bound_id = self._session_carts.get(session_token)
            if bound_id == cart_id:
                return
            if bound_id is not None:
                raise AlreadyExistsError(cart=self._get(bound_id))

            previous = self._cart_sessions.pop(cart_id, None)
            if previous is not None:
                self._session_carts.pop(previous, None)

            self._session_carts[session_token] = cart_id
            self._cart_sessions[cart_id] = session_token
