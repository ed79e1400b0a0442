"""
Cart error taxonomy.

Every store, resolver and authorizer failure is one of the kinds below.
Handlers switch on ``CartError.kind`` at the route boundary; anything
that is not a ``CartError`` is an infrastructure failure.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kaimono.auth.authorizer import Operation
    from kaimono.cart.models import Cart

# Messages
ERROR_CART_NOT_FOUND = "cart not found"
ERROR_SESSION_NOT_FOUND = "session not found"
ERROR_ALREADY_EXISTS = "already exists"
ERROR_INVALID_ID = "invalid ID"
ERROR_DECODE_FAILED = "could not decode request"
ERROR_INTERNAL = "internal server error"


class ErrorKind(str, Enum):
    SESSION_NOT_FOUND = "session_not_found"
    CART_NOT_FOUND = "cart_not_found"
    ALREADY_EXISTS = "already_exists"
    INVALID_ID = "invalid_id"
    NOT_AUTHORIZED = "not_authorized"
    INFRASTRUCTURE = "infrastructure"


class CartError(Exception):
    """Base class for classified cart failures."""

    kind: ErrorKind = ErrorKind.INFRASTRUCTURE
    message: str = ERROR_INTERNAL

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class SessionNotFoundError(CartError):
    kind = ErrorKind.SESSION_NOT_FOUND
    message = ERROR_SESSION_NOT_FOUND


class CartNotFoundError(CartError):
    kind = ErrorKind.CART_NOT_FOUND
    message = ERROR_CART_NOT_FOUND


class AlreadyExistsError(CartError):
    """A cart is already bound to the session.

    ``cart`` is the cart that already exists, so callers can inspect it.
    """

    kind = ErrorKind.ALREADY_EXISTS
    message = ERROR_ALREADY_EXISTS

    def __init__(self, cart: Cart | None = None, message: str | None = None):
        super().__init__(message)
        self.cart = cart


class InvalidIDError(CartError):
    kind = ErrorKind.INVALID_ID
    message = ERROR_INVALID_ID


class NotAuthorizedError(CartError):
    """The principal may not perform ``operation`` on ``resource_id``."""

    kind = ErrorKind.NOT_AUTHORIZED

    def __init__(self, operation: Operation, resource_id: str = ""):
        self.operation = operation
        self.resource_id = resource_id
        super().__init__(
            f"could not authorize user for op=({operation}) with resource ID:({resource_id})"
        )


def classify(exc: BaseException) -> ErrorKind:
    """Map any exception onto exactly one ``ErrorKind``."""
    if isinstance(exc, CartError):
        return exc.kind
    return ErrorKind.INFRASTRUCTURE


__all__ = [
    "ERROR_CART_NOT_FOUND",
    "ERROR_SESSION_NOT_FOUND",
    "ERROR_ALREADY_EXISTS",
    "ERROR_INVALID_ID",
    "ERROR_DECODE_FAILED",
    "ERROR_INTERNAL",
    "ErrorKind",
    "CartError",
    "SessionNotFoundError",
    "CartNotFoundError",
    "AlreadyExistsError",
    "InvalidIDError",
    "NotAuthorizedError",
    "classify",
]
