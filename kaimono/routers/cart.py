"""
Session Cart Router

Every route acts on the cart bound to the caller's session. Ownership
of the session is the only check; the authorizer is never consulted.
"""
from fastapi import APIRouter, Depends, HTTPException, Request

from kaimono.auth import UserContext
from kaimono.cart import Cart
from kaimono.errors import InvalidIDError, ErrorKind
from kaimono.logging import sanitize_id_for_logging
from kaimono.responses import write_no_content, write_response
from kaimono.service import CartService, decode_cart, raise_for_step

from .deps import get_cart_service

router = APIRouter(tags=["cart"])

CART_PATH = "/cart"

_RESOLVE_STATUS = {ErrorKind.SESSION_NOT_FOUND: 400}
_LOOKUP_STATUS = {ErrorKind.SESSION_NOT_FOUND: 400, ErrorKind.CART_NOT_FOUND: 404}


async def _resolve_user_context(service: CartService, request: Request) -> UserContext:
    try:
        return await service.resolver.get_user_context(request)
    except Exception as e:
        raise_for_step(e, _RESOLVE_STATUS, service.logger)


async def _lookup_session_cart(service: CartService, usr_ctx: UserContext) -> Cart:
    try:
        return await service.store.lookup_by_session(usr_ctx.session_token)
    except Exception as e:
        raise_for_step(e, _LOOKUP_STATUS, service.logger)


@router.get(CART_PATH)
async def get_cart(request: Request, service: CartService = Depends(get_cart_service)):
    """
    Return the cart bound to the current session.

    Status codes:
      - 200: OK
      - 400: No session found for request
      - 404: No cart found for session
      - 500: unexpected error
    """
    usr_ctx = await _resolve_user_context(service, request)
    cart = await _lookup_session_cart(service, usr_ctx)
    return write_response(200, cart)


@router.post(CART_PATH)
async def create_cart(request: Request, service: CartService = Depends(get_cart_service)):
    """
    Create a new cart for the current session.

    Status codes:
      - 201: Created successfully
      - 400: No session found for request
      - 409: Cart already exists; the body carries no cart, GET /cart
        returns the existing one
      - 500: unexpected error
    """
    usr_ctx = await _resolve_user_context(service, request)

    try:
        cart = await service.store.create_for_session(usr_ctx.session_token)
    except Exception as e:
        raise_for_step(
            e,
            {ErrorKind.SESSION_NOT_FOUND: 400, ErrorKind.ALREADY_EXISTS: 409},
            service.logger,
        )

    service.logger.info(f"Created cart {sanitize_id_for_logging(cart.id)} for session")
    return write_response(201, cart, headers={"Location": CART_PATH})


@router.put(CART_PATH)
async def update_cart(request: Request, service: CartService = Depends(get_cart_service)):
    """
    Replace the session's cart. The body must carry the session cart's ID.

    Status codes:
      - 200: Updated successfully
      - 400: No session found for request, or body could not be decoded
      - 403: Cart ID is not the ID of this session's cart
      - 404: No cart found for this session
      - 500: unexpected error
    """
    usr_ctx = await _resolve_user_context(service, request)
    found_cart = await _lookup_session_cart(service, usr_ctx)

    payload = await decode_cart(request)

    if payload.id != found_cart.id:
        service.logger.warning(
            f"Rejected update of cart {sanitize_id_for_logging(found_cart.id)} "
            f"with ID {sanitize_id_for_logging(payload.id)}"
        )
        raise HTTPException(status_code=403, detail=str(InvalidIDError()))

    try:
        cart = await service.store.replace(payload)
    except Exception as e:
        raise_for_step(e, {}, service.logger)

    return write_response(200, cart)


@router.delete(CART_PATH)
async def delete_cart(request: Request, service: CartService = Depends(get_cart_service)):
    """
    Delete the session's cart.

    Status codes:
      - 204: Deleted successfully
      - 400: No session found for request
      - 404: No cart found for this session
      - 500: unexpected error
    """
    usr_ctx = await _resolve_user_context(service, request)
    found_cart = await _lookup_session_cart(service, usr_ctx)

    try:
        await service.store.delete_by_id(found_cart.id)
    except Exception as e:
        # Vanished between lookup and delete: not a 404 at this point
        raise_for_step(e, {}, service.logger)

    service.logger.info(f"Deleted cart {sanitize_id_for_logging(found_cart.id)}")
    return write_no_content()
