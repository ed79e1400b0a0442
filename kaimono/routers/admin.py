"""
Admin Cart Router

ID-addressed cart endpoints. Every route authorizes before touching the
store, so unauthorized callers get 403 whether or not the cart exists.
"""
from fastapi import APIRouter, Depends, Request

from kaimono.auth import Operation, OperationType
from kaimono.cart import Cart
from kaimono.errors import ErrorKind
from kaimono.logging import sanitize_id_for_logging
from kaimono.responses import write_no_content, write_response
from kaimono.service import CartService, decode_cart, raise_for_step

from .deps import get_cart_service

router = APIRouter(tags=["admin"])

ADMIN_CART_PATH = "/admin/cart"
RESOURCE = "cart"

_AUTHORIZE_STATUS = {ErrorKind.NOT_AUTHORIZED: 403}
_LOOKUP_STATUS = {ErrorKind.CART_NOT_FOUND: 404}


async def _authorize(
    service: CartService,
    request: Request,
    op_type: OperationType,
    cart_id: str,
) -> None:
    try:
        await service.authorizer.authorize(request, Operation(resource=RESOURCE, type=op_type), cart_id)
    except Exception as e:
        raise_for_step(e, _AUTHORIZE_STATUS, service.logger)


async def _lookup_cart(service: CartService, cart_id: str) -> Cart:
    try:
        return await service.store.lookup_by_id(cart_id)
    except Exception as e:
        raise_for_step(e, _LOOKUP_STATUS, service.logger)


@router.get(ADMIN_CART_PATH + "/{cart_id}")
async def admin_get_cart(cart_id: str, request: Request, service: CartService = Depends(get_cart_service)):
    """
    Return the cart with this ID.

    Status codes:
      - 200: OK
      - 403: Forbidden
      - 404: Cart not found
      - 500: unexpected error
    """
    await _authorize(service, request, OperationType.READ, cart_id)
    cart = await _lookup_cart(service, cart_id)
    return write_response(200, cart)


@router.post(ADMIN_CART_PATH)
@router.post(ADMIN_CART_PATH + "/{cart_id}")
async def admin_create_cart(request: Request, service: CartService = Depends(get_cart_service)):
    """
    Create an empty cart that is not bound to any session.

    A trailing ID segment is accepted and ignored; new IDs are always
    assigned by the store.

    Status codes:
      - 201: Created
      - 403: Forbidden
      - 500: unexpected error
    """
    await _authorize(service, request, OperationType.CREATE, "")

    try:
        cart = await service.store.create_unbound()
    except Exception as e:
        raise_for_step(e, {}, service.logger)

    service.logger.info(f"Admin created cart {sanitize_id_for_logging(cart.id)}")
    return write_response(201, cart, headers={"Location": f"{ADMIN_CART_PATH}/{cart.id}"})


@router.put(ADMIN_CART_PATH + "/{cart_id}")
async def admin_update_cart(cart_id: str, request: Request, service: CartService = Depends(get_cart_service)):
    """
    Replace the cart with this ID. The stored ID always wins over the
    ID in the body.

    Status codes:
      - 200: Updated successfully
      - 400: Body could not be decoded
      - 403: Forbidden
      - 404: Cart not found
      - 500: unexpected error
    """
    await _authorize(service, request, OperationType.UPDATE, cart_id)
    found_cart = await _lookup_cart(service, cart_id)

    payload = await decode_cart(request)
    payload.id = found_cart.id

    try:
        cart = await service.store.replace(payload)
    except Exception as e:
        raise_for_step(e, {}, service.logger)

    return write_response(200, cart)


@router.delete(ADMIN_CART_PATH + "/{cart_id}")
async def admin_delete_cart(cart_id: str, request: Request, service: CartService = Depends(get_cart_service)):
    """
    Delete the cart with this ID.

    Status codes:
      - 204: Deleted successfully
      - 403: Forbidden
      - 404: Cart not found
      - 500: unexpected error
    """
    await _authorize(service, request, OperationType.DELETE, cart_id)

    try:
        await service.store.delete_by_id(cart_id)
    except Exception as e:
        raise_for_step(e, _LOOKUP_STATUS, service.logger)

    service.logger.info(f"Admin deleted cart {sanitize_id_for_logging(cart_id)}")
    return write_no_content()
