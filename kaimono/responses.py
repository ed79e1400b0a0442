"""
Response envelope.

Success: {"data": <Cart>, "error": ""}
Failure: {"data": null, "error": "<message>"}
"""
from typing import Mapping, Optional

from fastapi import Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from pydantic_core import PydanticSerializationError

from kaimono.cart.models import Cart
from kaimono.errors import ERROR_INTERNAL
from kaimono.logging import get_logger

logger = get_logger(__name__)


class CartResponse(BaseModel):
    data: Cart
    error: str = ""


class ErrorResponse(BaseModel):
    data: None = None
    error: str


def write_response(
    status_code: int,
    cart: Cart,
    headers: Optional[Mapping[str, str]] = None,
) -> Response:
    try:
        content = CartResponse(data=cart).model_dump(mode="json", by_alias=True)
    except PydanticSerializationError as e:
        logger.error(f"write response: could not encode: {e}", exc_info=True)
        return write_error(500, ERROR_INTERNAL)
    return JSONResponse(content=content, status_code=status_code, headers=headers)


def write_error(
    status_code: int,
    message: str,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    content = ErrorResponse(error=message).model_dump(mode="json")
    return JSONResponse(content=content, status_code=status_code, headers=headers)


def write_no_content() -> Response:
    return Response(status_code=204)
