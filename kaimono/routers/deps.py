"""
Shared Dependencies for Routers

The CartService is built by the app factory and stored on ``app.state``,
so each app instance carries its own store.
"""

from fastapi import Request

from kaimono.service import CartService


def get_cart_service(request: Request) -> CartService:
    """Return the CartService attached to the running app."""
    return request.app.state.cart_service
