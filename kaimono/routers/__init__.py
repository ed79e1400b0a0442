"""API routers: session-scoped cart and admin cart."""
from .admin import router as admin_router
from .cart import router as cart_router

__all__ = ["admin_router", "cart_router"]
