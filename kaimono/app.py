"""
Kaimono - Cart API application factory.

Every error, including FastAPI's own, leaves the app as a
{"data": null, "error": "..."} envelope.
"""
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from kaimono.auth import SessionRegistry
from kaimono.config import Settings, get_settings
from kaimono.logging import get_logger
from kaimono.responses import write_error
from kaimono.routers import admin_router, cart_router
from kaimono.service import CartService

logger = get_logger(__name__)


async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
    return write_error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def _validation_exception_handler(request: Request, exc: RequestValidationError):
    return write_error(400, str(exc))


def create_app(
    service: Optional[CartService] = None,
    settings: Optional[Settings] = None,
    sessions: Optional[SessionRegistry] = None,
) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        service: Pre-wired CartService (tests inject one); built from
            ``settings`` when omitted.
        settings: Defaults to environment settings.
        sessions: Registry the authentication layer populates. Without
            one the app starts with an empty registry, so every session
            route answers 400 and every admin route 403.
    """
    settings = settings or get_settings()
    if service is None:
        if sessions is None:
            logger.warning("No session registry injected; all sessions will be unknown")
        service = CartService.from_settings(settings, sessions=sessions)
        logger.info(f"Using {settings.cart_store} cart store")

    app = FastAPI(
        title="Kaimono Cart API",
        description="Session and admin cart endpoints",
        version="1.0.0",
    )
    app.state.cart_service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)

    app.include_router(cart_router)
    app.include_router(admin_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "ok", "service": "kaimono"}

    return app
