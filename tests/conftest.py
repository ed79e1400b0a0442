"""Pytest configuration and fixtures"""
import os
import pytest
from fastapi.testclient import TestClient

# Set test environment variables
os.environ.setdefault("CART_STORE", "memory")
os.environ.setdefault("ADMIN_USER_IDS", "test-admin-user")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from kaimono.app import create_app
from kaimono.auth import AdminAuthorizer, SessionRegistry, SessionUserContextResolver
from kaimono.cart import InMemoryCartStore
from kaimono.config import Settings
from kaimono.service import CartService

USER_SESSION = "logged-in-session"
ADMIN_SESSION = "logged-in-admin-session"
ANONYMOUS_SESSION = "anonymous-session"
OTHER_USER_SESSION = "other-user-session"


def bearer(token: str) -> dict:
    """Authorization header for a session token"""
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def sessions():
    """Registry with one user, one admin and one anonymous session"""
    registry = SessionRegistry()
    registry.register(USER_SESSION, "test-user")
    registry.register(ADMIN_SESSION, "test-admin-user")
    registry.register(ANONYMOUS_SESSION, "")
    registry.register(OTHER_USER_SESSION, "other-user")
    return registry


@pytest.fixture
def store(sessions):
    """In-memory cart store sharing the session registry"""
    return InMemoryCartStore(sessions)


@pytest.fixture
def resolver(sessions):
    return SessionUserContextResolver(sessions, cookie_name="kaimono_session")


@pytest.fixture
def service(store, resolver):
    """CartService wired with in-memory collaborators"""
    authorizer = AdminAuthorizer(resolver, ["test-admin-user"])
    return CartService(store=store, resolver=resolver, authorizer=authorizer)


@pytest.fixture
def settings():
    return Settings(admin_user_ids=("test-admin-user",))


@pytest.fixture
def client(service, settings):
    """Test client"""
    app = create_app(service=service, settings=settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_cart_payload():
    """Cart body using the JSON wire names"""
    return {
        "id": "",
        "cart-items": [
            {
                "product-id": "prod-123",
                "quantity": 2,
                "discounts": [
                    {"id": "disc-1", "type": "percentage", "percentage-off": 10}
                ],
                "price": {"currency": "usd", "value": 19.99},
            }
        ],
        "discounts": [
            {"id": "disc-2", "type": "fixed-amount", "amount-off": 5}
        ],
    }
