"""Tests for error classification, envelopes and settings"""
import json

import pytest
from fastapi import HTTPException

from kaimono.auth import Operation, OperationType, SessionRegistry
from kaimono.cart import Cart
from kaimono.config import Settings
from kaimono.errors import (
    AlreadyExistsError,
    CartNotFoundError,
    ErrorKind,
    InvalidIDError,
    NotAuthorizedError,
    SessionNotFoundError,
    classify,
)
from kaimono.responses import write_error, write_no_content, write_response
from kaimono.service import CartService, raise_for_step


class TestClassify:
    @pytest.mark.parametrize("exc, kind", [
        (SessionNotFoundError(), ErrorKind.SESSION_NOT_FOUND),
        (CartNotFoundError(), ErrorKind.CART_NOT_FOUND),
        (AlreadyExistsError(), ErrorKind.ALREADY_EXISTS),
        (InvalidIDError(), ErrorKind.INVALID_ID),
        (NotAuthorizedError(Operation("cart", OperationType.READ), "x"), ErrorKind.NOT_AUTHORIZED),
        (ValueError("boom"), ErrorKind.INFRASTRUCTURE),
    ])
    def test_kinds(self, exc, kind):
        assert classify(exc) == kind

    def test_already_exists_carries_cart(self):
        cart = Cart(id="cart-1")
        assert AlreadyExistsError(cart=cart).cart is cart


class TestRaiseForStep:
    def test_mapped_kind(self):
        with pytest.raises(HTTPException) as exc_info:
            raise_for_step(CartNotFoundError(), {ErrorKind.CART_NOT_FOUND: 404})

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == "cart not found"

    def test_unmapped_kind_is_500(self):
        with pytest.raises(HTTPException) as exc_info:
            raise_for_step(CartNotFoundError(), {})

        assert exc_info.value.status_code == 500

    def test_not_authorized_never_becomes_404(self):
        err = NotAuthorizedError(Operation("cart", OperationType.READ), "x")
        with pytest.raises(HTTPException) as exc_info:
            raise_for_step(err, {ErrorKind.NOT_AUTHORIZED: 403, ErrorKind.CART_NOT_FOUND: 404})

        assert exc_info.value.status_code == 403

    def test_keeps_cause(self):
        original = RuntimeError("down")
        with pytest.raises(HTTPException) as exc_info:
            raise_for_step(original, {})

        assert exc_info.value.__cause__ is original


class TestEnvelope:
    def test_success(self):
        response = write_response(201, Cart(id="cart-1"), headers={"Location": "/cart"})

        assert response.status_code == 201
        assert response.headers["location"] == "/cart"
        assert json.loads(response.body) == {
            "data": {"id": "cart-1", "cart-items": [], "discounts": []},
            "error": "",
        }

    def test_error(self):
        response = write_error(409, "already exists")

        assert response.status_code == 409
        assert json.loads(response.body) == {"data": None, "error": "already exists"}

    def test_no_content(self):
        response = write_no_content()

        assert response.status_code == 204
        assert response.body == b""


class TestSettings:
    def test_defaults(self, monkeypatch):
        for key in ("CART_STORE", "ADMIN_USER_IDS", "SESSION_COOKIE_NAME", "CORS_ORIGINS"):
            monkeypatch.delenv(key, raising=False)

        settings = Settings.from_env()

        assert settings.cart_store == "memory"
        assert settings.admin_user_ids == ()
        assert settings.session_cookie_name == "kaimono_session"
        assert settings.cors_origins == ("*",)

    def test_admin_ids_are_split(self, monkeypatch):
        monkeypatch.setenv("ADMIN_USER_IDS", "alice, bob,,")

        assert Settings.from_env().admin_user_ids == ("alice", "bob")

    def test_redis_requires_credentials(self, monkeypatch):
        monkeypatch.setenv("CART_STORE", "redis")
        monkeypatch.delenv("UPSTASH_REDIS_REST_URL", raising=False)
        monkeypatch.delenv("UPSTASH_REDIS_REST_TOKEN", raising=False)

        with pytest.raises(ValueError):
            Settings.from_env()

    def test_unknown_store_rejected(self, monkeypatch):
        monkeypatch.setenv("CART_STORE", "postgres")

        with pytest.raises(ValueError):
            Settings.from_env()


class TestFromSettings:
    def test_shares_injected_registry(self):
        registry = SessionRegistry()

        service = CartService.from_settings(Settings(), sessions=registry)

        assert service.store._sessions is registry
        assert service.resolver._sessions is registry

    def test_builds_registry_when_none_given(self):
        service = CartService.from_settings(Settings())

        assert isinstance(service.store._sessions, SessionRegistry)
