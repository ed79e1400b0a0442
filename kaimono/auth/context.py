"""User context resolution from inbound requests."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from kaimono.errors import SessionNotFoundError

from .session import SessionRegistry


@dataclass(frozen=True)
class UserContext:
    user_id: str
    session_token: str

    @property
    def is_logged_in(self) -> bool:
        return self.user_id != ""


class UserContextResolver(ABC):
    @abstractmethod
    async def get_user_context(self, request: Request) -> UserContext:
        """Raises SessionNotFoundError if the request carries no live session."""


class SessionUserContextResolver(UserContextResolver):
    """
    Reads the session token from the session cookie or, failing that,
    from ``Authorization: Bearer <token>``.
    """

    def __init__(self, sessions: SessionRegistry, cookie_name: str = "kaimono_session"):
        self._sessions = sessions
        self.cookie_name = cookie_name

    def _extract_token(self, request: Request) -> Optional[str]:
        token = request.cookies.get(self.cookie_name)
        if token:
            return token

        authorization = request.headers.get("Authorization")
        if authorization:
            parts = authorization.split(" ")
            if len(parts) == 2 and parts[0].lower() == "bearer" and parts[1]:
                return parts[1]

        return None

    async def get_user_context(self, request: Request) -> UserContext:
        token = self._extract_token(request)
        if not token:
            raise SessionNotFoundError()

        session = self._sessions.verify(token)
        if session is None:
            raise SessionNotFoundError()

        return UserContext(user_id=session["user_id"], session_token=token)
