"""Web session registry (in-memory).

Sessions are issued by the authentication layer; this registry only
records which tokens are live and which user, if any, they belong to.
"""
import secrets
from datetime import datetime, timezone, timedelta
from typing import Dict, Optional


class SessionRegistry:
    def __init__(self, ttl_days: int = 7):
        self._ttl = timedelta(days=ttl_days)
        self._sessions: Dict[str, dict] = {}

    def register(self, session_token: str, user_id: str = "") -> None:
        """Record an externally issued token. ``user_id=""`` is anonymous."""
        now = datetime.now(timezone.utc)
        self._sessions[session_token] = {
            "user_id": str(user_id),
            "created_at": now.isoformat(),
            "expires_at": (now + self._ttl).isoformat(),
        }

    def create_session(self, user_id: str = "") -> str:
        """Create a new session and return the token."""
        session_token = secrets.token_urlsafe(32)
        self.register(session_token, user_id)
        return session_token

    def verify(self, session_token: str) -> Optional[dict]:
        """Return session data, or None if unknown or expired."""
        session = self._sessions.get(session_token)
        if not session:
            return None

        expires_at = datetime.fromisoformat(session["expires_at"])
        if datetime.now(timezone.utc) > expires_at:
            del self._sessions[session_token]
            return None

        return session

    def exists(self, session_token: str) -> bool:
        return self.verify(session_token) is not None

    def revoke(self, session_token: str) -> None:
        self._sessions.pop(session_token, None)
