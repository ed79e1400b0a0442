"""
Admin authorization.

Admin routes are gated by the caller's identity; session routes are
gated by session ownership and never reach this module.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from fastapi import Request

from kaimono.errors import NotAuthorizedError, SessionNotFoundError
from kaimono.logging import get_logger, sanitize_id_for_logging

from .context import UserContextResolver

logger = get_logger(__name__)


class OperationType(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class Operation:
    resource: str
    type: OperationType

    def __str__(self) -> str:
        return f"resource={self.resource} type={self.type.value}"


class Authorizer(ABC):
    @abstractmethod
    async def authorize(self, request: Request, operation: Operation, resource_id: str) -> None:
        """
        Return if the requesting principal may perform ``operation`` on
        ``resource_id``; raise NotAuthorizedError otherwise.
        """


class AdminAuthorizer(Authorizer):
    """Allows only the configured admin user IDs."""

    def __init__(self, resolver: UserContextResolver, admin_user_ids: Iterable[str]):
        self._resolver = resolver
        self._admin_user_ids = frozenset(admin_user_ids)

    async def authorize(self, request: Request, operation: Operation, resource_id: str) -> None:
        try:
            usr_ctx = await self._resolver.get_user_context(request)
        except SessionNotFoundError as e:
            # No session is just another unauthenticated caller
            raise NotAuthorizedError(operation, resource_id) from e

        if usr_ctx.is_logged_in and usr_ctx.user_id in self._admin_user_ids:
            return

        logger.warning(
            f"Denied {operation} on {sanitize_id_for_logging(resource_id)} "
            f"for user {sanitize_id_for_logging(usr_ctx.user_id)}"
        )
        raise NotAuthorizedError(operation, resource_id)
