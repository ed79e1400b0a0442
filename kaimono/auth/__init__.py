"""Authentication and authorization package."""
from .session import SessionRegistry
from .context import UserContext, UserContextResolver, SessionUserContextResolver
from .authorizer import AdminAuthorizer, Authorizer, Operation, OperationType

__all__ = [
    "SessionRegistry",
    "UserContext",
    "UserContextResolver",
    "SessionUserContextResolver",
    "AdminAuthorizer",
    "Authorizer",
    "Operation",
    "OperationType",
]
