"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from rap_arena.core.errors import UnauthorizedError
from rap_arena.core.security import decode_subject
from rap_arena.db.session import get_db
from rap_arena.models import User
from rap_arena.services.notifications import NotificationService
from rap_arena.services.storage import StorageService, get_storage_service

# Missing credentials are handled below so both required and optional auth share one scheme.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
CredentialsDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def _resolve_user(
    db: Session, credentials: HTTPAuthorizationCredentials, *, allow_inactive: bool = False
) -> User:
    user_id = decode_subject(credentials.credentials)
    user = db.get(User, user_id)
    if user is None or not (user.is_active or allow_inactive):
        raise UnauthorizedError("User not found")
    return user


def get_current_user(credentials: CredentialsDep, db: SessionDep) -> User:
    """Get the current authenticated user from the bearer token.

    Raises:
        UnauthorizedError: If no token was sent, it is invalid, or the user is unknown.
    """
    if credentials is None:
        raise UnauthorizedError()
    return _resolve_user(db, credentials)


def get_current_account(credentials: CredentialsDep, db: SessionDep) -> User:
    """Like ``get_current_user`` but also accepts deactivated accounts.

    Only the account lifecycle routes use this.
    """
    if credentials is None:
        raise UnauthorizedError()
    return _resolve_user(db, credentials, allow_inactive=True)


def get_optional_user(credentials: CredentialsDep, db: SessionDep) -> User | None:
    """Return the caller when a valid token is present, otherwise None.

    An invalid token is still rejected so clients notice expired sessions.
    """
    if credentials is None:
        return None
    return _resolve_user(db, credentials)


def get_notification_service(db: SessionDep) -> NotificationService:
    return NotificationService(db)


def get_storage_service_dep() -> StorageService:
    """Return the shared object storage service."""
    return get_storage_service()


# Type aliases for common dependencies
CurrentUserDep = Annotated[User, Depends(get_current_user)]
CurrentAccountDep = Annotated[User, Depends(get_current_account)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]
NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]
StorageServiceDep = Annotated[StorageService, Depends(get_storage_service_dep)]
