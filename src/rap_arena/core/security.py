"""Bearer token helpers built on python-jose."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from rap_arena.core.errors import UnauthorizedError
from rap_arena.core.settings import settings


def create_access_token(subject: str, extra_claims: dict[str, str] | None = None) -> str:
    """Create a signed access token whose subject is the user id.

    Tokens are normally minted by the identity provider; this helper exists for
    local tooling and tests that need to impersonate a user.
    """
    to_encode: dict[str, object] = {"sub": subject}
    if extra_claims:
        to_encode.update(extra_claims)
    to_encode["exp"] = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_subject(token: str) -> str:
    """Return the `sub` claim of a valid token.

    Raises:
        UnauthorizedError: If the token is malformed, expired or has no subject.
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as err:
        raise UnauthorizedError("Could not validate credentials") from err

    subject = payload.get("sub")
    if not subject:
        raise UnauthorizedError("Could not validate credentials")
    return str(subject)
