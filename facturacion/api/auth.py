"""
Bearer token authentication.

Tokens are HS256 JWTs carrying the user's ``id`` and ``rol`` claims.
A request without an Authorization header is rejected with 401; a header
whose token cannot be verified is rejected with 400.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from fastapi import Depends, Header

from facturacion.config import Settings, get_logger, get_settings
from facturacion.core.entities import AuthenticatedUser
from facturacion.core.exceptions import AuthenticationError, InvalidTokenError

logger = get_logger(__name__)


def decode_token(token: str, settings: Settings) -> AuthenticatedUser:
    """Verify a JWT and return the identity it carries."""
    try:
        payload = jwt.decode(
            token,
            settings.auth.jwt_secret,
            algorithms=[settings.auth.jwt_algorithm],
        )
    except jwt.PyJWTError as e:
        raise InvalidTokenError(reason=str(e)) from e

    try:
        user_id = int(payload["id"])
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidTokenError(reason="missing or malformed 'id' claim") from e

    return AuthenticatedUser(
        id=user_id,
        rol=str(payload.get("rol") or "user"),
        email=payload.get("email"),
    )


def issue_token(
    user_id: int,
    settings: Settings,
    rol: str = "user",
    expires_in: timedelta | None = timedelta(hours=1),
    **claims: Any,
) -> str:
    """Sign a token for ``user_id``. Used by tooling and tests."""
    payload: dict[str, Any] = {"id": user_id, "rol": rol, **claims}
    if expires_in is not None:
        payload["exp"] = datetime.now(timezone.utc) + expires_in
    return jwt.encode(payload, settings.auth.jwt_secret, algorithm=settings.auth.jwt_algorithm)


def get_auth_settings() -> Settings:
    """Settings used to verify tokens."""
    return get_settings()


async def get_current_user(
    authorization: str | None = Header(default=None),
    settings: Settings = Depends(get_auth_settings),
) -> AuthenticatedUser:
    """Resolve the authenticated user from the Authorization header."""
    if not authorization:
        raise AuthenticationError()

    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise InvalidTokenError(reason="expected 'Bearer <token>'")

    user = decode_token(token.strip(), settings)
    logger.debug("request_authenticated", user_id=user.id, rol=user.rol)
    return user
