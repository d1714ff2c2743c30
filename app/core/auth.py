"""Bearer-token authentication for QMS routes.

Tokens are Supabase access tokens. The caller's role comes from
``app_metadata.role`` (``user`` unless set); the display name from
``user_metadata.full_name`` or ``user_metadata.name``.
"""

from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.jwt import jwt_verifier
from app.schemas.auth import CurrentUser, JWTClaims
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def current_user_from_claims(claims: JWTClaims) -> CurrentUser:
    app_metadata = claims.app_metadata or {}
    user_metadata = claims.user_metadata or {}
    return CurrentUser(
        id=claims.sub,
        email=claims.email,
        role=app_metadata.get("role", "user"),
        name=user_metadata.get("full_name") or user_metadata.get("name"),
        app_metadata=claims.app_metadata,
        user_metadata=claims.user_metadata,
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    """Verify the bearer token.

    Raises:
        HTTPException: 401 when the header is missing or the token is invalid
    """
    if not credentials:
        raise _unauthorized("Authorization header missing")

    try:
        claims = await jwt_verifier.verify_token(credentials.credentials)
    except jwt.InvalidTokenError as e:
        LOGGER.warning(f"Rejected token: {e}")
        raise _unauthorized("Invalid authentication token") from e

    return current_user_from_claims(claims)


def require_role(role: str):
    """Dependency that admits only callers whose token carries ``role``."""

    async def check(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role != role:
            LOGGER.warning(f"User {user.id} with role '{user.role}' denied '{role}' route")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required role: {role}",
            )
        return user

    return check


require_admin = require_role("admin")
