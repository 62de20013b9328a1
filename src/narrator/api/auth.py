import logging
from datetime import UTC, datetime, timedelta

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import InvalidTokenError

from narrator.api.settings import get_settings

logger = logging.getLogger(__name__)

# Security scheme; missing credentials are reported as 401 below, not 403.
security = HTTPBearer(auto_error=False)


def create_access_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token for *user_id* (local development and tests)."""
    settings = get_settings()
    expire = datetime.now(UTC) + (expires_delta or timedelta(hours=24))

    to_encode: dict = {"sub": user_id, "exp": expire}
    if settings.jwt_audience:
        to_encode["aud"] = settings.jwt_audience

    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str:
    """Return the authenticated user's id from the bearer token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    settings = get_settings()
    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
        )
    except InvalidTokenError as e:
        logger.info(f"JWT decode error: {e}")
        raise credentials_exception from e

    user_id: str | None = payload.get("sub")
    if not user_id:
        logger.info("No 'sub' field in token payload")
        raise credentials_exception

    return user_id
