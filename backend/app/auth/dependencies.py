"""FastAPI authentication dependencies for route protection."""

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.jwt import ACCESS, InvalidTokenError, token_subject
from app.database import get_db
from app.models.user import User

logger = logging.getLogger(__name__)

# Strict bearer: raises 403 automatically if no token provided
_bearer_scheme = HTTPBearer()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the Bearer access token to a user.

    Raises:
        HTTPException 401: If the token is invalid, expired, the wrong type, or the user is gone.
    """
    try:
        user_id = token_subject(credentials.credentials, ACCESS)
    except InvalidTokenError as exc:
        logger.debug("Rejected bearer token: %s", exc)
        raise _unauthorized(str(exc)) from None

    user = await db.get(User, user_id)
    if user is None:
        raise _unauthorized("Could not validate credentials")

    return user


async def get_current_active_user(
    user: User = Depends(get_current_user),
) -> User:
    """Return the current user only if their account is active.

    Raises:
        HTTPException 403: If the account is inactive.
    """
    if not user.is_active:
        logger.warning("Inactive user %s attempted access", user.id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive",
        )
    return user
