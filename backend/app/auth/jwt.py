"""JWT access and refresh tokens carrying the owner's id in ``sub``."""

import uuid
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from app.config import settings

ACCESS = "access"
REFRESH = "refresh"


class InvalidTokenError(Exception):
    """Token is malformed, expired, of the wrong type, or has no usable subject."""


def _encode(owner_id: uuid.UUID | str, token_type: str, lifetime: timedelta) -> str:
    now = datetime.now(timezone.utc)
    claims = {"sub": str(owner_id), "iat": now, "exp": now + lifetime, "type": token_type}
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(owner_id: uuid.UUID | str, expires_delta: timedelta | None = None) -> str:
    """Create a short-lived access token (``settings.jwt_access_token_expire_minutes`` by default)."""
    return _encode(owner_id, ACCESS, expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes))


def create_refresh_token(owner_id: uuid.UUID | str, expires_delta: timedelta | None = None) -> str:
    """Create a long-lived refresh token (``settings.jwt_refresh_token_expire_days`` by default)."""
    return _encode(owner_id, REFRESH, expires_delta or timedelta(days=settings.jwt_refresh_token_expire_days))


def decode_token(token: str) -> dict:
    """Decode and verify a JWT.

    Raises:
        jose.JWTError: If the token is invalid, expired, or malformed.
    """
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])


def token_subject(token: str, expected_type: str) -> uuid.UUID:
    """Return the owner id from a verified token of ``expected_type``.

    Raises:
        InvalidTokenError: On any verification or claim problem.
    """
    try:
        payload = decode_token(token)
    except JWTError as exc:
        raise InvalidTokenError("Invalid or expired token") from exc

    if payload.get("type") != expected_type:
        raise InvalidTokenError("Invalid token type")

    try:
        return uuid.UUID(payload["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidTokenError("Invalid token payload") from exc


def create_token_pair(owner_id: uuid.UUID | str) -> dict[str, str]:
    """Create both tokens for a user.

    Returns:
        Dictionary with ``access_token``, ``refresh_token``, and ``token_type``.
    """
    return {
        "access_token": create_access_token(owner_id),
        "refresh_token": create_refresh_token(owner_id),
        "token_type": "bearer",
    }
