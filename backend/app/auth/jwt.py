"""JWT issuance and verification.

Two token kinds share one signing key and differ only in lifetime and the
``type`` claim: short-lived *access* tokens authenticate API calls, long-lived
*refresh* tokens can only be exchanged for a new pair.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt

from app.config import settings

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def _encode(data: dict[str, Any], token_type: str, lifetime: timedelta) -> str:
    now = datetime.now(timezone.utc)
    claims = {**data, "iat": now, "exp": now + lifetime, "type": token_type}
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """Create an access token.

    Args:
        data: Payload data. Must include ``sub`` (user UUID as string).
        expires_delta: Custom lifetime; defaults to
            ``settings.jwt_access_token_expire_minutes``.
    """
    lifetime = expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes)
    return _encode(data, ACCESS_TOKEN_TYPE, lifetime)


def create_refresh_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """Create a refresh token (default lifetime ``settings.jwt_refresh_token_expire_days``)."""
    lifetime = expires_delta or timedelta(days=settings.jwt_refresh_token_expire_days)
    return _encode(data, REFRESH_TOKEN_TYPE, lifetime)


def decode_token(token: str) -> dict[str, Any]:
    """Decode and verify a token.

    Raises:
        jose.JWTError: If the signature is invalid, the token expired, or it is malformed.
    """
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])


def create_token_pair(user_id: str, is_host: bool = False) -> dict[str, str]:
    """Issue an access/refresh pair for a user.

    ``host`` is informational for clients; the server always re-reads the
    user's host flag from the database.
    """
    payload = {"sub": user_id, "host": is_host}
    return {
        "access_token": create_access_token(payload),
        "refresh_token": create_refresh_token({"sub": user_id}),
        "token_type": "bearer",
    }
