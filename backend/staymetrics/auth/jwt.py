"""JWT access-token handling.

Tokens are issued by the identity service and signed with the shared
``JWT_SECRET_KEY``. ``create_access_token`` exists for local tooling and
tests; the API itself only verifies.
"""

from datetime import datetime, timedelta, timezone

from jose import jwt

from staymetrics.config import settings


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Sign an access token carrying ``data`` (which must include ``sub``)."""
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes))
    to_encode.update({"exp": expire, "iat": now, "type": "access"})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    """Verify signature and expiry and return the payload.

    Raises:
        jose.JWTError: If the token is invalid, expired, or malformed.
    """
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
