"""Request authorization — bearer-token users and organization membership."""

import logging
import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staymetrics.auth.jwt import decode_token
from staymetrics.database import get_db
from staymetrics.models.organization import UserOrganization
from staymetrics.models.user import User

logger = logging.getLogger(__name__)

# Strict bearer: requests without a token are rejected before reaching the handler
_bearer_scheme = HTTPBearer()


def _unauthorized(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the bearer token to an active user.

    Raises:
        HTTPException 401: If the token is invalid, expired, not an access
            token, or names a missing or inactive user.
    """
    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise _unauthorized() from None

    if payload.get("type") != "access":
        raise _unauthorized("Invalid token type")

    try:
        user_id = uuid.UUID(payload.get("sub") or "")
    except ValueError:
        raise _unauthorized() from None

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise _unauthorized()
    if not user.is_active:
        raise _unauthorized("User account is inactive")
    return user


async def ensure_organization_member(db: AsyncSession, user: User, organization_id: uuid.UUID) -> None:
    """Raise 404 unless ``user`` belongs to the organization.

    Non-members get the same response as a missing organization so that
    organization IDs cannot be probed.
    """
    result = await db.execute(
        select(UserOrganization.id).where(
            UserOrganization.user_id == user.id,
            UserOrganization.organization_id == organization_id,
        )
    )
    if result.scalar_one_or_none() is None:
        logger.warning("User %s denied access to organization %s", user.id, organization_id)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Organization not found or access denied",
        )
