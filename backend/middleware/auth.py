"""
Account authentication helpers.

  - Access tokens are HS256 JWTs issued at registration and login.
  - Protected endpoints read `Authorization: Bearer <jwt>`; the subject is the
    user id and the user row is loaded on every request, so a role change or
    account deletion takes effect immediately.
  - Role checks (ADMIN) run here as dependencies, ahead of the handlers.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, Header, HTTPException, Path
from sqlalchemy.ext.asyncio import AsyncSession

from config import Settings, get_settings
from database import get_db
from db_models import User
from domain.enums import Role
from domain.errors import PermissionDeniedError, UnauthorizedError

logger = logging.getLogger(__name__)


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _parse_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


def decode_access_token(token: str, settings: Settings) -> dict:
    if not settings.jwt_secret:
        raise HTTPException(
            status_code=500,
            detail="Server auth misconfigured (JWT secret missing).",
        )
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=["HS256"],
            issuer=settings.jwt_issuer,
            options={"require": ["exp", "iat", "iss", "sub"]},
        )
        return payload
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Access token expired.")
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid access token.")


def issue_access_token(*, user_id: str, role: str, settings: Settings) -> str:
    now = _now_utc()
    exp = now.replace(microsecond=0) + timedelta(minutes=settings.jwt_access_ttl_minutes)
    payload = {
        "iss": settings.jwt_issuer,
        "sub": user_id,
        "id": user_id,
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    if not settings.jwt_secret:
        raise HTTPException(
            status_code=500,
            detail="Server auth misconfigured (JWT secret missing).",
        )
    return jwt.encode(payload, settings.jwt_secret, algorithm="HS256")


async def get_optional_user(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """The caller's user row, or None when no bearer token is sent."""
    token = _parse_bearer_token(authorization)
    if not token:
        return None
    payload = decode_access_token(token, settings)
    user = await db.get(User, payload.get("sub"))
    if user is None:
        raise UnauthorizedError("Account no longer exists.")
    return user


async def get_current_user(
    user: Optional[User] = Depends(get_optional_user),
) -> User:
    if user is None:
        raise UnauthorizedError(
            "Authentication required. Provide Authorization: Bearer <token>."
        )
    return user


async def require_admin(
    user: Optional[User] = Depends(get_optional_user),
) -> User:
    """Capability check for admin-only endpoints. Anything short of ADMIN is a 401."""
    if user is None or user.role != Role.ADMIN.value:
        if user is not None:
            logger.warning(f"Non-admin user {user.id[:8]}... denied admin endpoint")
        raise UnauthorizedError("Unauthorized")
    return user


async def require_self_or_admin(
    user_id: str = Path(..., description="Target user id"),
    user: User = Depends(get_current_user),
) -> User:
    """
    Dependency for routes that act on a `{user_id}` path parameter.

    The caller must be that user or an ADMIN. Returns the caller.
    """
    if user.id != user_id and user.role != Role.ADMIN.value:
        raise PermissionDeniedError("User mismatch for access token.")
    return user


async def require_self(
    user_id: str = Path(..., description="Target user id"),
    user: User = Depends(get_current_user),
) -> User:
    """The caller must be the `{user_id}` user; admins get no exception."""
    if user.id != user_id:
        raise PermissionDeniedError("User mismatch for access token.")
    return user
