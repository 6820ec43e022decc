"""
Account service — registration, login, profile updates, password reset and
account deletion.

Every function takes the request's AsyncSession and leaves the commit to the
caller, except where noted.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config import Settings
from db_models import User
from domain.enums import Role
from domain.errors import ConflictError, UnauthorizedError, ValidationError
from services.mailer import Mailer
from utils.security import generate_one_time_code, hash_password, verify_password
from utils.validators import is_admin_email, normalize_email, require_fields, validate_password

logger = logging.getLogger(__name__)

INVALID_RESET_TOKEN = "Invalid or expired reset token"
INVALID_DELETE_TOKEN = "Invalid or expired token"


def _now_utc() -> datetime:
    # Naive UTC, consistent with the DateTime columns
    return datetime.utcnow()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    q = await db.execute(select(User).where(User.email == normalize_email(email)))
    return q.scalar_one_or_none()


# ════════════════════════════════════════════════════════════════════
# Registration / Login
# ════════════════════════════════════════════════════════════════════


async def register_user(
    db: AsyncSession,
    *,
    name: Optional[str],
    email: Optional[str],
    password: Optional[str],
    settings: Settings,
) -> User:
    """
    Validate and create a new account.

    Order of checks: required fields, password rules, duplicate e-mail.
    The role is ADMIN when the e-mail ends with the configured admin suffix.
    """
    require_fields("All fields are required", name, email, password)
    validate_password(password)

    email = normalize_email(email)
    if await get_user_by_email(db, email):
        raise ConflictError("User already exists")

    role = Role.ADMIN if is_admin_email(email, settings.admin_email) else Role.USER

    user = User(
        name=name.strip(),
        email=email,
        password=hash_password(password),
        role=role.value,
    )
    db.add(user)
    await db.flush()

    logger.info(f"  👤 Registered user {user.id[:8]}... role={user.role}")
    return user


async def authenticate(db: AsyncSession, *, email: Optional[str], password: Optional[str]) -> User:
    require_fields("Email and password are required", email, password)

    user = await get_user_by_email(db, email)
    if not user or not verify_password(user.password, password):
        raise UnauthorizedError("Invalid email or password")
    return user


# ════════════════════════════════════════════════════════════════════
# Profile
# ════════════════════════════════════════════════════════════════════


async def update_user(
    db: AsyncSession,
    user: User,
    *,
    name: Optional[str] = None,
    email: Optional[str] = None,
    password: Optional[str] = None,
) -> User:
    """
    Apply a partial profile update.

    Blank values leave the field unchanged, so the account screen can send an
    empty password box.
    """
    if name is not None and name.strip():
        user.name = name.strip()

    if email is not None and email.strip():
        new_email = normalize_email(email)
        if new_email != user.email:
            existing = await get_user_by_email(db, new_email)
            if existing and existing.id != user.id:
                raise ConflictError("Email is already in use")
            user.email = new_email

    if password:
        validate_password(password)
        user.password = hash_password(password)

    await db.flush()
    return user


# ════════════════════════════════════════════════════════════════════
# Password Reset
# ════════════════════════════════════════════════════════════════════


async def request_password_reset(
    db: AsyncSession,
    *,
    email: Optional[str],
    settings: Settings,
    mailer: Mailer,
) -> bool:
    """
    Issue a reset code when the account exists.

    Returns whether a code was issued; the route answers the same either way.
    """
    require_fields("Email is required", email)

    user = await get_user_by_email(db, email)
    if not user:
        logger.info("Password reset requested for unknown email")
        return False

    code = generate_one_time_code()
    user.reset_token_hash = hash_password(code)
    user.reset_token_expires_at = _now_utc() + timedelta(minutes=settings.password_reset_ttl_minutes)
    await db.flush()

    await mailer.send_password_reset(user.email, code, settings.password_reset_ttl_minutes)
    return True


async def reset_password(
    db: AsyncSession,
    *,
    email: Optional[str],
    token: Optional[str],
    password: Optional[str],
) -> User:
    require_fields("Email, token, and new password are required", email, token, password)
    validate_password(password)

    user = await get_user_by_email(db, email)
    if not user or not user.reset_token_hash:
        raise ValidationError(INVALID_RESET_TOKEN)

    expires_at = user.reset_token_expires_at
    if (
        expires_at is None
        or expires_at <= _now_utc()
        or not verify_password(user.reset_token_hash, token.strip())
    ):
        raise ValidationError(INVALID_RESET_TOKEN)

    user.password = hash_password(password)
    _clear_reset_token(user)
    await db.flush()

    logger.info(f"  🔑 Password reset for user {user.id[:8]}...")
    return user


def _clear_reset_token(user: User) -> None:
    user.reset_token_hash = None
    user.reset_token_expires_at = None


# ════════════════════════════════════════════════════════════════════
# Account Deletion
# ════════════════════════════════════════════════════════════════════


async def issue_delete_token(
    db: AsyncSession,
    user: User,
    *,
    settings: Settings,
    mailer: Mailer,
) -> None:
    code = generate_one_time_code()
    user.delete_token_hash = hash_password(code)
    user.delete_token_expires_at = _now_utc() + timedelta(minutes=settings.delete_token_ttl_minutes)
    await db.flush()

    await mailer.send_delete_token(user.email, code, settings.delete_token_ttl_minutes)


async def delete_user(db: AsyncSession, user: User, *, token: Optional[str]) -> None:
    """Delete the account once the mailed code checks out."""
    require_fields("Token is required", token)

    expires_at = user.delete_token_expires_at
    if (
        not user.delete_token_hash
        or expires_at is None
        or expires_at <= _now_utc()
        or not verify_password(user.delete_token_hash, token.strip())
    ):
        raise ValidationError(INVALID_DELETE_TOKEN)

    user_id = user.id
    await db.delete(user)
    await db.flush()
    logger.info(f"  🗑️ Deleted user {user_id[:8]}...")
