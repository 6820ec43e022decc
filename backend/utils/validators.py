"""
Input validation utilities for the Agro Koi store backend.

Provides reusable validators for account fields. All failures raise
ValidationError (HTTP 400) with the message shown to the storefront.
"""
import re
from typing import Optional

from domain.constants import PASSWORD_MAX_LENGTH, PASSWORD_MIN_LENGTH, PASSWORD_PATTERN
from domain.errors import ValidationError

_PASSWORD_RE = re.compile(PASSWORD_PATTERN)


def normalize_email(email: Optional[str]) -> str:
    """Trim and lowercase an e-mail address; None becomes ''."""
    return (email or "").strip().lower()


def require_fields(message: str, *values: Optional[str]) -> None:
    """Raise with `message` when any value is missing or blank."""
    if any(v is None or not str(v).strip() for v in values):
        raise ValidationError(message)


def validate_password(password: str) -> str:
    """
    Validate a new password.

    Rules:
        - between 6 and 20 characters
        - letters and digits only, at least one of each

    Returns:
        The password (unchanged)

    Raises:
        ValidationError(400) with the first rule that fails
    """
    if len(password) < PASSWORD_MIN_LENGTH or len(password) > PASSWORD_MAX_LENGTH:
        raise ValidationError(
            f"Password must be between {PASSWORD_MIN_LENGTH} and {PASSWORD_MAX_LENGTH} characters",
            field="password",
        )

    if not _PASSWORD_RE.fullmatch(password):
        raise ValidationError(
            "Password must contain both letters and numbers",
            field="password",
        )

    return password


def is_admin_email(email: str, admin_suffix: str) -> bool:
    """True when an admin suffix is configured and the e-mail ends with it."""
    if not admin_suffix:
        return False
    return email.endswith(admin_suffix.strip().lower())
