"""
Password hashing and one-time codes.

argon2id via argon2-cffi for passwords and for the hashed one-time codes
used by password reset and account deletion.
"""
import secrets

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from domain.constants import ACCOUNT_TOKEN_LENGTH

_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password_hash: str | None, password: str) -> bool:
    """Check a plain value against a stored argon2 hash. Never raises."""
    if not password_hash:
        return False
    try:
        return _hasher.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def generate_one_time_code(length: int = ACCOUNT_TOKEN_LENGTH) -> str:
    """Numeric code sent to the user's inbox."""
    return "".join(str(secrets.randbelow(10)) for _ in range(length))
