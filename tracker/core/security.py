"""Password hashing, password policy and JWT creation/verification."""

import re
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from tracker.core.config import settings

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

# At least one letter, at least one digit or symbol; only letters, digits and these symbols.
PASSWORD_SYMBOLS = "@$!%*#?&"
_PASSWORD_RE = re.compile(
    r"^(?=.*[A-Za-z])(?=.*\d|.*[@$!%*#?&])[A-Za-z\d@$!%*#?&]{8,}$"
)

_dummy_hash: str | None = None


def password_meets_policy(password: str | None) -> bool:
    """True if password satisfies the complexity policy."""
    if not password or len(password) > PASSWORD_MAX_LEN:
        return False
    return _PASSWORD_RE.match(password) is not None


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(
        pw_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    ).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def burn_password_check(plain_password: str) -> None:
    """Run a full bcrypt comparison against a throwaway hash (login for unknown users)."""
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_password("dummy-password-0")
    verify_password(plain_password, _dummy_hash)


def create_access_token(user_id: int, username: str, role: str) -> str:
    """Create a JWT access token carrying sub (user id), username, role and exp."""
    now = datetime.now(UTC)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "username": username,
        "role": role,
        "exp": expire,
        "iat": now,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, username, role, exp, iat).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.JWT_ALGORITHM],
    )
