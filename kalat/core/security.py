"""Password hashing and JWT session tokens (issue/verify)."""

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

from kalat.core.config import ROLE_VALUES, settings
from kalat.core.errors import InvalidToken
from kalat.schemas.auth import Claims

if TYPE_CHECKING:
    from kalat.models.account import Account

USERNAME_MAX_LEN = 255
PASSWORD_MAX_LEN = 128


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors.
    pw_bytes = plain_password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def _secret(secret: str | None) -> str:
    return secret if secret is not None else settings.JWT_SECRET.get_secret_value()


def issue_token(
    account: "Account",
    *,
    secret: str | None = None,
    now: datetime | None = None,
) -> str:
    """Create a signed session token for account (sub, username, role, iat, exp)."""
    issued_at = now or datetime.now(UTC)
    expires_at = issued_at + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(account.id),
        "username": account.username,
        "role": account.role,
        "iat": issued_at,
        "exp": expires_at,
    }
    return jwt.encode(payload, _secret(secret), algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str, *, secret: str | None = None) -> Claims:
    """
    Decode and validate a session token.
    Raises InvalidToken on bad signature, malformed token, expiry or missing claims.
    """
    try:
        payload = jwt.decode(
            token,
            _secret(secret),
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise InvalidToken("Token has expired") from e
    except jwt.PyJWTError as e:
        raise InvalidToken() from e

    username = payload.get("username")
    role = payload.get("role")
    if not username or role not in ROLE_VALUES:
        raise InvalidToken("Invalid token payload")
    return Claims(
        subject_id=payload["sub"],
        username=username,
        role=role,
        issued_at=datetime.fromtimestamp(payload["iat"], UTC),
        expires_at=datetime.fromtimestamp(payload["exp"], UTC),
    )
