"""
Security utilities for authentication and authorization
"""
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, Optional

import argon2
import bcrypt
from jose import JWTError, jwt

from app.core.config import settings

logger = logging.getLogger(__name__)

_hasher = argon2.PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a password with argon2"""
    return _hasher.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """
    Verify a password against its hash

    New hashes are argon2; bcrypt hashes ($2a$/$2b$/$2y$) imported from the
    previous platform are still accepted.
    """
    if not hashed_password:
        return False

    if hashed_password.startswith("$argon2"):
        try:
            return _hasher.verify(hashed_password, plain_password)
        except argon2.exceptions.VerificationError:
            return False
        except argon2.exceptions.InvalidHashError:
            logger.warning("Stored argon2 hash is malformed")
            return False

    if hashed_password.startswith("$2"):
        password_bytes = plain_password.encode("utf-8")
        # bcrypt only considers the first 72 bytes
        if len(password_bytes) > 72:
            password_bytes = password_bytes[:72]
        try:
            return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
        except ValueError:
            logger.warning("Stored bcrypt hash is malformed")
            return False

    return False


def validate_password(password: str) -> str:
    """
    Validate and normalize a password chosen by a user

    Raises:
        ValueError: If password is invalid with specific error message
    """
    if password is None:
        raise ValueError("Password is required")

    password = password.strip()
    if not password:
        raise ValueError("Password cannot be empty")
    if len(password) < 8:
        raise ValueError("Password must be at least 8 characters")
    return password


def create_access_token(
    user_id: int,
    email: str,
    permissions: Iterable[str] = (),
    expires_minutes: Optional[int] = None,
) -> str:
    """
    Create a signed JWT access token

    Claims: sub/uid (user id), unique_name/email, jti, permissions, plus the
    fixed issuer and audience.
    """
    if expires_minutes is None:
        expires_minutes = settings.JWT_EXPIRE_MINUTES

    now = datetime.now(timezone.utc)
    to_encode = {
        "sub": str(user_id),
        "uid": str(user_id),
        "unique_name": email,
        "email": email,
        "jti": str(uuid.uuid4()),
        "permissions": sorted(set(permissions)),
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
    }

    return jwt.encode(
        to_encode,
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM
    )


def decode_token(token: str) -> Dict:
    """Decode and verify a JWT token (signature, expiry, issuer, audience)"""
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except JWTError:
        raise ValueError("Invalid token")
