"""
Credential generators for accounts created by administrators
"""
import re
import secrets
import string
import unicodedata
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.query import not_deleted
from app.models.user import User

UPPERCASE = string.ascii_uppercase
LOWERCASE = string.ascii_lowercase
DIGITS = string.digits
SPECIAL = "!@#$%^&*-_=+?"
ALPHABET = UPPERCASE + LOWERCASE + DIGITS + SPECIAL

# 2 upper + 2 lower + 2 digits + 1 special
MIN_LENGTH = 7


def generate_temporary_password(length: Optional[int] = None) -> str:
    """
    Random password with at least two uppercase letters, two lowercase
    letters, two digits and one special character

    The remaining positions are drawn from the full alphabet and the result
    is shuffled, all with the `secrets` CSPRNG.
    """
    if length is None:
        length = settings.TEMP_PASSWORD_LENGTH
    if length < MIN_LENGTH:
        raise ValueError(f"Temporary password length must be at least {MIN_LENGTH}")

    chars = [
        secrets.choice(UPPERCASE),
        secrets.choice(UPPERCASE),
        secrets.choice(LOWERCASE),
        secrets.choice(LOWERCASE),
        secrets.choice(DIGITS),
        secrets.choice(DIGITS),
        secrets.choice(SPECIAL),
    ]
    chars.extend(secrets.choice(ALPHABET) for _ in range(length - len(chars)))
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)


def _slug(value: str) -> str:
    normalized = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    return re.sub(r"[^a-z0-9]", "", normalized.lower())


def generate_username(db: Session, first_name: str, last_name: str) -> str:
    """
    `first.last` with accents and punctuation stripped, suffixed with a
    counter (`first.last2`, `first.last3`, ...) while the name is taken
    """
    base = ".".join(part for part in (_slug(first_name), _slug(last_name)) if part) or "user"

    candidate = base
    counter = 1
    while db.query(User.id).filter(
        func.lower(User.username) == candidate,
        *not_deleted(User),
    ).first():
        counter += 1
        candidate = f"{base}{counter}"
    return candidate
