"""
Dependencies for FastAPI endpoints
"""
from dataclasses import dataclass, field
from typing import FrozenSet, Generator, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.errors import AuthenticationError
from app.core.security import decode_token
from app.db.query import get_active
from app.db.session import SessionLocal
from app.models.user import User
from app.services.auth_service import resolve_user_permissions


# auto_error=False so a missing header surfaces as our 401 body, not FastAPI's 403
security = HTTPBearer(auto_error=False)


def get_db() -> Generator:
    """Dependency for getting database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@dataclass(frozen=True)
class Principal:
    """Authenticated caller with its effective permission set"""
    user_id: int
    email: str
    username: str
    employee_id: Optional[int] = None
    permissions: FrozenSet[str] = field(default_factory=frozenset)


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> Principal:
    """
    Get the current authenticated principal from the bearer token

    Permissions are resolved from the database on every request, so role
    changes apply without re-issuing tokens.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()

    try:
        payload = decode_token(credentials.credentials)
        sub_value = payload.get("uid") or payload.get("sub")
        if sub_value is None:
            raise AuthenticationError("Invalid authentication credentials")
        user_id = int(sub_value)
    except (ValueError, TypeError):
        raise AuthenticationError("Invalid authentication credentials")

    user = get_active(db, User, user_id)
    if user is None or not user.is_active:
        raise AuthenticationError("User not found or inactive")

    return Principal(
        user_id=user.id,
        email=user.email,
        username=user.username,
        employee_id=user.employee_id,
        permissions=frozenset(resolve_user_permissions(db, user.id)),
    )
