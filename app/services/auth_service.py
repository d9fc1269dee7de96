"""
Authentication service - credential checks and permission resolution
"""
import logging
from datetime import timedelta
from typing import List, Set

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import AuthenticationError
from app.core.security import create_access_token, verify_password
from app.db.query import active, not_deleted
from app.models.company import Company
from app.models.employee import Employee
from app.models.permission import Permission, RolePermission, UserRole
from app.models.role import Role
from app.models.user import User
from app.schemas.auth import LoginRequest, LoginResponse, UserInfo
from app.utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)


def resolve_user_permissions(db: Session, user_id: int) -> Set[str]:
    """
    Effective permission names of a user

    Union over every active role assignment of the permissions granted to
    that role. Soft-deleted assignments, roles, grants and permissions are
    ignored.
    """
    rows = (
        db.query(Permission.name)
        .join(RolePermission, RolePermission.permission_id == Permission.id)
        .join(Role, Role.id == RolePermission.role_id)
        .join(UserRole, UserRole.role_id == Role.id)
        .filter(
            UserRole.user_id == user_id,
            *not_deleted(UserRole, Role, RolePermission, Permission),
        )
        .distinct()
        .all()
    )
    return {name for (name,) in rows}


def user_role_names(db: Session, user_id: int) -> List[str]:
    """Names of the active roles assigned to a user, alphabetical"""
    rows = (
        db.query(Role.name)
        .join(UserRole, UserRole.role_id == Role.id)
        .filter(
            UserRole.user_id == user_id,
            *not_deleted(UserRole, Role),
        )
        .order_by(Role.name)
        .all()
    )
    return [name for (name,) in rows]


def authenticate(db: Session, email: str, password: str) -> User:
    """
    Return the active user matching email and password

    Raises:
        AuthenticationError: Unknown email, inactive account or wrong password
    """
    user = active(db, User).filter(
        func.lower(User.email) == email.strip().lower(),
        User.is_active.is_(True),
    ).first()

    if not user or not verify_password(password, user.password_hash):
        logger.info("Failed login attempt for %s", email)
        raise AuthenticationError("Invalid email or password")

    return user


def build_user_info(db: Session, user: User) -> UserInfo:
    """Identity payload with roles, permissions and the linked employee's company"""
    info = UserInfo(
        id=user.id,
        email=user.email,
        username=user.username,
        roles=user_role_names(db, user.id),
        permissions=sorted(resolve_user_permissions(db, user.id)),
    )

    if user.employee_id:
        row = (
            db.query(Employee.first_name, Employee.last_name, Company.id, Company.is_cabinet_expert)
            .outerjoin(Company, Company.id == Employee.company_id)
            .filter(Employee.id == user.employee_id)
            .first()
        )
        if row:
            info.first_name, info.last_name = row[0], row[1]
            info.company_id = row[2]
            info.is_cabinet_expert = bool(row[3])

    return info


def login(db: Session, data: LoginRequest) -> LoginResponse:
    """Authenticate and issue a signed access token"""
    user = authenticate(db, data.email, data.password)
    info = build_user_info(db, user)

    expires_at = now_utc() + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    token = create_access_token(
        user_id=user.id,
        email=user.email,
        permissions=info.permissions,
    )

    logger.info("User %s logged in", user.id)
    return LoginResponse(token=token, expires_at=expires_at, user=info)
