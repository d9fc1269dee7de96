"""
Database initialization

Seeds the permission catalog and, on an empty database, an ADMIN role
holding every permission plus the initial admin account.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.constants import permission_catalog
from app.core.config import settings
from app.core.security import hash_password
from app.db.query import active, not_deleted
from app.models.permission import Permission, RolePermission, UserRole
from app.models.role import Role
from app.models.user import User

logger = logging.getLogger(__name__)

ADMIN_ROLE_NAME = "ADMIN"


def seed_permissions(db: Session) -> int:
    """Insert catalog permissions that are missing; returns how many were added"""
    existing = {
        name for (name,) in db.query(Permission.name).filter(*not_deleted(Permission)).all()
    }
    added = 0
    for name, description, resource, action in permission_catalog():
        if name in existing:
            continue
        db.add(Permission(name=name, description=description, resource=resource, action=action))
        added += 1
    db.flush()
    return added


def bootstrap_initial_admin(db: Session) -> Optional[User]:
    """
    Create the ADMIN role and the initial admin user when no user exists

    Returns the created user, or None when users already exist.
    """
    added = seed_permissions(db)
    if added:
        logger.info("Seeded %s permissions", added)

    if db.query(User.id).first() is not None:
        db.commit()
        logger.info("Users already exist, skipping initial admin bootstrap")
        return None

    admin_role = active(db, Role).filter(Role.name == ADMIN_ROLE_NAME).first()
    if not admin_role:
        admin_role = Role(name=ADMIN_ROLE_NAME, description="Full access")
        db.add(admin_role)
        db.flush()
        logger.info("Created %s role", ADMIN_ROLE_NAME)

    granted = {
        pid for (pid,) in db.query(RolePermission.permission_id).filter(
            RolePermission.role_id == admin_role.id,
            *not_deleted(RolePermission),
        ).all()
    }
    for permission in active(db, Permission).all():
        if permission.id not in granted:
            db.add(RolePermission(role_id=admin_role.id, permission_id=permission.id))

    admin = User(
        email=settings.INITIAL_ADMIN_EMAIL,
        username="admin",
        password_hash=hash_password(settings.INITIAL_ADMIN_PASSWORD),
        is_active=True,
    )
    db.add(admin)
    db.flush()
    db.add(UserRole(user_id=admin.id, role_id=admin_role.id))
    db.commit()

    logger.info("Initial admin user created: %s", settings.INITIAL_ADMIN_EMAIL)
    logger.info("Password: [set via INITIAL_ADMIN_PASSWORD environment variable]")
    return admin
