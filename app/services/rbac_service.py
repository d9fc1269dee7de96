"""
RBAC service - permissions, roles and their assignments

Assignments (role -> permission, user -> role) are soft-deletable join rows.
Revoking soft-deletes the row; re-assigning later creates a fresh one.
"""
import logging
from typing import Iterable, List, Set

from sqlalchemy.orm import Session

from app.core.errors import ConflictError, DependencyError, NotFoundError, ValidationError
from app.db.query import active, get_active, name_taken, not_deleted, soft_delete
from app.models.permission import Permission, RolePermission, UserRole
from app.models.role import Role
from app.models.user import User
from app.schemas.rbac import (
    BulkAssignResult,
    PermissionCreate,
    PermissionUpdate,
    ReplaceResult,
    RoleCreate,
    RolePermissionOut,
    RoleUpdate,
    UserRoleOut,
)

logger = logging.getLogger(__name__)


# Permissions

def list_permissions(db: Session) -> List[Permission]:
    return active(db, Permission).order_by(Permission.resource.asc(), Permission.name.asc()).all()


def get_permission(db: Session, permission_id: int) -> Permission:
    """
    Raises:
        NotFoundError: If no active permission has this id
    """
    permission = get_active(db, Permission, permission_id)
    if not permission:
        raise NotFoundError(f"Permission with id {permission_id} not found")
    return permission


def create_permission(db: Session, data: PermissionCreate, actor_id: int) -> Permission:
    """
    Create a permission

    Raises:
        ConflictError: If the name is already used by an active permission
    """
    name = data.name.strip()
    if name_taken(db, Permission, Permission.name, name):
        raise ConflictError(f"Permission '{name}' already exists")

    permission = Permission(
        name=name,
        description=data.description,
        resource=data.resource,
        action=data.action,
        created_by=actor_id,
    )
    db.add(permission)
    db.commit()
    db.refresh(permission)
    return permission


def _is_granted(db: Session, permission: Permission) -> bool:
    """True while an active role grants the permission"""
    return db.query(
        active(db, RolePermission)
        .join(Role, Role.id == RolePermission.role_id)
        .filter(RolePermission.permission_id == permission.id, *not_deleted(Role))
        .exists()
    ).scalar()


def update_permission(db: Session, permission_id: int, data: PermissionUpdate, actor_id: int) -> Permission:
    """
    Merge the non-null fields into a permission

    Routes check permissions by name, so a permission granted to an active
    role keeps its name. Description and metadata stay editable.

    Raises:
        ConflictError: If the new name is already used by an active permission
        DependencyError: If the name changes while an active role grants it
    """
    permission = get_permission(db, permission_id)

    if data.name is not None:
        name = data.name.strip()
        if name != permission.name:
            if _is_granted(db, permission):
                raise DependencyError(
                    f"Permission '{permission.name}' is granted to active roles and cannot be renamed"
                )
            if name_taken(db, Permission, Permission.name, name, exclude_id=permission.id):
                raise ConflictError(f"Permission '{name}' already exists")
            permission.name = name

    for field in ("description", "resource", "action"):
        value = getattr(data, field)
        if value is not None:
            setattr(permission, field, value)

    permission.touch(actor_id)
    db.commit()
    db.refresh(permission)
    return permission


def delete_permission(db: Session, permission_id: int, actor_id: int) -> None:
    """
    Soft-delete a permission

    Raises:
        DependencyError: If an active role still grants it
    """
    permission = get_permission(db, permission_id)

    if _is_granted(db, permission):
        raise DependencyError(
            f"Permission '{permission.name}' is still granted to active roles"
        )

    soft_delete(permission, actor_id)
    db.commit()
    logger.info("Permission %s deleted by user %s", permission_id, actor_id)


# Roles

def list_roles(db: Session) -> List[Role]:
    return active(db, Role).order_by(Role.name.asc()).all()


def get_role(db: Session, role_id: int) -> Role:
    """
    Raises:
        NotFoundError: If no active role has this id
    """
    role = get_active(db, Role, role_id)
    if not role:
        raise NotFoundError(f"Role with id {role_id} not found")
    return role


def create_role(db: Session, data: RoleCreate, actor_id: int) -> Role:
    """
    Create a new role

    Name is treated as case-insensitive unique among active roles.
    """
    name = data.name.strip()
    if name_taken(db, Role, Role.name, name):
        raise ConflictError(f"Role with name '{name}' already exists")

    role = Role(name=name, description=data.description, created_by=actor_id)
    db.add(role)
    db.commit()
    db.refresh(role)
    logger.info("Role %s (%s) created by user %s", role.id, role.name, actor_id)
    return role


def update_role(db: Session, role_id: int, data: RoleUpdate, actor_id: int) -> Role:
    role = get_role(db, role_id)

    if data.name is not None:
        name = data.name.strip()
        if name_taken(db, Role, Role.name, name, exclude_id=role.id):
            raise ConflictError(f"Role with name '{name}' already exists")
        role.name = name

    if data.description is not None:
        role.description = data.description

    role.touch(actor_id)
    db.commit()
    db.refresh(role)
    return role


def delete_role(db: Session, role_id: int, actor_id: int) -> None:
    """
    Soft-delete a role together with its permission grants

    Raises:
        DependencyError: If the role is still assigned to active users
    """
    role = get_role(db, role_id)

    assigned = (
        active(db, UserRole)
        .join(User, User.id == UserRole.user_id)
        .filter(UserRole.role_id == role.id, *not_deleted(User))
        .first()
    )
    if assigned:
        raise DependencyError(f"Role '{role.name}' is still assigned to active users")

    for grant in active(db, RolePermission).filter(RolePermission.role_id == role.id).all():
        soft_delete(grant, actor_id)
    soft_delete(role, actor_id)
    db.commit()
    logger.info("Role %s deleted by user %s", role_id, actor_id)


def list_role_users(db: Session, role_id: int) -> List[User]:
    """Active users holding a role"""
    get_role(db, role_id)
    return (
        active(db, User)
        .join(UserRole, UserRole.user_id == User.id)
        .filter(UserRole.role_id == role_id, *not_deleted(UserRole))
        .order_by(User.username.asc())
        .all()
    )


# Role -> permission grants

def _role_permission_query(db: Session):
    return (
        db.query(RolePermission, Role.name, Permission.name)
        .join(Role, Role.id == RolePermission.role_id)
        .join(Permission, Permission.id == RolePermission.permission_id)
        .filter(*not_deleted(RolePermission, Role, Permission))
    )


def _to_role_permission_out(row) -> RolePermissionOut:
    grant, role_name, permission_name = row
    return RolePermissionOut(
        id=grant.id,
        role_id=grant.role_id,
        role_name=role_name,
        permission_id=grant.permission_id,
        permission_name=permission_name,
        created_at=grant.created_at,
    )


def list_role_permissions(db: Session, role_id: int) -> List[RolePermissionOut]:
    get_role(db, role_id)
    rows = (
        _role_permission_query(db)
        .filter(RolePermission.role_id == role_id)
        .order_by(Permission.name.asc())
        .all()
    )
    return [_to_role_permission_out(row) for row in rows]


def list_permission_roles(db: Session, permission_id: int) -> List[RolePermissionOut]:
    get_permission(db, permission_id)
    rows = (
        _role_permission_query(db)
        .filter(RolePermission.permission_id == permission_id)
        .order_by(Role.name.asc())
        .all()
    )
    return [_to_role_permission_out(row) for row in rows]


def _granted_permission_ids(db: Session, role_id: int) -> Set[int]:
    rows = (
        db.query(RolePermission.permission_id)
        .filter(RolePermission.role_id == role_id, *not_deleted(RolePermission))
        .all()
    )
    return {pid for (pid,) in rows}


def _check_permissions_exist(db: Session, permission_ids: Iterable[int]) -> None:
    for permission_id in permission_ids:
        get_permission(db, permission_id)


def assign_permission(db: Session, role_id: int, permission_id: int, actor_id: int) -> RolePermissionOut:
    """
    Grant one permission to a role

    Raises:
        NotFoundError: If the role or permission does not exist
        ConflictError: If the role already has the permission
    """
    role = get_role(db, role_id)
    permission = get_permission(db, permission_id)

    if permission.id in _granted_permission_ids(db, role.id):
        raise ConflictError(f"Role '{role.name}' already has permission '{permission.name}'")

    grant = RolePermission(role_id=role.id, permission_id=permission.id, created_by=actor_id)
    db.add(grant)
    db.commit()
    db.refresh(grant)
    return RolePermissionOut(
        id=grant.id,
        role_id=role.id,
        role_name=role.name,
        permission_id=permission.id,
        permission_name=permission.name,
        created_at=grant.created_at,
    )


def bulk_assign_permissions(db: Session, role_id: int, permission_ids: List[int], actor_id: int) -> BulkAssignResult:
    """Grant several permissions; ones the role already has are skipped"""
    role = get_role(db, role_id)
    wanted = list(dict.fromkeys(permission_ids))
    _check_permissions_exist(db, wanted)

    existing = _granted_permission_ids(db, role.id)
    to_add = [pid for pid in wanted if pid not in existing]
    for pid in to_add:
        db.add(RolePermission(role_id=role.id, permission_id=pid, created_by=actor_id))
    db.commit()

    return BulkAssignResult(
        message=f"{len(to_add)} permission(s) assigned to role '{role.name}'",
        assigned=len(to_add),
        skipped=len(wanted) - len(to_add),
    )


def replace_permissions(db: Session, role_id: int, permission_ids: List[int], actor_id: int) -> ReplaceResult:
    """Make the role's grants exactly `permission_ids`"""
    role = get_role(db, role_id)
    wanted = set(permission_ids)
    _check_permissions_exist(db, wanted)

    removed = 0
    kept = set()
    for grant in active(db, RolePermission).filter(RolePermission.role_id == role.id).all():
        if grant.permission_id in wanted and grant.permission_id not in kept:
            kept.add(grant.permission_id)
        else:
            soft_delete(grant, actor_id)
            removed += 1

    to_add = wanted - kept
    for pid in sorted(to_add):
        db.add(RolePermission(role_id=role.id, permission_id=pid, created_by=actor_id))
    db.commit()

    logger.info(
        "Permissions of role %s replaced by user %s (+%s -%s)", role.id, actor_id, len(to_add), removed
    )
    return ReplaceResult(
        message=f"Permissions of role '{role.name}' updated",
        added=len(to_add),
        removed=removed,
    )


def revoke_permission(db: Session, role_id: int, permission_id: int, actor_id: int) -> None:
    """
    Raises:
        NotFoundError: If the role does not hold the permission
    """
    grant = active(db, RolePermission).filter(
        RolePermission.role_id == role_id,
        RolePermission.permission_id == permission_id,
    ).first()
    if not grant:
        raise NotFoundError(f"Permission {permission_id} is not assigned to role {role_id}")

    soft_delete(grant, actor_id)
    db.commit()


# User -> role assignments

def _user_role_query(db: Session):
    return (
        db.query(UserRole, User.username, Role.name)
        .join(User, User.id == UserRole.user_id)
        .join(Role, Role.id == UserRole.role_id)
        .filter(*not_deleted(UserRole, User, Role))
    )


def _to_user_role_out(row) -> UserRoleOut:
    assignment, username, role_name = row
    return UserRoleOut(
        id=assignment.id,
        user_id=assignment.user_id,
        username=username,
        role_id=assignment.role_id,
        role_name=role_name,
        created_at=assignment.created_at,
    )


def _get_assignable_user(db: Session, user_id: int) -> User:
    user = get_active(db, User, user_id)
    if not user:
        raise NotFoundError(f"User with id {user_id} not found")
    if not user.is_active:
        raise ValidationError(f"User {user_id} is inactive and cannot receive roles")
    return user


def _assigned_role_ids(db: Session, user_id: int) -> Set[int]:
    rows = (
        db.query(UserRole.role_id)
        .filter(UserRole.user_id == user_id, *not_deleted(UserRole))
        .all()
    )
    return {rid for (rid,) in rows}


def list_user_roles(db: Session, user_id: int) -> List[UserRoleOut]:
    if get_active(db, User, user_id) is None:
        raise NotFoundError(f"User with id {user_id} not found")
    rows = _user_role_query(db).filter(UserRole.user_id == user_id).order_by(Role.name.asc()).all()
    return [_to_user_role_out(row) for row in rows]


def list_role_assignments(db: Session, role_id: int) -> List[UserRoleOut]:
    get_role(db, role_id)
    rows = _user_role_query(db).filter(UserRole.role_id == role_id).order_by(User.username.asc()).all()
    return [_to_user_role_out(row) for row in rows]


def assign_role(db: Session, user_id: int, role_id: int, actor_id: int) -> UserRoleOut:
    """
    Give one role to a user

    Raises:
        NotFoundError: If the user or role does not exist
        ValidationError: If the user is inactive
        ConflictError: If the user already has the role
    """
    user = _get_assignable_user(db, user_id)
    role = get_role(db, role_id)

    if role.id in _assigned_role_ids(db, user.id):
        raise ConflictError(f"User '{user.username}' already has role '{role.name}'")

    assignment = UserRole(user_id=user.id, role_id=role.id, created_by=actor_id)
    db.add(assignment)
    db.commit()
    db.refresh(assignment)
    logger.info("Role %s assigned to user %s by user %s", role.id, user.id, actor_id)
    return UserRoleOut(
        id=assignment.id,
        user_id=user.id,
        username=user.username,
        role_id=role.id,
        role_name=role.name,
        created_at=assignment.created_at,
    )


def bulk_assign_roles(db: Session, user_id: int, role_ids: List[int], actor_id: int) -> BulkAssignResult:
    """Give several roles; ones the user already has are skipped"""
    user = _get_assignable_user(db, user_id)
    wanted = list(dict.fromkeys(role_ids))
    for rid in wanted:
        get_role(db, rid)

    existing = _assigned_role_ids(db, user.id)
    to_add = [rid for rid in wanted if rid not in existing]
    for rid in to_add:
        db.add(UserRole(user_id=user.id, role_id=rid, created_by=actor_id))
    db.commit()

    return BulkAssignResult(
        message=f"{len(to_add)} role(s) assigned to user '{user.username}'",
        assigned=len(to_add),
        skipped=len(wanted) - len(to_add),
    )


def replace_roles(db: Session, user_id: int, role_ids: List[int], actor_id: int) -> ReplaceResult:
    """Make the user's roles exactly `role_ids`"""
    wanted = set(role_ids)
    user = _get_assignable_user(db, user_id) if wanted else get_active(db, User, user_id)
    if user is None:
        raise NotFoundError(f"User with id {user_id} not found")
    for rid in wanted:
        get_role(db, rid)

    removed = 0
    kept = set()
    for assignment in active(db, UserRole).filter(UserRole.user_id == user.id).all():
        if assignment.role_id in wanted and assignment.role_id not in kept:
            kept.add(assignment.role_id)
        else:
            soft_delete(assignment, actor_id)
            removed += 1

    to_add = wanted - kept
    for rid in sorted(to_add):
        db.add(UserRole(user_id=user.id, role_id=rid, created_by=actor_id))
    db.commit()

    logger.info("Roles of user %s replaced by user %s (+%s -%s)", user.id, actor_id, len(to_add), removed)
    return ReplaceResult(
        message=f"Roles of user '{user.username}' updated",
        added=len(to_add),
        removed=removed,
    )


def revoke_role(db: Session, user_id: int, role_id: int, actor_id: int) -> None:
    """
    Raises:
        NotFoundError: If the user does not hold the role
    """
    assignment = active(db, UserRole).filter(
        UserRole.user_id == user_id,
        UserRole.role_id == role_id,
    ).first()
    if not assignment:
        raise NotFoundError(f"Role {role_id} is not assigned to user {user_id}")

    soft_delete(assignment, actor_id)
    db.commit()
    logger.info("Role %s revoked from user %s by user %s", role_id, user_id, actor_id)