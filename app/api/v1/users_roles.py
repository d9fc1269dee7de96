"""
User -> role assignment endpoints
"""
from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from app.constants import ASSIGN_ROLES, READ_ROLES, READ_USERS, REVOKE_ROLES
from app.core.deps import Principal, get_db
from app.core.permissions import RequireMode, require_permissions
from app.schemas.rbac import (
    BulkAssignResult,
    ReplaceResult,
    UserRoleAssign,
    UserRoleBulkAssign,
    UserRoleOut,
    UserRoleReplace,
)
from app.services import rbac_service

router = APIRouter()

can_read = require_permissions(READ_USERS, READ_ROLES, mode=RequireMode.ANY)


@router.get("/user/{user_id}", response_model=List[UserRoleOut])
async def list_user_roles_endpoint(
    user_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_read)
):
    """Roles assigned to a user"""
    return rbac_service.list_user_roles(db, user_id)


@router.get("/role/{role_id}", response_model=List[UserRoleOut])
async def list_role_assignments_endpoint(
    role_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_read)
):
    """Users holding a role"""
    return rbac_service.list_role_assignments(db, role_id)


@router.post("", response_model=UserRoleOut, status_code=201)
async def assign_role_endpoint(
    data: UserRoleAssign,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(ASSIGN_ROLES))
):
    return rbac_service.assign_role(db, data.user_id, data.role_id, principal.user_id)


@router.post("/bulk-assign", response_model=BulkAssignResult)
async def bulk_assign_roles_endpoint(
    data: UserRoleBulkAssign,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(ASSIGN_ROLES))
):
    """Give several roles at once; roles the user already has are skipped"""
    return rbac_service.bulk_assign_roles(db, data.user_id, data.role_ids, principal.user_id)


@router.put("/replace", response_model=ReplaceResult)
async def replace_roles_endpoint(
    data: UserRoleReplace,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(ASSIGN_ROLES, REVOKE_ROLES))
):
    """Replace the whole role set of a user (needs ASSIGN_ROLES and REVOKE_ROLES)"""
    return rbac_service.replace_roles(db, data.user_id, data.role_ids, principal.user_id)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_role_endpoint(
    data: UserRoleAssign,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(REVOKE_ROLES))
):
    rbac_service.revoke_role(db, data.user_id, data.role_id, principal.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
