"""
Role -> permission grant endpoints
"""
from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from app.constants import MANAGE_PERMISSIONS, READ_PERMISSIONS, READ_ROLES
from app.core.deps import Principal, get_db
from app.core.permissions import RequireMode, require_permissions
from app.schemas.rbac import (
    BulkAssignResult,
    ReplaceResult,
    RolePermissionAssign,
    RolePermissionBulkAssign,
    RolePermissionOut,
    RolePermissionReplace,
)
from app.services import rbac_service

router = APIRouter()

can_read = require_permissions(READ_ROLES, READ_PERMISSIONS, mode=RequireMode.ANY)
can_manage = require_permissions(MANAGE_PERMISSIONS)


@router.get("/role/{role_id}", response_model=List[RolePermissionOut])
async def list_role_permissions_endpoint(
    role_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_read)
):
    """Permissions granted to a role"""
    return rbac_service.list_role_permissions(db, role_id)


@router.get("/permission/{permission_id}", response_model=List[RolePermissionOut])
async def list_permission_roles_endpoint(
    permission_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_read)
):
    """Roles granting a permission"""
    return rbac_service.list_permission_roles(db, permission_id)


@router.post("", response_model=RolePermissionOut, status_code=201)
async def assign_permission_endpoint(
    data: RolePermissionAssign,
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_manage)
):
    return rbac_service.assign_permission(db, data.role_id, data.permission_id, principal.user_id)


@router.post("/bulk-assign", response_model=BulkAssignResult)
async def bulk_assign_permissions_endpoint(
    data: RolePermissionBulkAssign,
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_manage)
):
    """Grant several permissions at once; already granted ones are skipped"""
    return rbac_service.bulk_assign_permissions(db, data.role_id, data.permission_ids, principal.user_id)


@router.put("/replace", response_model=ReplaceResult)
async def replace_permissions_endpoint(
    data: RolePermissionReplace,
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_manage)
):
    """Replace the whole permission set of a role"""
    return rbac_service.replace_permissions(db, data.role_id, data.permission_ids, principal.user_id)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_permission_endpoint(
    data: RolePermissionAssign,
    db: Session = Depends(get_db),
    principal: Principal = Depends(can_manage)
):
    rbac_service.revoke_permission(db, data.role_id, data.permission_id, principal.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
