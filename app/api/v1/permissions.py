"""
Permission catalog endpoints
"""
from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from app.constants import MANAGE_PERMISSIONS, READ_PERMISSIONS
from app.core.deps import Principal, get_db
from app.core.permissions import require_permissions
from app.schemas.rbac import PermissionCreate, PermissionOut, PermissionUpdate
from app.services import rbac_service

router = APIRouter()


@router.get("", response_model=List[PermissionOut])
async def list_permissions_endpoint(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(READ_PERMISSIONS))
):
    return rbac_service.list_permissions(db)


@router.get("/count")
async def count_permissions_endpoint(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(READ_PERMISSIONS))
):
    """Number of active permissions"""
    return {"count": len(rbac_service.list_permissions(db))}


@router.get("/{permission_id}", response_model=PermissionOut)
async def get_permission_endpoint(
    permission_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(READ_PERMISSIONS))
):
    return rbac_service.get_permission(db, permission_id)


@router.post("", response_model=PermissionOut, status_code=201)
async def create_permission_endpoint(
    data: PermissionCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(MANAGE_PERMISSIONS))
):
    return rbac_service.create_permission(db, data, principal.user_id)


@router.put("/{permission_id}", response_model=PermissionOut)
async def update_permission_endpoint(
    permission_id: int,
    data: PermissionUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(MANAGE_PERMISSIONS))
):
    return rbac_service.update_permission(db, permission_id, data, principal.user_id)


@router.delete("/{permission_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_permission_endpoint(
    permission_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(MANAGE_PERMISSIONS))
):
    """Soft-delete a permission; refused while an active role grants it"""
    rbac_service.delete_permission(db, permission_id, principal.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
