"""
Role endpoints
"""
from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from app.constants import CREATE_ROLE, DELETE_ROLE, EDIT_ROLE, READ_ROLES, READ_USERS, VIEW_ROLE
from app.core.deps import Principal, get_db
from app.core.permissions import require_permissions
from app.schemas.rbac import RoleCreate, RoleOut, RoleUpdate, RoleUserOut
from app.services import rbac_service

router = APIRouter()


@router.get("", response_model=List[RoleOut])
async def list_roles_endpoint(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(READ_ROLES))
):
    return rbac_service.list_roles(db)


@router.get("/{role_id}", response_model=RoleOut)
async def get_role_endpoint(
    role_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(VIEW_ROLE))
):
    return rbac_service.get_role(db, role_id)


@router.get(
    "/{role_id}/users",
    response_model=List[RoleUserOut],
    dependencies=[Depends(require_permissions(READ_USERS))],
)
async def list_role_users_endpoint(
    role_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(VIEW_ROLE))
):
    """Active users holding the role (needs VIEW_ROLE and READ_USERS)"""
    return rbac_service.list_role_users(db, role_id)


@router.post("", response_model=RoleOut, status_code=201)
async def create_role_endpoint(
    data: RoleCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(CREATE_ROLE))
):
    return rbac_service.create_role(db, data, principal.user_id)


@router.put("/{role_id}", response_model=RoleOut)
async def update_role_endpoint(
    role_id: int,
    data: RoleUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(EDIT_ROLE))
):
    return rbac_service.update_role(db, role_id, data, principal.user_id)


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_role_endpoint(
    role_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(DELETE_ROLE))
):
    """Soft-delete a role; refused while it is assigned to active users"""
    rbac_service.delete_role(db, role_id, principal.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
