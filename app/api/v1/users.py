"""
User account endpoints
"""
from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from app.constants import CREATE_USERS, DELETE_USERS, EDIT_USERS, READ_USERS, VIEW_USERS
from app.core.deps import Principal, get_db
from app.core.permissions import require_permissions
from app.schemas.user import UserCreate, UserCreateResponse, UserOut, UserUpdate
from app.services.user_service import (
    create_user,
    delete_user,
    get_user,
    list_users,
    to_user_out,
    update_user,
)

router = APIRouter()


@router.get("", response_model=List[UserOut])
async def list_users_endpoint(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(READ_USERS))
):
    """List active user accounts"""
    return [to_user_out(db, user) for user in list_users(db)]


@router.get("/{user_id}", response_model=UserOut)
async def get_user_endpoint(
    user_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(VIEW_USERS))
):
    return to_user_out(db, get_user(db, user_id))


@router.post("", response_model=UserCreateResponse, status_code=201)
async def create_user_endpoint(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(CREATE_USERS))
):
    """
    Create a user account

    When no password is supplied a temporary one is generated and returned
    once in `temporary_password`.
    """
    return create_user(db, user_data, principal.user_id)


@router.put("/{user_id}", response_model=UserOut)
async def update_user_endpoint(
    user_id: int,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(EDIT_USERS))
):
    return to_user_out(db, update_user(db, user_id, user_data, principal.user_id))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user_endpoint(
    user_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(DELETE_USERS))
):
    """Soft-delete a user; refused for oneself and for users with active roles"""
    delete_user(db, user_id, principal.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
