"""
Authentication endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.core.deps import Principal, get_current_principal, get_db
from app.core.errors import AuthenticationError
from app.models.user import User
from app.schemas.auth import LoginRequest, LoginResponse, MessageResponse, UserInfo
from app.services.auth_service import build_user_info, login

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login_endpoint(
    login_data: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate with email and password and return a JWT

    Inactive or deleted accounts are rejected like wrong credentials.
    """
    return login(db, login_data)


@router.post("/logout", response_model=MessageResponse)
async def logout_endpoint():
    """Tokens are stateless; the client discards its token"""
    return MessageResponse(message="Logged out. Please discard the token on the client.")


@router.get("/me", response_model=UserInfo)
async def me_endpoint(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    """Current user with roles and effective permissions"""
    user = db.query(User).filter(User.id == principal.user_id).first()
    if user is None:
        raise AuthenticationError("User not found or inactive")
    return build_user_info(db, user)
