"""
Authentication schemas
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer

from app.utils.datetime_utils import iso_8601_utc


class LoginRequest(BaseModel):
    """Login request schema"""
    email: str = Field(..., min_length=3, description="Account email")
    password: str = Field(..., min_length=1, description="Password")


class UserInfo(BaseModel):
    """Identity returned with a token and by /auth/me"""
    id: int
    email: str
    username: str
    first_name: str = ""
    last_name: str = ""
    roles: List[str] = []
    permissions: List[str] = []
    company_id: Optional[int] = None
    is_cabinet_expert: bool = False


class LoginResponse(BaseModel):
    """Token response schema"""
    message: str = "Authentication successful"
    token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserInfo

    @field_serializer("expires_at")
    def serialize_expires_at(self, v: datetime) -> str:
        return iso_8601_utc(v)


class MessageResponse(BaseModel):
    message: str
