"""
User account schemas
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, field_serializer, ConfigDict


class UserCreate(BaseModel):
    """Schema for creating a user account"""
    email: str = Field(..., min_length=3, max_length=255, description="Login email (unique)")
    username: Optional[str] = Field(None, max_length=100, description="Username (unique)")
    password: Optional[str] = Field(None, description="Password; generated when omitted")
    employee_id: Optional[int] = Field(None, description="Linked employee ID")
    is_active: bool = Field(default=True, description="Account active status")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v):
        """Normalize and validate password"""
        if v is None:
            return None
        from app.core.security import validate_password
        return validate_password(v)


class UserUpdate(BaseModel):
    """Schema for updating a user account"""
    email: Optional[str] = Field(None, min_length=3, max_length=255, description="Login email")
    username: Optional[str] = Field(None, max_length=100, description="Username")
    password: Optional[str] = Field(None, description="New password")
    employee_id: Optional[int] = Field(None, description="Linked employee ID")
    is_active: Optional[bool] = Field(None, description="Account active status")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        if v is None:
            return None
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v):
        if v is None:
            return None
        from app.core.security import validate_password
        return validate_password(v)


class UserOut(BaseModel):
    """Schema for user output"""
    id: int
    employee_id: Optional[int] = None
    username: str
    email: str
    is_active: bool
    roles: List[str] = []
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        from app.utils.datetime_utils import iso_8601_utc
        return iso_8601_utc(dt)


class UserCreateResponse(UserOut):
    """Created user; the generated password is only ever returned here"""
    temporary_password: Optional[str] = None
