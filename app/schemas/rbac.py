"""
Role, permission and assignment schemas
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_serializer, ConfigDict


class PermissionCreate(BaseModel):
    """Schema for creating a permission"""
    name: str = Field(..., min_length=1, max_length=100, description="Permission name (unique)")
    description: Optional[str] = Field(None, max_length=500)
    resource: Optional[str] = Field(None, max_length=100, description="Resource the permission applies to")
    action: Optional[str] = Field(None, max_length=50, description="Action on the resource")


class PermissionUpdate(BaseModel):
    """Schema for updating a permission"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    resource: Optional[str] = Field(None, max_length=100)
    action: Optional[str] = Field(None, max_length=50)


class PermissionOut(BaseModel):
    """Schema for permission output"""
    id: int
    name: str
    description: Optional[str] = None
    resource: Optional[str] = None
    action: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        from app.utils.datetime_utils import iso_8601_utc
        return iso_8601_utc(dt)


class RoleCreate(BaseModel):
    """Schema for creating a role"""
    name: str = Field(..., min_length=1, max_length=100, description="Role name (unique)")
    description: str = Field(default="", max_length=500)


class RoleUpdate(BaseModel):
    """Schema for updating a role"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


class RoleOut(BaseModel):
    """Schema for role output"""
    id: int
    name: str
    description: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        from app.utils.datetime_utils import iso_8601_utc
        return iso_8601_utc(dt)


class RoleUserOut(BaseModel):
    """User holding a role"""
    id: int
    username: str
    email: str
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class RolePermissionAssign(BaseModel):
    role_id: int
    permission_id: int


class RolePermissionBulkAssign(BaseModel):
    role_id: int
    permission_ids: List[int] = Field(..., min_length=1)


class RolePermissionReplace(BaseModel):
    """Target permission set of a role; an empty list revokes everything"""
    role_id: int
    permission_ids: List[int] = Field(default_factory=list)


class RolePermissionOut(BaseModel):
    id: int
    role_id: int
    role_name: str
    permission_id: int
    permission_name: str
    created_at: datetime

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        from app.utils.datetime_utils import iso_8601_utc
        return iso_8601_utc(dt)


class UserRoleAssign(BaseModel):
    user_id: int
    role_id: int


class UserRoleBulkAssign(BaseModel):
    user_id: int
    role_ids: List[int] = Field(..., min_length=1)


class UserRoleReplace(BaseModel):
    """Target role set of a user; an empty list revokes everything"""
    user_id: int
    role_ids: List[int] = Field(default_factory=list)


class UserRoleOut(BaseModel):
    id: int
    user_id: int
    username: str
    role_id: int
    role_name: str
    created_at: datetime

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        from app.utils.datetime_utils import iso_8601_utc
        return iso_8601_utc(dt)


class BulkAssignResult(BaseModel):
    message: str
    assigned: int
    skipped: int


class ReplaceResult(BaseModel):
    message: str
    added: int
    removed: int
