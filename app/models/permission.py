"""
Permission catalog and the role/user join tables

Names and assignment pairs are unique among active rows only, so a revoked
grant or a deleted name can be reused.
"""
from sqlalchemy import Column, ForeignKey, Integer, String, func

from app.db.base import Base
from app.models.mixins import AuditMixin, active_unique_index


class Permission(AuditMixin, Base):
    __tablename__ = "permissions"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    description = Column(String(500), nullable=True)
    resource = Column(String(100), nullable=True)
    action = Column(String(50), nullable=True)

    __table_args__ = (active_unique_index("ux_permissions_name_active", func.lower(name)),)


class RolePermission(AuditMixin, Base):
    __tablename__ = "roles_permissions"

    id = Column(Integer, primary_key=True, index=True)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False, index=True)
    permission_id = Column(Integer, ForeignKey("permissions.id"), nullable=False, index=True)

    __table_args__ = (active_unique_index("ux_roles_permissions_pair_active", role_id, permission_id),)


class UserRole(AuditMixin, Base):
    __tablename__ = "users_roles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False, index=True)

    __table_args__ = (active_unique_index("ux_users_roles_pair_active", user_id, role_id),)
