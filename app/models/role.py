"""
Role model

A role is a named bundle of permissions; users receive roles through
user_roles and their effective permissions are the union over active roles.
"""
from sqlalchemy import Column, Integer, String, func

from app.db.base import Base
from app.models.mixins import AuditMixin, active_unique_index


class Role(AuditMixin, Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    description = Column(String(500), nullable=False, default="")

    __table_args__ = (active_unique_index("ux_roles_name_active", func.lower(name)),)
