"""
User account model
"""
from sqlalchemy import Boolean, Column, ForeignKey, Integer, String

from app.db.base import Base
from app.models.mixins import AuditMixin


class User(AuditMixin, Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    # Optional link to the employee record this account belongs to
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=True, index=True)
    username = Column(String(100), nullable=False, index=True)
    email = Column(String(255), nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
