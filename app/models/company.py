"""
Company model
"""
from sqlalchemy import Boolean, Column, ForeignKey, Integer, String

from app.db.base import Base
from app.models.mixins import AuditMixin


class Company(AuditMixin, Base):
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    company_name = Column(String(500), nullable=False, index=True)
    company_address = Column(String(1000), nullable=False)
    city_id = Column(Integer, ForeignKey("cities.id"), nullable=True, index=True)
    country_id = Column(Integer, ForeignKey("countries.id"), nullable=True, index=True)
    # Moroccan legal and tax identifiers
    ice_number = Column(String(50), nullable=False)
    cnss_number = Column(String(50), nullable=False)
    if_number = Column(String(50), nullable=False)
    rc_number = Column(String(50), nullable=False)
    rib_number = Column(String(50), nullable=False)
    phone_number = Column(String(30), nullable=False)
    email = Column(String(255), nullable=False)
    # Accounting firm managing payroll for other companies
    is_cabinet_expert = Column(Boolean, nullable=False, default=False)
