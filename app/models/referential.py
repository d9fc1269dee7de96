"""
Referential (lookup) models
"""
from sqlalchemy import Column, ForeignKey, Integer, String

from app.db.base import Base
from app.models.mixins import AuditMixin


class Country(AuditMixin, Base):
    __tablename__ = "countries"

    id = Column(Integer, primary_key=True, index=True)
    country_name = Column(String(500), nullable=False)
    country_name_ar = Column(String(500), nullable=True)
    country_code = Column(String(3), nullable=False, index=True)
    country_phone_code = Column(String(10), nullable=False)
    nationality = Column(String(500), nullable=False)


class City(AuditMixin, Base):
    __tablename__ = "cities"

    id = Column(Integer, primary_key=True, index=True)
    city_name = Column(String(500), nullable=False)
    country_id = Column(Integer, ForeignKey("countries.id"), nullable=False, index=True)


class Status(AuditMixin, Base):
    """Employee status (Active, On leave, Suspended, ...)"""
    __tablename__ = "statuses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)


class Gender(AuditMixin, Base):
    __tablename__ = "genders"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)


class Nationality(AuditMixin, Base):
    __tablename__ = "nationalities"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)


class EducationLevel(AuditMixin, Base):
    __tablename__ = "education_levels"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)


class MaritalStatus(AuditMixin, Base):
    __tablename__ = "marital_statuses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
