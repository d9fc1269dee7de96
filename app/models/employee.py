"""
Employee model
"""
from sqlalchemy import Column, Date, ForeignKey, Integer, String

from app.db.base import Base
from app.models.mixins import AuditMixin


class Employee(AuditMixin, Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(200), nullable=False)
    last_name = Column(String(200), nullable=False)
    cin_number = Column(String(50), nullable=False, index=True)
    date_of_birth = Column(Date, nullable=False)
    phone = Column(String(30), nullable=False)
    email = Column(String(255), nullable=False)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    manager_id = Column(Integer, ForeignKey("employees.id"), nullable=True, index=True)
    status_id = Column(Integer, ForeignKey("statuses.id"), nullable=True, index=True)
    gender_id = Column(Integer, ForeignKey("genders.id"), nullable=True, index=True)
    nationality_id = Column(Integer, ForeignKey("nationalities.id"), nullable=True, index=True)
    education_level_id = Column(Integer, ForeignKey("education_levels.id"), nullable=True, index=True)
    marital_status_id = Column(Integer, ForeignKey("marital_statuses.id"), nullable=True, index=True)
    cnss_number = Column(String(50), nullable=True)
    cimr_number = Column(String(50), nullable=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
