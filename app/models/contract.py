"""
Employment models: company-scoped job positions and contract types, the
contracts binding an employee to them, and the salaries paid under a contract
"""
from sqlalchemy import Column, Date, ForeignKey, Integer, Numeric, String

from app.db.base import Base
from app.models.mixins import AuditMixin


class JobPosition(AuditMixin, Base):
    __tablename__ = "job_positions"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)


class ContractType(AuditMixin, Base):
    """CDI, CDD, ANAPEC, ... as defined by each company"""
    __tablename__ = "contract_types"

    id = Column(Integer, primary_key=True, index=True)
    contract_type_name = Column(String(200), nullable=False)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)


class EmployeeContract(AuditMixin, Base):
    __tablename__ = "employee_contracts"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    job_position_id = Column(Integer, ForeignKey("job_positions.id"), nullable=False, index=True)
    contract_type_id = Column(Integer, ForeignKey("contract_types.id"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    # Open-ended while null
    end_date = Column(Date, nullable=True)


class EmployeeSalary(AuditMixin, Base):
    __tablename__ = "employee_salaries"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    contract_id = Column(Integer, ForeignKey("employee_contracts.id"), nullable=False, index=True)
    base_salary = Column(Numeric(18, 2), nullable=False)
    effective_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
