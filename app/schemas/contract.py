"""
Employment schemas: job positions, contract types, contracts and salaries
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, field_validator, field_serializer, model_validator, ConfigDict

from app.schemas.referential import _strip_required


def _ser_created_at(dt):
    from app.utils.datetime_utils import iso_8601_utc
    return iso_8601_utc(dt)


class JobPositionCreate(BaseModel):
    """Schema for creating a job position"""
    name: str = Field(..., min_length=1, max_length=200, description="Unique within the company")
    company_id: int

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        return _strip_required(v)


class JobPositionUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        return _strip_required(v)


class JobPositionOut(BaseModel):
    id: int
    name: str
    company_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        return _ser_created_at(dt)


class ContractTypeCreate(BaseModel):
    """Schema for creating a contract type"""
    contract_type_name: str = Field(..., min_length=1, max_length=200, description="Unique within the company")
    company_id: int

    @field_validator("contract_type_name")
    @classmethod
    def strip_name(cls, v):
        return _strip_required(v)


class ContractTypeUpdate(BaseModel):
    contract_type_name: Optional[str] = Field(None, min_length=1, max_length=200)

    @field_validator("contract_type_name")
    @classmethod
    def strip_name(cls, v):
        return _strip_required(v)


class ContractTypeOut(BaseModel):
    id: int
    contract_type_name: str
    company_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        return _ser_created_at(dt)


class EmployeeContractCreate(BaseModel):
    """Schema for opening a contract; company defaults to the employee's employer"""
    employee_id: int
    company_id: Optional[int] = Field(None, description="Must be the employee's company when given")
    job_position_id: int
    contract_type_id: int
    start_date: date
    end_date: Optional[date] = Field(None, description="Leave empty for an open-ended contract")

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")
        return self


class EmployeeContractUpdate(BaseModel):
    """Schema for updating a contract; setting end_date terminates it"""
    job_position_id: Optional[int] = None
    contract_type_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class EmployeeContractOut(BaseModel):
    id: int
    employee_id: int
    employee_full_name: Optional[str] = None
    company_id: int
    company_name: Optional[str] = None
    job_position_id: int
    job_position_name: Optional[str] = None
    contract_type_id: int
    contract_type_name: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    created_at: datetime

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        return _ser_created_at(dt)


class EmployeeSalaryCreate(BaseModel):
    """Schema for recording a salary under a contract"""
    employee_id: int
    contract_id: int = Field(..., description="Contract of the same employee")
    base_salary: Decimal = Field(..., gt=0, max_digits=18, decimal_places=2)
    effective_date: date
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date is not None and self.end_date < self.effective_date:
            raise ValueError("end_date cannot be before effective_date")
        return self


class EmployeeSalaryUpdate(BaseModel):
    base_salary: Optional[Decimal] = Field(None, gt=0, max_digits=18, decimal_places=2)
    effective_date: Optional[date] = None
    end_date: Optional[date] = None


class EmployeeSalaryOut(BaseModel):
    id: int
    employee_id: int
    employee_full_name: Optional[str] = None
    contract_id: int
    base_salary: Decimal
    effective_date: date
    end_date: Optional[date] = None
    created_at: datetime

    @field_serializer("base_salary")
    @classmethod
    def _ser_amount(cls, v):
        return float(v)

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        return _ser_created_at(dt)
