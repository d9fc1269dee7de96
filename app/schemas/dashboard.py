"""
Dashboard schemas
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_serializer


class DistributionBucket(BaseModel):
    """Companies grouped by head count"""
    range: str = Field(..., description="One of 1-10, 11-50, 51-200, >200")
    companies_count: int
    employees_count: int
    percentage: float = Field(..., description="Share of all employees, one decimal")


class RecentCompany(BaseModel):
    id: int
    company_name: str
    city_name: Optional[str] = None
    country_name: Optional[str] = None
    employee_count: int
    created_at: datetime

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        from app.utils.datetime_utils import iso_8601_utc
        return iso_8601_utc(dt)


class DashboardSummary(BaseModel):
    """Back-office overview of companies and head counts"""
    total_companies: int
    total_employees: int
    accounting_firms_count: int
    avg_employees_per_company: float
    employee_distribution: List[DistributionBucket]
    recent_companies: List[RecentCompany]
    as_of: datetime

    @field_serializer("as_of", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        from app.utils.datetime_utils import iso_8601_utc
        return iso_8601_utc(dt)


class DashboardEmployee(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    company_id: int
    company_name: Optional[str] = None
    status: str = Field(..., description="active, on_leave, terminated or inactive")
    manager: Optional[str] = Field(None, description="Manager full name")


class DashboardEmployees(BaseModel):
    total_employees: int
    active_employees: int
    employees: List[DashboardEmployee]
