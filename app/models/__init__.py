"""
Database models
"""
from app.models.user import User
from app.models.role import Role
from app.models.permission import Permission, RolePermission, UserRole
from app.models.referential import (
    City,
    Country,
    EducationLevel,
    Gender,
    MaritalStatus,
    Nationality,
    Status,
)
from app.models.company import Company
from app.models.employee import Employee
from app.models.contract import ContractType, EmployeeContract, EmployeeSalary, JobPosition
from app.models.event_log import (
    CompanyEventLog,
    CompanyEventName,
    EmployeeEventLog,
    EmployeeEventName,
)

__all__ = [
    "User",
    "Role",
    "Permission",
    "RolePermission",
    "UserRole",
    "City",
    "Country",
    "EducationLevel",
    "Gender",
    "MaritalStatus",
    "Nationality",
    "Status",
    "Company",
    "Employee",
    "JobPosition",
    "ContractType",
    "EmployeeContract",
    "EmployeeSalary",
    "CompanyEventLog",
    "CompanyEventName",
    "EmployeeEventLog",
    "EmployeeEventName",
]
