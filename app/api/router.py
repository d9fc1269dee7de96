"""
Main API router
"""
from fastapi import APIRouter

from app.api.v1 import (
    health,
    auth,
    users,
    permissions,
    roles,
    roles_permissions,
    users_roles,
    referentials,
    countries,
    cities,
    companies,
    employees,
    company_lookups,
    employee_contracts,
    employee_salaries,
    dashboard,
    events,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(permissions.router, prefix="/permissions", tags=["permissions"])
api_router.include_router(roles.router, prefix="/roles", tags=["roles"])
api_router.include_router(roles_permissions.router, prefix="/roles-permissions", tags=["roles-permissions"])
api_router.include_router(users_roles.router, prefix="/users-roles", tags=["users-roles"])
api_router.include_router(referentials.marital_statuses_router, prefix="/marital-statuses", tags=["referentials"])
api_router.include_router(referentials.nationalities_router, prefix="/nationalities", tags=["referentials"])
api_router.include_router(referentials.genders_router, prefix="/genders", tags=["referentials"])
api_router.include_router(referentials.education_levels_router, prefix="/education-levels", tags=["referentials"])
api_router.include_router(referentials.statuses_router, prefix="/statuses", tags=["referentials"])
api_router.include_router(countries.router, prefix="/countries", tags=["countries"])
api_router.include_router(cities.router, prefix="/cities", tags=["cities"])
api_router.include_router(companies.router, prefix="/companies", tags=["companies"])
api_router.include_router(employees.router, prefix="/employees", tags=["employees"])
api_router.include_router(company_lookups.job_positions_router, prefix="/job-positions", tags=["job-positions"])
api_router.include_router(company_lookups.contract_types_router, prefix="/contract-types", tags=["contract-types"])
api_router.include_router(employee_contracts.router, prefix="/employee-contracts", tags=["employee-contracts"])
api_router.include_router(employee_salaries.router, prefix="/employee-salaries", tags=["employee-salaries"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(events.router, prefix="/events", tags=["events"])
