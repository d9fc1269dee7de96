"""
Dashboard service - aggregate reporting over companies and employees
"""
from typing import Dict, List, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, aliased

from app.db.query import active, not_deleted
from app.models.company import Company
from app.models.employee import Employee
from app.models.referential import City, Country, Status
from app.schemas.dashboard import (
    DashboardEmployee,
    DashboardEmployees,
    DashboardSummary,
    DistributionBucket,
    RecentCompany,
)
from app.utils.datetime_utils import now_utc

# (label, inclusive upper bound); the last bucket is open-ended
BUCKETS: Tuple[Tuple[str, float], ...] = (
    ("1-10", 10),
    ("11-50", 50),
    ("51-200", 200),
    (">200", float("inf")),
)

RECENT_COMPANIES_LIMIT = 5

ACTIVE_STATUS = "Active"

STATUS_MAP = {
    "Active": "active",
    "En congé": "on_leave",
    "Licencié": "terminated",
}


def bucket_label(employee_count: int) -> str:
    """
    Head-count bucket of a company; companies without employees count as 1-10

    >>> bucket_label(10), bucket_label(11), bucket_label(201)
    ('1-10', '11-50', '>200')
    """
    for label, upper in BUCKETS:
        if employee_count <= upper:
            return label
    return BUCKETS[-1][0]


def percentage(part: int, total: int) -> float:
    """Share of `total`, rounded to one decimal; 0.0 when total is 0"""
    if total == 0:
        return 0.0
    return round(part / total * 100, 1)


def average(total: int, count: int) -> float:
    """Mean rounded to two decimals; 0.0 when count is 0"""
    if count == 0:
        return 0.0
    return round(total / count, 2)


def build_distribution(employee_counts: Sequence[int]) -> List[DistributionBucket]:
    """Bucket a list of per-company head counts"""
    companies: Dict[str, int] = {label: 0 for label, _ in BUCKETS}
    employees: Dict[str, int] = {label: 0 for label, _ in BUCKETS}
    for count in employee_counts:
        label = bucket_label(count)
        companies[label] += 1
        employees[label] += count

    total = sum(employee_counts)
    return [
        DistributionBucket(
            range=label,
            companies_count=companies[label],
            employees_count=employees[label],
            percentage=percentage(employees[label], total),
        )
        for label, _ in BUCKETS
    ]


def _employee_counts(db: Session) -> Dict[int, int]:
    return dict(
        db.query(Employee.company_id, func.count(Employee.id))
        .filter(*not_deleted(Employee))
        .group_by(Employee.company_id)
        .all()
    )


def get_summary(db: Session) -> DashboardSummary:
    """
    Company and head-count overview

    Only active companies and active employees are counted.
    """
    companies = active(db, Company).all()
    counts_by_company = _employee_counts(db)
    employee_counts = [counts_by_company.get(c.id, 0) for c in companies]
    total_employees = sum(employee_counts)

    recent_rows = (
        db.query(Company, City.city_name, Country.country_name)
        .outerjoin(City, City.id == Company.city_id)
        .outerjoin(Country, Country.id == Company.country_id)
        .filter(*not_deleted(Company))
        .order_by(Company.created_at.desc(), Company.id.desc())
        .limit(RECENT_COMPANIES_LIMIT)
        .all()
    )
    recent = [
        RecentCompany(
            id=company.id,
            company_name=company.company_name,
            city_name=city_name,
            country_name=country_name,
            employee_count=counts_by_company.get(company.id, 0),
            created_at=company.created_at,
        )
        for company, city_name, country_name in recent_rows
    ]

    return DashboardSummary(
        total_companies=len(companies),
        total_employees=total_employees,
        accounting_firms_count=sum(1 for c in companies if c.is_cabinet_expert),
        avg_employees_per_company=average(total_employees, len(companies)),
        employee_distribution=build_distribution(employee_counts),
        recent_companies=recent,
        as_of=now_utc(),
    )


def map_status(status_name: str) -> str:
    return STATUS_MAP.get(status_name or "", "inactive")


def get_employees_overview(db: Session) -> DashboardEmployees:
    """Head counts and a flat list of active employees ordered by name"""
    manager = aliased(Employee)
    rows = (
        db.query(Employee, Company.company_name, Status.name, manager.first_name, manager.last_name)
        .outerjoin(Company, Company.id == Employee.company_id)
        .outerjoin(Status, Status.id == Employee.status_id)
        .outerjoin(manager, manager.id == Employee.manager_id)
        .filter(*not_deleted(Employee))
        .order_by(Employee.first_name.asc(), Employee.last_name.asc())
        .all()
    )

    employees = []
    active_count = 0
    for employee, company_name, status_name, manager_first, manager_last in rows:
        if status_name == ACTIVE_STATUS:
            active_count += 1
        employees.append(DashboardEmployee(
            id=employee.id,
            first_name=employee.first_name,
            last_name=employee.last_name,
            email=employee.email,
            company_id=employee.company_id,
            company_name=company_name,
            status=map_status(status_name),
            manager=f"{manager_first} {manager_last}" if manager_first is not None else None,
        ))

    return DashboardEmployees(
        total_employees=len(employees),
        active_employees=active_count,
        employees=employees,
    )
