"""
Dashboard endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.constants import READ_EMPLOYEES, VIEW_DASHBOARD
from app.core.deps import get_db
from app.core.permissions import require_permissions
from app.schemas.dashboard import DashboardEmployees, DashboardSummary
from app.services.dashboard_service import get_employees_overview, get_summary

router = APIRouter(dependencies=[Depends(require_permissions(VIEW_DASHBOARD))])


@router.get("/summary", response_model=DashboardSummary)
async def dashboard_summary_endpoint(db: Session = Depends(get_db)):
    """
    Company overview: totals, head-count distribution and latest companies
    """
    return get_summary(db)


@router.get(
    "/employees",
    response_model=DashboardEmployees,
    dependencies=[Depends(require_permissions(READ_EMPLOYEES))],
)
async def dashboard_employees_endpoint(db: Session = Depends(get_db)):
    """Employee head counts and list (needs VIEW_DASHBOARD and READ_EMPLOYEES)"""
    return get_employees_overview(db)
