"""
Company endpoints
"""
from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from app.constants import (
    CREATE_COMPANY,
    DELETE_COMPANY,
    EDIT_COMPANY,
    READ_COMPANIES,
    READ_EVENTS,
    VIEW_COMPANY,
)
from app.core.deps import Principal, get_db
from app.core.permissions import require_permissions
from app.schemas.company import CompanyCreate, CompanyOut, CompanyUpdate
from app.schemas.event_log import EventHistoryItem
from app.services.company_service import (
    company_history,
    create_company,
    delete_company,
    get_company,
    list_companies,
    to_company_out,
    update_company,
)

router = APIRouter()


@router.get("", response_model=List[CompanyOut])
async def list_companies_endpoint(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(READ_COMPANIES))
):
    """List active companies with location names and head count"""
    return list_companies(db)


@router.get("/{company_id}", response_model=CompanyOut)
async def get_company_endpoint(
    company_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(VIEW_COMPANY))
):
    return to_company_out(db, get_company(db, company_id))


@router.get("/{company_id}/history", response_model=List[EventHistoryItem])
async def company_history_endpoint(
    company_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(VIEW_COMPANY, READ_EVENTS))
):
    """Change history of a company, newest first"""
    return company_history(db, company_id)


@router.post("", response_model=CompanyOut, status_code=201)
async def create_company_endpoint(
    company_data: CompanyCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(CREATE_COMPANY))
):
    return to_company_out(db, create_company(db, company_data, principal.user_id))


@router.put("/{company_id}", response_model=CompanyOut)
async def update_company_endpoint(
    company_id: int,
    company_data: CompanyUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(EDIT_COMPANY))
):
    """Update a company; each changed field is recorded in its history"""
    return to_company_out(db, update_company(db, company_id, company_data, principal.user_id))


@router.delete("/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_company_endpoint(
    company_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(DELETE_COMPANY))
):
    """Soft-delete a company; refused while it has active employees"""
    delete_company(db, company_id, principal.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
