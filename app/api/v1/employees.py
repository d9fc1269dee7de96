"""
Employee endpoints
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from app.constants import (
    CREATE_EMPLOYEE,
    DELETE_EMPLOYEE,
    EDIT_EMPLOYEE,
    READ_EMPLOYEES,
    READ_EVENTS,
    VIEW_EMPLOYEE,
)
from app.core.deps import Principal, get_db
from app.core.permissions import require_permissions
from app.schemas.employee import EmployeeCreate, EmployeeCreateResponse, EmployeeOut, EmployeeUpdate
from app.schemas.event_log import EventHistoryItem
from app.services.employee_service import (
    create_employee,
    delete_employee,
    employee_history,
    get_employee,
    list_employees,
    to_employee_out,
    update_employee,
)

router = APIRouter()


@router.get("", response_model=List[EmployeeOut])
async def list_employees_endpoint(
    company_id: Optional[int] = Query(None, description="Only employees of this company"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(READ_EMPLOYEES))
):
    return list_employees(db, company_id=company_id)


@router.get("/{employee_id}", response_model=EmployeeOut)
async def get_employee_endpoint(
    employee_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(VIEW_EMPLOYEE))
):
    return to_employee_out(db, get_employee(db, employee_id))


@router.get("/{employee_id}/history", response_model=List[EventHistoryItem])
async def employee_history_endpoint(
    employee_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(VIEW_EMPLOYEE, READ_EVENTS))
):
    """Change history of an employee, newest first"""
    return employee_history(db, employee_id)


@router.post("", response_model=EmployeeCreateResponse, status_code=201)
async def create_employee_endpoint(
    employee_data: EmployeeCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(CREATE_EMPLOYEE))
):
    """
    Create an employee

    With `create_user_account` a login is opened for the employee and its
    temporary password is returned once.
    """
    return create_employee(db, employee_data, principal.user_id)


@router.put("/{employee_id}", response_model=EmployeeOut)
async def update_employee_endpoint(
    employee_id: int,
    employee_data: EmployeeUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(EDIT_EMPLOYEE))
):
    return to_employee_out(db, update_employee(db, employee_id, employee_data, principal.user_id))


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee_endpoint(
    employee_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(DELETE_EMPLOYEE))
):
    """Soft-delete an employee; refused while it manages active employees"""
    delete_employee(db, employee_id, principal.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
