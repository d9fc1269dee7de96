"""
Employee salary endpoints
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from app.constants import (
    CREATE_EMPLOYEE_SALARY,
    DELETE_EMPLOYEE_SALARY,
    EDIT_EMPLOYEE_SALARY,
    READ_EMPLOYEE_SALARIES,
    VIEW_EMPLOYEE_SALARY,
)
from app.core.deps import Principal, get_db
from app.core.permissions import require_permissions
from app.schemas.contract import EmployeeSalaryCreate, EmployeeSalaryOut, EmployeeSalaryUpdate
from app.services.contract_service import get_contract
from app.services.employee_service import get_employee
from app.services.salary_service import (
    create_salary,
    delete_salary,
    get_salary,
    list_salaries,
    to_salary_out,
    update_salary,
)

router = APIRouter()


@router.get("", response_model=List[EmployeeSalaryOut])
async def list_salaries_endpoint(
    employee_id: Optional[int] = Query(None, description="Only salaries of this employee"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(READ_EMPLOYEE_SALARIES))
):
    return list_salaries(db, employee_id=employee_id)


@router.get("/employee/{employee_id}", response_model=List[EmployeeSalaryOut])
async def list_employee_salaries_endpoint(
    employee_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(READ_EMPLOYEE_SALARIES))
):
    get_employee(db, employee_id)
    return list_salaries(db, employee_id=employee_id)


@router.get("/contract/{contract_id}", response_model=List[EmployeeSalaryOut])
async def list_contract_salaries_endpoint(
    contract_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(READ_EMPLOYEE_SALARIES))
):
    get_contract(db, contract_id)
    return list_salaries(db, contract_id=contract_id)


@router.get("/{salary_id}", response_model=EmployeeSalaryOut)
async def get_salary_endpoint(
    salary_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(VIEW_EMPLOYEE_SALARY))
):
    return to_salary_out(db, get_salary(db, salary_id))


@router.post("", response_model=EmployeeSalaryOut, status_code=201)
async def create_salary_endpoint(
    data: EmployeeSalaryCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(CREATE_EMPLOYEE_SALARY))
):
    """Record a salary under one of the employee's contracts"""
    return to_salary_out(db, create_salary(db, data, principal.user_id))


@router.put("/{salary_id}", response_model=EmployeeSalaryOut)
async def update_salary_endpoint(
    salary_id: int,
    data: EmployeeSalaryUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(EDIT_EMPLOYEE_SALARY))
):
    return to_salary_out(db, update_salary(db, salary_id, data, principal.user_id))


@router.delete("/{salary_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_salary_endpoint(
    salary_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(DELETE_EMPLOYEE_SALARY))
):
    delete_salary(db, salary_id, principal.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
