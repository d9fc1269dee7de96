"""
Employee contract endpoints
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from app.constants import (
    CREATE_EMPLOYEE_CONTRACT,
    DELETE_EMPLOYEE_CONTRACT,
    EDIT_EMPLOYEE_CONTRACT,
    READ_EMPLOYEE_CONTRACTS,
    VIEW_EMPLOYEE_CONTRACT,
)
from app.core.deps import Principal, get_db
from app.core.permissions import require_permissions
from app.schemas.contract import EmployeeContractCreate, EmployeeContractOut, EmployeeContractUpdate
from app.services.contract_service import (
    create_contract,
    delete_contract,
    get_contract,
    list_contracts,
    to_contract_out,
    update_contract,
)
from app.services.employee_service import get_employee

router = APIRouter()


@router.get("", response_model=List[EmployeeContractOut])
async def list_contracts_endpoint(
    employee_id: Optional[int] = Query(None, description="Only contracts of this employee"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(READ_EMPLOYEE_CONTRACTS))
):
    return list_contracts(db, employee_id=employee_id)


@router.get("/employee/{employee_id}", response_model=List[EmployeeContractOut])
async def list_employee_contracts_endpoint(
    employee_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(READ_EMPLOYEE_CONTRACTS))
):
    """Contracts of one employee (404 when the employee does not exist)"""
    get_employee(db, employee_id)
    return list_contracts(db, employee_id=employee_id)


@router.get("/{contract_id}", response_model=EmployeeContractOut)
async def get_contract_endpoint(
    contract_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(VIEW_EMPLOYEE_CONTRACT))
):
    return to_contract_out(db, get_contract(db, contract_id))


@router.post("", response_model=EmployeeContractOut, status_code=201)
async def create_contract_endpoint(
    data: EmployeeContractCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(CREATE_EMPLOYEE_CONTRACT))
):
    return to_contract_out(db, create_contract(db, data, principal.user_id))


@router.put("/{contract_id}", response_model=EmployeeContractOut)
async def update_contract_endpoint(
    contract_id: int,
    data: EmployeeContractUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(EDIT_EMPLOYEE_CONTRACT))
):
    """Update a contract; setting an end date terminates it"""
    return to_contract_out(db, update_contract(db, contract_id, data, principal.user_id))


@router.delete("/{contract_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contract_endpoint(
    contract_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(DELETE_EMPLOYEE_CONTRACT))
):
    """Soft-delete a contract; refused while it has active salaries"""
    delete_contract(db, contract_id, principal.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
