"""
Contract service - employment contracts of employees

A contract ties an employee to a job position and a contract type of the
employee's company. Every mutation is logged on the employee's event trail in
the same transaction: position and type changes as relation events, date
changes as Contract_Updated, and the first end date as Contract_Terminated.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.errors import DependencyError, NotFoundError, ValidationError
from app.db.query import active, exists_active, get_active, soft_delete
from app.db.session import transaction
from app.models.company import Company
from app.models.contract import ContractType, EmployeeContract, EmployeeSalary, JobPosition
from app.models.employee import Employee
from app.models.event_log import EmployeeEventName
from app.schemas.contract import EmployeeContractCreate, EmployeeContractOut, EmployeeContractUpdate
from app.services.event_log_service import employee_events

logger = logging.getLogger(__name__)


def _label(db: Session, model, row_id: Optional[int], column: str) -> Optional[str]:
    if row_id is None:
        return None
    row = db.query(model).filter(model.id == row_id).first()
    return getattr(row, column) if row else None


def _position_name(db: Session, position_id: Optional[int]) -> Optional[str]:
    return _label(db, JobPosition, position_id, "name")


def _contract_type_name(db: Session, contract_type_id: Optional[int]) -> Optional[str]:
    return _label(db, ContractType, contract_type_id, "contract_type_name")


def contract_label(db: Session, contract: EmployeeContract) -> str:
    """'<position> (<contract type>)', the value shown on the event trail"""
    return (
        f"{_position_name(db, contract.job_position_id)} "
        f"({_contract_type_name(db, contract.contract_type_id)})"
    )


def to_contract_out(db: Session, contract: EmployeeContract) -> EmployeeContractOut:
    employee = db.query(Employee).filter(Employee.id == contract.employee_id).first()
    return EmployeeContractOut(
        id=contract.id,
        employee_id=contract.employee_id,
        employee_full_name=employee.full_name if employee else None,
        company_id=contract.company_id,
        company_name=_label(db, Company, contract.company_id, "company_name"),
        job_position_id=contract.job_position_id,
        job_position_name=_position_name(db, contract.job_position_id),
        contract_type_id=contract.contract_type_id,
        contract_type_name=_contract_type_name(db, contract.contract_type_id),
        start_date=contract.start_date,
        end_date=contract.end_date,
        created_at=contract.created_at,
    )


def list_contracts(db: Session, employee_id: Optional[int] = None) -> List[EmployeeContractOut]:
    """Active contracts, latest start first, optionally for one employee"""
    query = active(db, EmployeeContract)
    if employee_id is not None:
        query = query.filter(EmployeeContract.employee_id == employee_id)
    contracts = query.order_by(EmployeeContract.start_date.desc(), EmployeeContract.id.desc()).all()
    return [to_contract_out(db, c) for c in contracts]


def get_contract(db: Session, contract_id: int) -> EmployeeContract:
    """
    Raises:
        NotFoundError: If no active contract has this id
    """
    contract = get_active(db, EmployeeContract, contract_id)
    if contract is None:
        raise NotFoundError(f"Contract with id {contract_id} not found")
    return contract


def _check_owned(db: Session, model, row_id: int, company_id: int, label: str) -> None:
    """The row must be active and belong to the contract's company"""
    row = get_active(db, model, row_id)
    if row is None:
        raise NotFoundError(f"{label} with id {row_id} not found")
    if row.company_id != company_id:
        raise ValidationError(f"{label} {row_id} does not belong to company {company_id}")


def create_contract(db: Session, data: EmployeeContractCreate, actor_id: int) -> EmployeeContract:
    """
    Open a contract and log Contract_Created

    Raises:
        NotFoundError: If the employee, company, job position or contract type is missing
        ValidationError: If the company is not the employee's, or the position or
            type belongs to another company
    """
    employee = get_active(db, Employee, data.employee_id)
    if employee is None:
        raise NotFoundError(f"Employee with id {data.employee_id} not found")

    company_id = data.company_id if data.company_id is not None else employee.company_id
    if get_active(db, Company, company_id) is None:
        raise NotFoundError(f"Company with id {company_id} not found")
    if company_id != employee.company_id:
        raise ValidationError(f"Employee {employee.id} does not work for company {company_id}")

    _check_owned(db, JobPosition, data.job_position_id, company_id, "Job position")
    _check_owned(db, ContractType, data.contract_type_id, company_id, "Contract type")

    contract = EmployeeContract(
        **data.model_dump(exclude={"company_id"}),
        company_id=company_id,
        created_by=actor_id,
    )

    with transaction(db):
        db.add(contract)
        db.flush()
        employee_events.log_relation_event(
            db, employee.id, EmployeeEventName.CONTRACT_CREATED,
            None, None, contract.id, contract_label(db, contract),
            actor_id=actor_id,
        )
        if contract.end_date is not None:
            employee_events.log_simple_event(
                db, employee.id, EmployeeEventName.CONTRACT_TERMINATED,
                None, contract.end_date, actor_id=actor_id,
            )

    db.refresh(contract)
    logger.info("Contract %s created for employee %s by user %s", contract.id, employee.id, actor_id)
    return contract


def update_contract(
    db: Session,
    contract_id: int,
    data: EmployeeContractUpdate,
    actor_id: int,
) -> EmployeeContract:
    """
    Merge the non-null fields into a contract, logging one event per change

    Raises:
        NotFoundError: If the contract or a referenced row is missing
        ValidationError: If the dates are out of order or a position or type
            belongs to another company
    """
    contract = get_contract(db, contract_id)
    changes = {
        field: value
        for field, value in data.model_dump(exclude_none=True).items()
        if getattr(contract, field) != value
    }
    if not changes:
        return contract

    if "job_position_id" in changes:
        _check_owned(db, JobPosition, changes["job_position_id"], contract.company_id, "Job position")
    if "contract_type_id" in changes:
        _check_owned(db, ContractType, changes["contract_type_id"], contract.company_id, "Contract type")

    start_date = changes.get("start_date", contract.start_date)
    end_date = changes.get("end_date", contract.end_date)
    if end_date is not None and end_date < start_date:
        raise ValidationError("end_date cannot be before start_date")

    employee_id = contract.employee_id
    with transaction(db):
        if "job_position_id" in changes:
            employee_events.log_relation_event(
                db, employee_id, EmployeeEventName.JOB_POSITION_CHANGED,
                contract.job_position_id, _position_name(db, contract.job_position_id),
                changes["job_position_id"], _position_name(db, changes["job_position_id"]),
                actor_id=actor_id,
            )
        if "contract_type_id" in changes:
            employee_events.log_relation_event(
                db, employee_id, EmployeeEventName.CONTRACT_TYPE_CHANGED,
                contract.contract_type_id, _contract_type_name(db, contract.contract_type_id),
                changes["contract_type_id"], _contract_type_name(db, changes["contract_type_id"]),
                actor_id=actor_id,
            )
        if "start_date" in changes:
            employee_events.log_simple_event(
                db, employee_id, EmployeeEventName.CONTRACT_UPDATED,
                contract.start_date, changes["start_date"], actor_id=actor_id,
            )
        if "end_date" in changes:
            event_name = (
                EmployeeEventName.CONTRACT_TERMINATED
                if contract.end_date is None
                else EmployeeEventName.CONTRACT_UPDATED
            )
            employee_events.log_simple_event(
                db, employee_id, event_name,
                contract.end_date, changes["end_date"], actor_id=actor_id,
            )

        for field, value in changes.items():
            setattr(contract, field, value)
        contract.touch(actor_id)

    db.refresh(contract)
    return contract


def delete_contract(db: Session, contract_id: int, actor_id: int) -> None:
    """
    Soft-delete a contract and log Contract_Deleted

    Raises:
        DependencyError: If active salaries are still recorded under it
    """
    contract = get_contract(db, contract_id)

    if exists_active(db, EmployeeSalary, EmployeeSalary.contract_id == contract.id):
        raise DependencyError(
            f"Contract {contract_id} still has active salaries; delete them first"
        )

    with transaction(db):
        employee_events.log_relation_event(
            db, contract.employee_id, EmployeeEventName.CONTRACT_DELETED,
            contract.id, contract_label(db, contract), None, None,
            actor_id=actor_id,
        )
        soft_delete(contract, actor_id)

    logger.info("Contract %s deleted by user %s", contract_id, actor_id)
