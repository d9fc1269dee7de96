"""
Salary service - base salaries recorded under an employee's contract

Amounts are logged on the employee's event trail with two decimals, in the
same transaction as the change.
"""
import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, ValidationError
from app.db.query import active, get_active, soft_delete
from app.db.session import transaction
from app.models.contract import EmployeeContract, EmployeeSalary
from app.models.employee import Employee
from app.models.event_log import EmployeeEventName
from app.schemas.contract import EmployeeSalaryCreate, EmployeeSalaryOut, EmployeeSalaryUpdate
from app.services.event_log_service import employee_events

logger = logging.getLogger(__name__)


def _amount(value: Optional[Decimal]) -> Optional[str]:
    return None if value is None else f"{Decimal(value):.2f}"


def to_salary_out(db: Session, salary: EmployeeSalary) -> EmployeeSalaryOut:
    employee = db.query(Employee).filter(Employee.id == salary.employee_id).first()
    return EmployeeSalaryOut(
        id=salary.id,
        employee_id=salary.employee_id,
        employee_full_name=employee.full_name if employee else None,
        contract_id=salary.contract_id,
        base_salary=salary.base_salary,
        effective_date=salary.effective_date,
        end_date=salary.end_date,
        created_at=salary.created_at,
    )


def list_salaries(
    db: Session,
    employee_id: Optional[int] = None,
    contract_id: Optional[int] = None,
) -> List[EmployeeSalaryOut]:
    """Active salaries, latest effective date first"""
    query = active(db, EmployeeSalary)
    if employee_id is not None:
        query = query.filter(EmployeeSalary.employee_id == employee_id)
    if contract_id is not None:
        query = query.filter(EmployeeSalary.contract_id == contract_id)
    salaries = query.order_by(EmployeeSalary.effective_date.desc(), EmployeeSalary.id.desc()).all()
    return [to_salary_out(db, s) for s in salaries]


def get_salary(db: Session, salary_id: int) -> EmployeeSalary:
    """
    Raises:
        NotFoundError: If no active salary has this id
    """
    salary = get_active(db, EmployeeSalary, salary_id)
    if salary is None:
        raise NotFoundError(f"Salary with id {salary_id} not found")
    return salary


def _check_period(contract: EmployeeContract, effective_date, end_date) -> None:
    if end_date is not None and end_date < effective_date:
        raise ValidationError("end_date cannot be before effective_date")
    if effective_date < contract.start_date:
        raise ValidationError(
            f"Salary cannot take effect before its contract starts ({contract.start_date.isoformat()})"
        )
    if contract.end_date is not None and effective_date > contract.end_date:
        raise ValidationError(
            f"Salary cannot take effect after its contract ends ({contract.end_date.isoformat()})"
        )


def create_salary(db: Session, data: EmployeeSalaryCreate, actor_id: int) -> EmployeeSalary:
    """
    Record a salary and log Salary_Created

    Raises:
        NotFoundError: If the employee or contract is missing
        ValidationError: If the contract belongs to another employee or the
            period falls outside the contract
    """
    employee = get_active(db, Employee, data.employee_id)
    if employee is None:
        raise NotFoundError(f"Employee with id {data.employee_id} not found")
    contract = get_active(db, EmployeeContract, data.contract_id)
    if contract is None:
        raise NotFoundError(f"Contract with id {data.contract_id} not found")
    if contract.employee_id != employee.id:
        raise ValidationError(f"Contract {contract.id} does not belong to employee {employee.id}")
    _check_period(contract, data.effective_date, data.end_date)

    salary = EmployeeSalary(**data.model_dump(), created_by=actor_id)

    with transaction(db):
        db.add(salary)
        db.flush()
        employee_events.log_relation_event(
            db, employee.id, EmployeeEventName.SALARY_CREATED,
            None, None, salary.id, _amount(data.base_salary),
            actor_id=actor_id,
        )

    db.refresh(salary)
    logger.info("Salary %s created for employee %s by user %s", salary.id, employee.id, actor_id)
    return salary


def update_salary(db: Session, salary_id: int, data: EmployeeSalaryUpdate, actor_id: int) -> EmployeeSalary:
    """
    Merge the non-null fields into a salary, logging Salary_Updated per changed field

    Raises:
        NotFoundError: If the salary is missing
        ValidationError: If the new period falls outside the contract
    """
    salary = get_salary(db, salary_id)
    changes = {
        field: value
        for field, value in data.model_dump(exclude_none=True).items()
        if getattr(salary, field) != value
    }
    if not changes:
        return salary

    contract = db.query(EmployeeContract).filter(EmployeeContract.id == salary.contract_id).one()
    _check_period(
        contract,
        changes.get("effective_date", salary.effective_date),
        changes.get("end_date", salary.end_date),
    )

    with transaction(db):
        if "base_salary" in changes:
            employee_events.log_relation_event(
                db, salary.employee_id, EmployeeEventName.SALARY_UPDATED,
                salary.id, _amount(salary.base_salary),
                salary.id, _amount(changes["base_salary"]),
                actor_id=actor_id,
            )
        for field in ("effective_date", "end_date"):
            if field in changes:
                employee_events.log_event(
                    db, salary.employee_id, EmployeeEventName.SALARY_UPDATED,
                    getattr(salary, field), salary.id, changes[field], salary.id,
                    actor_id=actor_id,
                )

        for field, value in changes.items():
            setattr(salary, field, value)
        salary.touch(actor_id)

    db.refresh(salary)
    return salary


def delete_salary(db: Session, salary_id: int, actor_id: int) -> None:
    """Soft-delete a salary and log Salary_Deleted"""
    salary = get_salary(db, salary_id)

    with transaction(db):
        soft_delete(salary, actor_id)
        employee_events.log_relation_event(
            db, salary.employee_id, EmployeeEventName.SALARY_DELETED,
            salary.id, _amount(salary.base_salary), None, None,
            actor_id=actor_id,
        )

    logger.info("Salary %s deleted by user %s", salary_id, actor_id)
