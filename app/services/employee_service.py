"""
Employee service - business logic for employee records

Field changes are written to the employee event log in the same transaction
as the change itself: scalar fields as simple events, lookups and the
manager as relation events carrying the id and display name on each side.
"""
import logging
from typing import Dict, List, Optional, Tuple, Type

from sqlalchemy.orm import Session

from app.core.errors import ConflictError, DependencyError, NotFoundError, ValidationError
from app.db.query import active, exists_active, get_active, name_taken, soft_delete
from app.db.session import transaction
from app.models.company import Company
from app.models.contract import EmployeeContract
from app.models.employee import Employee
from app.models.event_log import EmployeeEventLog, EmployeeEventName
from app.models.referential import EducationLevel, Gender, MaritalStatus, Nationality, Status
from app.schemas.employee import EmployeeCreate, EmployeeCreateResponse, EmployeeOut, EmployeeUpdate
from app.schemas.event_log import EventHistoryItem
from app.services.event_feed_service import entity_history
from app.services.event_log_service import employee_events
from app.services.user_service import create_user_account

logger = logging.getLogger(__name__)

SCALAR_EVENTS = {
    "first_name": EmployeeEventName.FIRST_NAME_CHANGED,
    "last_name": EmployeeEventName.LAST_NAME_CHANGED,
    "cin_number": EmployeeEventName.CIN_CHANGED,
    "date_of_birth": EmployeeEventName.DATE_OF_BIRTH_CHANGED,
    "phone": EmployeeEventName.PHONE_CHANGED,
    "email": EmployeeEventName.EMAIL_CHANGED,
    "cnss_number": EmployeeEventName.CNSS_CHANGED,
    "cimr_number": EmployeeEventName.CIMR_CHANGED,
}

# Foreign key column -> (referenced model, label, event)
LOOKUP_RELATIONS: Dict[str, Tuple[Type, str, EmployeeEventName]] = {
    "status_id": (Status, "Status", EmployeeEventName.STATUS_CHANGED),
    "gender_id": (Gender, "Gender", EmployeeEventName.GENDER_CHANGED),
    "nationality_id": (Nationality, "Nationality", EmployeeEventName.NATIONALITY_CHANGED),
    "education_level_id": (EducationLevel, "Education level", EmployeeEventName.EDUCATION_LEVEL_CHANGED),
    "marital_status_id": (MaritalStatus, "Marital status", EmployeeEventName.MARITAL_STATUS_CHANGED),
}


def _name_map(db: Session, model: Type) -> Dict[int, str]:
    return dict(db.query(model.id, model.name).all())


def _lookup_name(db: Session, model: Type, row_id: Optional[int]) -> Optional[str]:
    if row_id is None:
        return None
    row = db.query(model).filter(model.id == row_id).first()
    return row.name if row else None


def _company_name(db: Session, company_id: Optional[int]) -> Optional[str]:
    if company_id is None:
        return None
    company = db.query(Company).filter(Company.id == company_id).first()
    return company.company_name if company else None


def _manager_name(db: Session, manager_id: Optional[int]) -> Optional[str]:
    if manager_id is None:
        return None
    manager = db.query(Employee).filter(Employee.id == manager_id).first()
    return manager.full_name if manager else None


def _build_out(
    employee: Employee,
    company_names: Dict[int, str],
    manager_names: Dict[int, str],
    lookup_names: Dict[str, Dict[int, str]],
) -> EmployeeOut:
    return EmployeeOut(
        id=employee.id,
        first_name=employee.first_name,
        last_name=employee.last_name,
        cin_number=employee.cin_number,
        date_of_birth=employee.date_of_birth,
        phone=employee.phone,
        email=employee.email,
        company_id=employee.company_id,
        company_name=company_names.get(employee.company_id),
        manager_id=employee.manager_id,
        manager_full_name=manager_names.get(employee.manager_id),
        status_id=employee.status_id,
        status_name=lookup_names["status_id"].get(employee.status_id),
        gender_id=employee.gender_id,
        gender_name=lookup_names["gender_id"].get(employee.gender_id),
        nationality_id=employee.nationality_id,
        nationality_name=lookup_names["nationality_id"].get(employee.nationality_id),
        education_level_id=employee.education_level_id,
        education_level_name=lookup_names["education_level_id"].get(employee.education_level_id),
        marital_status_id=employee.marital_status_id,
        marital_status_name=lookup_names["marital_status_id"].get(employee.marital_status_id),
        cnss_number=employee.cnss_number,
        cimr_number=employee.cimr_number,
        created_at=employee.created_at,
    )


def to_employee_out(db: Session, employee: Employee) -> EmployeeOut:
    company_names = {employee.company_id: _company_name(db, employee.company_id)}
    manager_names = {employee.manager_id: _manager_name(db, employee.manager_id)}
    lookup_names = {
        column: {getattr(employee, column): _lookup_name(db, model, getattr(employee, column))}
        for column, (model, _label, _event) in LOOKUP_RELATIONS.items()
    }
    return _build_out(employee, company_names, manager_names, lookup_names)


def list_employees(db: Session, company_id: Optional[int] = None) -> List[EmployeeOut]:
    """Active employees ordered by name, optionally for one company"""
    query = active(db, Employee)
    if company_id is not None:
        query = query.filter(Employee.company_id == company_id)
    employees = query.order_by(Employee.first_name.asc(), Employee.last_name.asc()).all()

    company_names = dict(db.query(Company.id, Company.company_name).all())
    manager_ids = {e.manager_id for e in employees if e.manager_id}
    manager_names = {}
    if manager_ids:
        manager_names = {
            emp.id: emp.full_name
            for emp in db.query(Employee).filter(Employee.id.in_(manager_ids)).all()
        }
    lookup_names = {
        column: _name_map(db, model) for column, (model, _label, _event) in LOOKUP_RELATIONS.items()
    }
    return [_build_out(e, company_names, manager_names, lookup_names) for e in employees]


def get_employee(db: Session, employee_id: int) -> Employee:
    """
    Raises:
        NotFoundError: If no active employee has this id
    """
    employee = get_active(db, Employee, employee_id)
    if not employee:
        raise NotFoundError(f"Employee with id {employee_id} not found")
    return employee


def _check_references(db: Session, values: dict) -> None:
    if values.get("company_id") is not None and get_active(db, Company, values["company_id"]) is None:
        raise NotFoundError(f"Company with id {values['company_id']} not found")
    if values.get("manager_id") is not None and get_active(db, Employee, values["manager_id"]) is None:
        raise NotFoundError(f"Manager with id {values['manager_id']} not found")
    for column, (model, label, _event) in LOOKUP_RELATIONS.items():
        row_id = values.get(column)
        if row_id is not None and get_active(db, model, row_id) is None:
            raise NotFoundError(f"{label} with id {row_id} not found")


def _check_cin(db: Session, cin_number: str, exclude_id: Optional[int] = None) -> None:
    if name_taken(db, Employee, Employee.cin_number, cin_number, exclude_id=exclude_id):
        raise ConflictError(f"An employee with CIN '{cin_number}' already exists")


def _check_manager_chain(db: Session, employee_id: int, manager_id: int) -> None:
    """Reject a manager that is the employee itself or one of its subordinates"""
    seen = set()
    current = manager_id
    while current is not None and current not in seen:
        if current == employee_id:
            raise ValidationError("An employee cannot be managed by itself or by one of its subordinates")
        seen.add(current)
        row = db.query(Employee.manager_id).filter(Employee.id == current).first()
        current = row[0] if row else None


def create_employee(db: Session, employee_data: EmployeeCreate, actor_id: int) -> EmployeeCreateResponse:
    """
    Create an employee, log Employee_Created and optionally open a login

    Raises:
        ConflictError: If the CIN is already used (or the login email, when
            an account is requested)
        NotFoundError: If a referenced company, manager or lookup is missing
    """
    values = employee_data.model_dump(exclude={"create_user_account"})
    _check_cin(db, values["cin_number"])
    _check_references(db, values)

    employee = Employee(**values, created_by=actor_id)
    user = None
    temporary_password = None

    with transaction(db):
        db.add(employee)
        db.flush()
        employee_events.log_simple_event(
            db, employee.id, EmployeeEventName.EMPLOYEE_CREATED,
            None, employee.full_name, actor_id=actor_id,
        )
        if employee_data.create_user_account:
            user, temporary_password = create_user_account(
                db,
                email=employee.email,
                actor_id=actor_id,
                employee_id=employee.id,
                first_name=employee.first_name,
                last_name=employee.last_name,
                commit=False,
            )

    db.refresh(employee)
    logger.info("Employee %s created by user %s", employee.id, actor_id)

    out = to_employee_out(db, employee)
    return EmployeeCreateResponse(
        **out.model_dump(),
        user_id=user.id if user else None,
        username=user.username if user else None,
        temporary_password=temporary_password,
    )


def update_employee(db: Session, employee_id: int, employee_data: EmployeeUpdate, actor_id: int) -> Employee:
    """
    Merge the non-null fields into an employee, logging one event per changed field

    Raises:
        NotFoundError: If the employee or a referenced row is missing
        ConflictError: If the new CIN is already used
        ValidationError: If the new manager would create a management cycle
    """
    employee = get_employee(db, employee_id)
    changes = {
        field: value
        for field, value in employee_data.model_dump(exclude_none=True).items()
        if getattr(employee, field) != value
    }
    if not changes:
        return employee

    if "cin_number" in changes:
        _check_cin(db, changes["cin_number"], exclude_id=employee.id)
    _check_references(db, changes)
    if "manager_id" in changes:
        _check_manager_chain(db, employee.id, changes["manager_id"])

    with transaction(db):
        for field, event_name in SCALAR_EVENTS.items():
            if field in changes:
                employee_events.log_simple_event(
                    db, employee.id, event_name,
                    getattr(employee, field), changes[field], actor_id=actor_id,
                )

        for column, (model, _label, event_name) in LOOKUP_RELATIONS.items():
            if column in changes:
                old_id = getattr(employee, column)
                employee_events.log_relation_event(
                    db, employee.id, event_name,
                    old_id, _lookup_name(db, model, old_id),
                    changes[column], _lookup_name(db, model, changes[column]),
                    actor_id=actor_id,
                )

        if "manager_id" in changes:
            employee_events.log_relation_event(
                db, employee.id, EmployeeEventName.MANAGER_CHANGED,
                employee.manager_id, _manager_name(db, employee.manager_id),
                changes["manager_id"], _manager_name(db, changes["manager_id"]),
                actor_id=actor_id,
            )

        if "company_id" in changes:
            employee_events.log_relation_event(
                db, employee.id, EmployeeEventName.COMPANY_CHANGED,
                employee.company_id, _company_name(db, employee.company_id),
                changes["company_id"], _company_name(db, changes["company_id"]),
                actor_id=actor_id,
            )

        for field, value in changes.items():
            setattr(employee, field, value)
        employee.touch(actor_id)

    db.refresh(employee)
    return employee


def delete_employee(db: Session, employee_id: int, actor_id: int) -> None:
    """
    Soft-delete an employee and log Employee_Deleted

    Raises:
        DependencyError: If the employee still manages active employees or
            holds active contracts
    """
    employee = get_employee(db, employee_id)

    if exists_active(db, Employee, Employee.manager_id == employee.id):
        raise DependencyError(
            f"Employee {employee_id} still manages active employees; reassign them first"
        )
    if exists_active(db, EmployeeContract, EmployeeContract.employee_id == employee.id):
        raise DependencyError(f"Employee {employee_id} still holds active contracts")

    with transaction(db):
        soft_delete(employee, actor_id)
        employee_events.log_simple_event(
            db, employee.id, EmployeeEventName.EMPLOYEE_DELETED,
            employee.full_name, None, actor_id=actor_id,
        )

    logger.info("Employee %s deleted by user %s", employee_id, actor_id)


def employee_history(db: Session, employee_id: int) -> List[EventHistoryItem]:
    """Events of an employee, newest first"""
    get_employee(db, employee_id)
    return entity_history(db, EmployeeEventLog, "employee_id", employee_id)
