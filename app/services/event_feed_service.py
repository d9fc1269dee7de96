"""
Event feed service - read side of the company and employee event logs

The feed merges both logs into one list, newest first. Rows created at the
same instant are ordered company before employee, then by id descending.
"""
from typing import Dict, Iterable, List, Optional, Type

from sqlalchemy.orm import Session

from app.models.company import Company
from app.models.employee import Employee
from app.models.event_log import CompanyEventLog, EmployeeEventLog
from app.models.user import User
from app.schemas.event_log import EventFeedItem, EventFeedResponse, EventHistoryItem
from app.utils.datetime_utils import ensure_utc

EMPTY_VALUE = "<empty>"

# Lower sorts first among events sharing a timestamp
SOURCE_ORDER = {"company": 0, "employee": 1}


def creator_names(db: Session, user_ids: Iterable[int]) -> Dict[int, str]:
    """
    Display name of each creator: the linked employee's full name, or the
    username for accounts without an employee record
    """
    ids = {uid for uid in user_ids if uid}
    if not ids:
        return {}

    rows = (
        db.query(User.id, User.username, Employee.first_name, Employee.last_name)
        .outerjoin(Employee, Employee.id == User.employee_id)
        .filter(User.id.in_(ids))
        .all()
    )
    names = {}
    for user_id, username, first_name, last_name in rows:
        if first_name or last_name:
            names[user_id] = f"{first_name or ''} {last_name or ''}".strip()
        else:
            names[user_id] = username
    return names


def describe_event(event_name: str, old_value: Optional[str], new_value: Optional[str]) -> str:
    """
    >>> describe_event("Email_Changed", "a@x.ma", None)
    'Email_Changed : a@x.ma → <empty>'
    """
    return f"{event_name} : {old_value or EMPTY_VALUE} → {new_value or EMPTY_VALUE}"


def entity_history(db: Session, model: Type, subject_column: str, subject_id: int) -> List[EventHistoryItem]:
    """Events of one company or employee, newest first"""
    events = (
        db.query(model)
        .filter(getattr(model, subject_column) == subject_id)
        .order_by(model.created_at.desc(), model.id.desc())
        .all()
    )
    names = creator_names(db, (e.created_by for e in events))
    return [
        EventHistoryItem(
            id=e.id,
            event_name=e.event_name,
            old_value=e.old_value,
            old_value_id=e.old_value_id,
            new_value=e.new_value,
            new_value_id=e.new_value_id,
            description=describe_event(e.event_name, e.old_value, e.new_value),
            created_at=ensure_utc(e.created_at),
            created_by=e.created_by,
            creator_full_name=names.get(e.created_by),
        )
        for e in events
    ]


def sort_feed(items: List[EventFeedItem]) -> List[EventFeedItem]:
    """
    Newest first; ties by source (company first) then id descending

    Stable sorts applied from the least to the most significant key.
    """
    ordered = sorted(items, key=lambda item: item.id, reverse=True)
    ordered.sort(key=lambda item: SOURCE_ORDER[item.source])
    ordered.sort(key=lambda item: ensure_utc(item.created_at), reverse=True)
    return ordered


def get_event_feed(db: Session, limit: Optional[int] = None) -> EventFeedResponse:
    """
    Merged company and employee events, enriched with display names
    """
    company_events = db.query(CompanyEventLog).all()
    employee_events = db.query(EmployeeEventLog).all()

    employee_ids = {e.employee_id for e in employee_events}
    employees = {}
    if employee_ids:
        employees = {
            emp.id: emp
            for emp in db.query(Employee).filter(Employee.id.in_(employee_ids)).all()
        }

    company_ids = {e.company_id for e in company_events}
    company_ids.update(emp.company_id for emp in employees.values())
    company_names = {}
    if company_ids:
        company_names = dict(
            db.query(Company.id, Company.company_name).filter(Company.id.in_(company_ids)).all()
        )

    names = creator_names(
        db, [e.created_by for e in company_events] + [e.created_by for e in employee_events]
    )

    items = []
    for e in company_events:
        items.append(EventFeedItem(
            id=e.id,
            source="company",
            event_name=e.event_name,
            company_id=e.company_id,
            company_name=company_names.get(e.company_id),
            old_value=e.old_value,
            old_value_id=e.old_value_id,
            new_value=e.new_value,
            new_value_id=e.new_value_id,
            created_at=ensure_utc(e.created_at),
            created_by=e.created_by,
            creator_full_name=names.get(e.created_by),
        ))

    for e in employee_events:
        employee = employees.get(e.employee_id)
        items.append(EventFeedItem(
            id=e.id,
            source="employee",
            event_name=e.event_name,
            company_id=employee.company_id if employee else None,
            company_name=company_names.get(employee.company_id) if employee else None,
            employee_id=e.employee_id,
            employee_full_name=employee.full_name if employee else None,
            old_value=e.old_value,
            old_value_id=e.old_value_id,
            new_value=e.new_value,
            new_value_id=e.new_value_id,
            created_at=ensure_utc(e.created_at),
            created_by=e.created_by,
            creator_full_name=names.get(e.created_by),
        ))

    items = sort_feed(items)
    if limit is not None:
        items = items[:limit]
    return EventFeedResponse(count=len(items), items=items)
