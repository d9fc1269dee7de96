"""
Event log service - append-only audit trail for company and employee changes

Two writers share one implementation:

    company_events.log_simple_event(db, company.id, CompanyEventName.EMAIL_CHANGED,
                                    old, new, actor_id=user_id)
    employee_events.log_relation_event(db, employee.id, EmployeeEventName.STATUS_CHANGED,
                                       old_id, old_label, new_id, new_label, actor_id=user_id)

Outside a `transaction(db)` scope each write is committed before the call
returns. Inside one, the row is flushed and committed together with the
business mutation, so a failing audit write rolls the mutation back.
"""
import enum
import logging
from datetime import date, datetime
from typing import Any, Optional, Type, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import PersistenceError
from app.models.event_log import (
    CompanyEventLog,
    CompanyEventName,
    EmployeeEventLog,
    EmployeeEventName,
)
from app.utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)


class UnknownEventNameError(ValueError):
    """Raised when an event name is not part of the catalog for its entity kind"""


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, enum.Enum):
        return str(value.value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


class EventLogWriter:
    """Writes immutable event rows for one entity kind"""

    def __init__(self, model: Type, catalog: Type[enum.Enum], subject_column: str):
        self.model = model
        self.catalog = catalog
        self.subject_column = subject_column

    def validate_event_name(self, event_name: Union[str, enum.Enum]) -> str:
        """Return the catalog value for `event_name` or raise UnknownEventNameError"""
        if isinstance(event_name, self.catalog):
            return event_name.value
        try:
            return self.catalog(event_name).value
        except ValueError:
            raise UnknownEventNameError(
                f"'{event_name}' is not a known {self.catalog.__name__} value"
            ) from None

    def log_event(
        self,
        db: Session,
        subject_id: int,
        event_name: Union[str, enum.Enum],
        old_value: Any = None,
        old_value_id: Optional[int] = None,
        new_value: Any = None,
        new_value_id: Optional[int] = None,
        *,
        actor_id: int,
    ):
        """
        Append one event row

        Args:
            db: Database session
            subject_id: ID of the company or employee the event belongs to
            event_name: Catalog entry (enum member or its string value)
            old_value / new_value: Human-readable values (stringified)
            old_value_id / new_value_id: Foreign keys for relation changes
            actor_id: ID of the user performing the change

        Returns:
            The persisted event row

        Raises:
            UnknownEventNameError: If event_name is not in the catalog
            PersistenceError: If the row could not be written
        """
        name = self.validate_event_name(event_name)

        entry = self.model(
            event_name=name,
            old_value=_as_text(old_value),
            old_value_id=old_value_id,
            new_value=_as_text(new_value),
            new_value_id=new_value_id,
            created_at=now_utc(),
            created_by=actor_id,
        )
        setattr(entry, self.subject_column, subject_id)
        db.add(entry)

        try:
            if db.info.get("in_transaction_scope"):
                db.flush()
            else:
                db.commit()
                db.refresh(entry)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error(
                "Failed to write %s %s for %s=%s: %s",
                self.model.__tablename__, name, self.subject_column, subject_id, exc,
            )
            raise PersistenceError("Failed to write audit event") from exc

        return entry

    def log_simple_event(
        self,
        db: Session,
        subject_id: int,
        event_name: Union[str, enum.Enum],
        old_value: Any = None,
        new_value: Any = None,
        *,
        actor_id: int,
    ):
        """Scalar change: labels only, no ids"""
        return self.log_event(
            db, subject_id, event_name, old_value, None, new_value, None, actor_id=actor_id
        )

    def log_relation_event(
        self,
        db: Session,
        subject_id: int,
        event_name: Union[str, enum.Enum],
        old_value_id: Optional[int],
        old_value_name: Optional[str],
        new_value_id: Optional[int],
        new_value_name: Optional[str],
        *,
        actor_id: int,
    ):
        """Foreign-key change: label and id on both sides"""
        return self.log_event(
            db,
            subject_id,
            event_name,
            old_value_name,
            old_value_id,
            new_value_name,
            new_value_id,
            actor_id=actor_id,
        )


company_events = EventLogWriter(CompanyEventLog, CompanyEventName, "company_id")
employee_events = EventLogWriter(EmployeeEventLog, EmployeeEventName, "employee_id")
