"""
Query helpers that encode the soft-delete convention

Every read of active data goes through `active()` (or `not_deleted()` for
the joined models of a query) so the `deleted_at IS NULL` predicate is
never forgotten at a call site.
"""
from typing import Any, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from app.utils.datetime_utils import now_utc

T = TypeVar("T")


def not_deleted(*models: Type) -> List[Any]:
    """`deleted_at IS NULL` criteria for each model, for joins and multi-entity queries"""
    return [model.deleted_at.is_(None) for model in models]


def active(db: Session, model: Type[T]) -> Query:
    """Query over the rows of `model` that are not soft-deleted"""
    return db.query(model).filter(*not_deleted(model))


def get_active(db: Session, model: Type[T], row_id: int) -> Optional[T]:
    """Fetch one active row by primary key, or None"""
    return active(db, model).filter(model.id == row_id).first()


def exists_active(db: Session, model: Type[T], *criteria: Any) -> bool:
    """True when at least one active row matches every criterion"""
    return db.query(active(db, model).filter(*criteria).exists()).scalar()


def name_taken(
    db: Session,
    model: Type[T],
    column: Any,
    value: str,
    exclude_id: Optional[int] = None,
    scope: Sequence[Any] = (),
) -> bool:
    """
    Case-insensitive uniqueness check among active rows

    Soft-deleted rows never block a name. `exclude_id` skips the row being
    updated; `scope` adds extra criteria (e.g. same country for cities).
    """
    query = active(db, model).filter(func.lower(column) == func.lower(value.strip()), *scope)
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    return db.query(query.exists()).scalar()


def soft_delete(row: Any, actor_id: int) -> None:
    """Mark a row deleted without removing it"""
    row.deleted_at = now_utc()
    row.deleted_by = actor_id
