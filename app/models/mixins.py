"""
Shared column sets for audited, soft-deletable tables
"""
from sqlalchemy import Column, DateTime, Index, Integer, text

from app.utils.datetime_utils import now_utc

ACTIVE_ROWS = text("deleted_at IS NULL")


class AuditMixin:
    """created/modified/deleted timestamps and actors; deleted_at marks a soft delete"""

    created_at = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    created_by = Column(Integer, nullable=False, default=0)
    modified_at = Column(DateTime(timezone=True), nullable=True)
    modified_by = Column(Integer, nullable=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)
    deleted_by = Column(Integer, nullable=True)

    def touch(self, actor_id: int) -> None:
        self.modified_at = now_utc()
        self.modified_by = actor_id


def active_unique_index(name: str, *expressions) -> Index:
    """Unique index that only covers rows which are not soft-deleted"""
    return Index(
        name, *expressions,
        unique=True, sqlite_where=ACTIVE_ROWS, postgresql_where=ACTIVE_ROWS,
    )
