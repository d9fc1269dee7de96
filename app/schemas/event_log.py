"""
Event log schemas (merged feed and per-entity history)
"""
from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, field_serializer


class EventFeedItem(BaseModel):
    """One row of the merged company/employee event feed"""
    id: int
    source: Literal["company", "employee"]
    event_name: str
    company_id: Optional[int] = None
    company_name: Optional[str] = None
    employee_id: Optional[int] = None
    employee_full_name: Optional[str] = None
    old_value: Optional[str] = None
    old_value_id: Optional[int] = None
    new_value: Optional[str] = None
    new_value_id: Optional[int] = None
    created_at: datetime
    created_by: int
    creator_full_name: Optional[str] = None

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        from app.utils.datetime_utils import iso_8601_utc
        return iso_8601_utc(dt)


class EventFeedResponse(BaseModel):
    count: int
    items: List[EventFeedItem]


class EventHistoryItem(BaseModel):
    """One event of a single company or employee, with a readable summary"""
    id: int
    event_name: str
    old_value: Optional[str] = None
    old_value_id: Optional[int] = None
    new_value: Optional[str] = None
    new_value_id: Optional[int] = None
    description: str
    created_at: datetime
    created_by: int
    creator_full_name: Optional[str] = None

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        from app.utils.datetime_utils import iso_8601_utc
        return iso_8601_utc(dt)
