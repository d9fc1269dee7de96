"""
Merged company/employee event feed
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.constants import READ_EVENTS
from app.core.deps import get_db
from app.core.permissions import require_permissions
from app.schemas.event_log import EventFeedResponse
from app.services.event_feed_service import get_event_feed

router = APIRouter(dependencies=[Depends(require_permissions(READ_EVENTS))])


@router.get("", response_model=EventFeedResponse)
async def list_events_endpoint(
    limit: Optional[int] = Query(None, ge=1, le=1000, description="Return only the newest N events"),
    db: Session = Depends(get_db)
):
    """All company and employee events, newest first"""
    return get_event_feed(db, limit=limit)
