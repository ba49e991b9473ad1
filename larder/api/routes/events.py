from typing import Optional

from fastapi import APIRouter, Depends, Query

from larder.api.routes.common import get_session

router = APIRouter(prefix="/api", tags=["events"])


@router.get("/events")
def list_events(since: Optional[int] = Query(None, ge=0), session=Depends(get_session)):
    """Recent store changes; poll with since=<next_cursor>."""
    return session.changes.get_events(since)
