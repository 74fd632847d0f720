"""
clover.api.routes.notices — Recent user-facing notices
=======================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from clover.api.deps import get_notices
from clover.services.notices import NoticeBuffer

router = APIRouter(prefix="/notices", tags=["notices"])


@router.get("")
def recent_notices(
    limit: int = Query(20, ge=1, le=200),
    notices: NoticeBuffer = Depends(get_notices),
):
    """Most recent notices, newest last."""
    return {"notices": [n.to_dict() for n in notices.recent(limit)]}
