"""
clover.api.routes.activities — Activity listing, hosting & joining
===================================================================
"""

from __future__ import annotations

import datetime as dt
import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from clover.api.deps import get_auth, get_store, require_user
from clover.database.models import ActivityStatus
from clover.domain.entities import ActivityCreate, User
from clover.errors import NotFound
from clover.services.auth_service import AuthService
from clover.services.store import Database

router = APIRouter(prefix="/activities", tags=["activities"])
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class ActivityBody(BaseModel):
    title: str
    description: str = ""
    category: str
    location: str
    date: dt.date
    time: str
    duration: float = 1.0
    participants: list[str] = Field(default_factory=list)
    max_participants: int | None = None
    image: str | None = None
    status: ActivityStatus = ActivityStatus.UPCOMING


class ActivityUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    category: str | None = None
    location: str | None = None
    date: dt.date | None = None
    time: str | None = None
    duration: float | None = None
    max_participants: int | None = None
    image: str | None = None
    status: ActivityStatus | None = None


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
@router.get("")
def list_activities(
    category: str | None = None,
    status: ActivityStatus | None = None,
    store: Database = Depends(get_store),
):
    return {"activities": store.filter_activities(category=category, status=status)}


@router.get("/{activity_id}")
def get_activity(activity_id: str, store: Database = Depends(get_store)):
    activity = store.get_activity_by_id(activity_id)
    if activity is None:
        raise NotFound("activity", activity_id)
    return activity


@router.post("", status_code=201)
def create_activity(
    body: ActivityBody,
    user: User = Depends(require_user),
    store: Database = Depends(get_store),
    auth: AuthService = Depends(get_auth),
):
    """Host a new activity as the logged-in member."""
    activity = store.create_activity(ActivityCreate(host_id=user.id, **body.model_dump()))
    auth.refresh()
    return activity


@router.patch("/{activity_id}")
def update_activity(
    activity_id: str,
    body: ActivityUpdate,
    user: User = Depends(require_user),
    store: Database = Depends(get_store),
):
    fields = body.model_dump(exclude_none=True)
    if not fields:
        raise HTTPException(400, "No fields to update")
    activity = store.update_activity(activity_id, **fields)
    if activity is None:
        raise NotFound("activity", activity_id)
    return activity


@router.post("/{activity_id}/join")
def join_activity(
    activity_id: str,
    user: User = Depends(require_user),
    store: Database = Depends(get_store),
    auth: AuthService = Depends(get_auth),
):
    activity = store.join_activity(activity_id, user.id)
    if activity is None:
        raise NotFound("activity", activity_id)
    auth.refresh()
    return activity
