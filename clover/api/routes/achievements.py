"""
clover.api.routes.achievements — Achievement catalogue & awards
================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from clover.api.deps import get_auth, get_store, require_user
from clover.domain.entities import AchievementCreate, User
from clover.errors import NotFound
from clover.services.auth_service import AuthService
from clover.services.store import Database

router = APIRouter(prefix="/achievements", tags=["achievements"])


class AchievementBody(BaseModel):
    title: str
    description: str = ""
    icon: str
    category: str = "General"


@router.get("")
def list_achievements(store: Database = Depends(get_store)):
    return {"achievements": store.list_achievements()}


@router.post("", status_code=201)
def create_achievement(
    body: AchievementBody,
    user: User = Depends(require_user),
    store: Database = Depends(get_store),
):
    return store.create_achievement(AchievementCreate(**body.model_dump()))


@router.post("/{achievement_id}/award/{user_id}")
def award_achievement(
    achievement_id: str,
    user_id: str,
    user: User = Depends(require_user),
    store: Database = Depends(get_store),
    auth: AuthService = Depends(get_auth),
):
    """Give *user_id* a copy of the achievement (no-op if already held)."""
    if store.get_achievement_by_id(achievement_id) is None:
        raise NotFound("achievement", achievement_id)
    awarded = store.award_achievement(user_id, achievement_id)
    if awarded is None:
        raise NotFound("user", user_id)
    auth.refresh()
    return awarded
