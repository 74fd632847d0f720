"""
clover.api.routes.users — Member directory
===========================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from clover.api.deps import get_store
from clover.errors import NotFound
from clover.services.store import Database

router = APIRouter(prefix="/users", tags=["users"])


def _existing(store: Database, user_id: str):
    user = store.get_user_by_id(user_id)
    if user is None:
        raise NotFound("user", user_id)
    return user


@router.get("")
def list_users(store: Database = Depends(get_store)):
    return {"users": store.list_users()}


@router.get("/{user_id}")
def get_user(user_id: str, store: Database = Depends(get_store)):
    return _existing(store, user_id)


@router.get("/{user_id}/activities")
def user_activities(user_id: str, store: Database = Depends(get_store)):
    """Activities the member hosts or has joined."""
    _existing(store, user_id)
    return {"activities": store.activities_for_user(user_id)}


@router.get("/{user_id}/teams")
def user_teams(user_id: str, store: Database = Depends(get_store)):
    """Teams the member captains or belongs to."""
    _existing(store, user_id)
    return {"teams": store.teams_for_user(user_id)}
