"""
clover.api.routes.teams — Team search, creation & joining
==========================================================
"""

from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from clover.api.deps import get_auth, get_store, require_user
from clover.domain.entities import TeamCreate, User
from clover.errors import NotFound
from clover.services.auth_service import AuthService
from clover.services.store import Database

router = APIRouter(prefix="/teams", tags=["teams"])


class TeamBody(BaseModel):
    name: str
    description: str = ""
    sport: str
    location: str
    members: list[str] = Field(default_factory=list)
    founded_date: dt.date | None = None
    logo: str | None = None


@router.get("")
def list_teams(
    q: str = "",
    sport: str | None = None,
    store: Database = Depends(get_store),
):
    """Teams matching the search box and sport filter."""
    return {"teams": store.search_teams(q, sport)}


@router.get("/{team_id}")
def get_team(team_id: str, store: Database = Depends(get_store)):
    team = store.get_team_by_id(team_id)
    if team is None:
        raise NotFound("team", team_id)
    return team


@router.post("", status_code=201)
def create_team(
    body: TeamBody,
    user: User = Depends(require_user),
    store: Database = Depends(get_store),
    auth: AuthService = Depends(get_auth),
):
    """Found a team captained by the logged-in member, who joins it too."""
    fields = body.model_dump(exclude_none=True)
    fields["members"] = [user.id, *body.members]
    team = store.create_team(TeamCreate(captain_id=user.id, **fields))
    auth.refresh()
    return team


@router.post("/{team_id}/join")
def join_team(
    team_id: str,
    user: User = Depends(require_user),
    store: Database = Depends(get_store),
    auth: AuthService = Depends(get_auth),
):
    team = store.join_team(team_id, user.id)
    if team is None:
        raise NotFound("team", team_id)
    auth.refresh()
    return team
