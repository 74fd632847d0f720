"""
clover.api.routes.leaderboards — Rankings by sport & period
============================================================

Entries are returned in rank order with the medal for the top three.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from clover.api.deps import get_store
from clover.constants import rank_badge
from clover.database.models import LeaderboardPeriod
from clover.domain.entities import Leaderboard
from clover.errors import NotFound
from clover.services.store import Database

router = APIRouter(tags=["leaderboards"])


def _board_payload(board: Leaderboard) -> dict:
    data = board.model_dump(mode="json", exclude={"entries"})
    data["entries"] = [
        {**entry.model_dump(mode="json"), "badge": rank_badge(entry.rank)}
        for entry in board.ranked_entries
    ]
    return data


@router.get("/leaderboards")
def list_leaderboards(
    sport: str | None = None,
    period: LeaderboardPeriod | None = None,
    store: Database = Depends(get_store),
):
    boards = store.filter_leaderboards(sport=sport, period=period)
    return {"leaderboards": [_board_payload(b) for b in boards]}


@router.get("/leaderboards/{leaderboard_id}")
def get_leaderboard(leaderboard_id: str, store: Database = Depends(get_store)):
    board = store.get_leaderboard_by_id(leaderboard_id)
    if board is None:
        raise NotFound("leaderboard", leaderboard_id)
    return _board_payload(board)


@router.get("/sports")
def list_sports(store: Database = Depends(get_store)):
    return {"sports": store.list_sports()}
