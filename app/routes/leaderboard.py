"""
leaderboard.py
--------------
Purpose:
    Read-only ranking and statistics endpoints.
"""

from fastapi import APIRouter, Depends, Query

from app.models.api.responses import LeaderboardEnvelope, StatsEnvelope
from app.models.domain.ambassador_domain import User
from app.routes.dependencies import current_user, get_leaderboard_service
from app.services.core.leaderboard_service import DEFAULT_LIMIT, LeaderboardService

router = APIRouter(tags=["leaderboard"])


@router.get("/leaderboard", response_model=LeaderboardEnvelope)
async def get_leaderboard(
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=100),
    _caller: User = Depends(current_user),
    board: LeaderboardService = Depends(get_leaderboard_service),
):
    return LeaderboardEnvelope(data=board.leaderboard(limit))


@router.get("/stats/me", response_model=StatsEnvelope)
async def get_my_stats(
    caller: User = Depends(current_user),
    board: LeaderboardService = Depends(get_leaderboard_service),
):
    return StatsEnvelope(data=board.user_stats(caller.id))


@router.get("/stats/{user_id}", response_model=StatsEnvelope)
async def get_user_stats(
    user_id: str,
    _caller: User = Depends(current_user),
    board: LeaderboardService = Depends(get_leaderboard_service),
):
    return StatsEnvelope(data=board.user_stats(user_id))
