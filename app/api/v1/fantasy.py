"""
Fantasy scoring API endpoints: match points, team totals, rankings
"""

import logging
from typing import List, Dict, Any, Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.db.session import get_db
from app.repos.match_repo import get_match_by_id, get_points_for_match
from app.services.match_points import record_match_points
from app.services.ranking import recompute_rankings, get_leaderboard
from app.services.team_points import recompute_team_total

logger = logging.getLogger(__name__)

router = APIRouter()


class MatchPointsResponse(BaseModel):
    """Points recorded for both players of a match"""
    match_id: str
    player1_id: str
    player2_id: str
    player1_points: str
    player2_points: str
    player1_breakdown: Dict[str, Any]
    player2_breakdown: Dict[str, Any]
    fanout: Optional[str] = None


class PlayerPointsRow(BaseModel):
    """Stored points row for one player in a match"""
    player_id: str
    points: str
    breakdown: Optional[Dict[str, Any]] = None


class TeamTotalResponse(BaseModel):
    """Team total response model"""
    team_id: str
    total_points: str


class StandingRow(BaseModel):
    """One team's position in a contest"""
    team_id: str
    rank: int
    total_points: str


@router.post("/fantasy/matches/{match_id}/points", response_model=MatchPointsResponse)
async def record_match_points_endpoint(
    match_id: UUID,
    session: AsyncSession = Depends(get_db)
):
    """
    Calculate and store fantasy points for a completed match, then refresh
    the standings of every contest on its tournament.
    """
    try:
        return await record_match_points(session, match_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.get("/fantasy/matches/{match_id}/points", response_model=List[PlayerPointsRow])
async def get_match_points_endpoint(
    match_id: UUID,
    session: AsyncSession = Depends(get_db)
):
    """Get the stored points rows for a match."""
    match = await get_match_by_id(session, match_id)
    if not match:
        raise NotFoundError("Match", match_id)

    rows = await get_points_for_match(session, match_id)
    return [
        PlayerPointsRow(
            player_id=str(row.player_id),
            points=str(row.points),
            breakdown=row.breakdown
        )
        for row in rows
    ]


@router.post("/fantasy/teams/{team_id}/recompute", response_model=TeamTotalResponse)
async def recompute_team_endpoint(
    team_id: UUID,
    session: AsyncSession = Depends(get_db)
):
    """Recompute a team's total from its players' tournament points."""
    return await recompute_team_total(session, team_id)


@router.post("/fantasy/contests/{contest_id}/rankings", response_model=List[StandingRow])
async def recompute_rankings_endpoint(
    contest_id: UUID,
    session: AsyncSession = Depends(get_db)
):
    """Re-rank every team in a contest."""
    return await recompute_rankings(session, contest_id)


@router.get("/fantasy/contests/{contest_id}/leaderboard")
async def leaderboard_endpoint(
    contest_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    session: AsyncSession = Depends(get_db)
):
    """Get a page of the contest leaderboard."""
    return await get_leaderboard(session, contest_id, page=page, limit=limit)
