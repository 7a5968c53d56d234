"""
Contest ranking and standings refresh
"""

import logging
from typing import Dict, List
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.repos.contest_repo import get_contest_by_id, get_scoreable_contests
from app.repos.team_repo import count_teams, get_contest_teams, get_teams_by_rank, get_teams_by_standing
from app.services.team_points import aggregate_team

logger = logging.getLogger(__name__)


async def rank_contest(session: AsyncSession, contest_id: UUID) -> List[Dict]:
    """
    Assign dense 1-based ranks by total points without committing.

    Equal totals are split by entry time, then team id, so reruns never
    reorder tied teams.
    """
    teams = await get_teams_by_standing(session, contest_id)
    standings = []
    for position, team in enumerate(teams, start=1):
        team.rank = position
        standings.append({
            "team_id": str(team.id),
            "rank": position,
            "total_points": str(team.total_points)
        })
    await session.flush()
    return standings


async def recompute_rankings(session: AsyncSession, contest_id: UUID) -> List[Dict]:
    """
    Recompute and persist the ranking of every team in a contest.

    Args:
        session: Database session
        contest_id: Contest UUID

    Returns:
        Ordered list of {team_id, rank, total_points}
    """
    try:
        contest = await get_contest_by_id(session, contest_id)
        if not contest:
            raise NotFoundError("Contest", contest_id)

        standings = await rank_contest(session, contest_id)
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    logger.info(f"Ranked {len(standings)} teams in contest {contest_id}")
    return standings


async def refresh_contest_standings(session: AsyncSession, contest_id: UUID) -> List[Dict]:
    """Re-aggregate every team in a contest, then rank them, in one transaction."""
    try:
        contest = await get_contest_by_id(session, contest_id)
        if not contest:
            raise NotFoundError("Contest", contest_id)

        for team in await get_contest_teams(session, contest_id):
            await aggregate_team(session, team, contest.tournament_id)
        standings = await rank_contest(session, contest_id)
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    return standings


async def refresh_tournament_standings(session: AsyncSession, tournament_id: UUID) -> Dict[str, List[Dict]]:
    """
    Refresh standings of every contest still scoring under a tournament.

    Returns:
        Mapping of contest id to its new standings
    """
    contests = await get_scoreable_contests(session, tournament_id)
    refreshed = {}
    for contest in contests:
        refreshed[str(contest.id)] = await refresh_contest_standings(session, contest.id)

    logger.info(f"Refreshed standings for {len(refreshed)} contests in tournament {tournament_id}")
    return refreshed


async def get_leaderboard(
    session: AsyncSession,
    contest_id: UUID,
    page: int = 1,
    limit: int = 20
) -> Dict:
    """
    Get a page of a contest's leaderboard from the stored ranks.

    Args:
        session: Database session
        contest_id: Contest UUID
        page: 1-based page number
        limit: Teams per page

    Returns:
        Dict with contest, pagination and the page of teams
    """
    contest = await get_contest_by_id(session, contest_id)
    if not contest:
        raise NotFoundError("Contest", contest_id)

    page = max(page, 1)
    total = await count_teams(session, contest_id)
    teams = await get_teams_by_rank(session, contest_id, limit=limit, offset=(page - 1) * limit)

    return {
        "contest_id": str(contest_id),
        "prize_pool": str(contest.prize_pool),
        "is_prizes_distributed": contest.is_prizes_distributed,
        "page": page,
        "limit": limit,
        "total": total,
        "teams": [
            {
                "team_id": str(team.id),
                "user_id": str(team.user_id),
                "name": team.name,
                "rank": team.rank,
                "total_points": str(team.total_points)
            }
            for team in teams
        ],
    }
