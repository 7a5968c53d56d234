"""
Fantasy team repository
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from app.models.fantasy_team import FantasyTeam


async def get_team_by_id(session: AsyncSession, team_id: UUID) -> Optional[FantasyTeam]:
    """
    Get fantasy team by ID, roster included.

    Args:
        session: Database session
        team_id: Team UUID

    Returns:
        FantasyTeam instance or None if not found
    """
    result = await session.execute(
        select(FantasyTeam).where(FantasyTeam.id == team_id)
    )
    return result.scalar_one_or_none()


async def get_contest_teams(session: AsyncSession, contest_id: UUID) -> List[FantasyTeam]:
    """Get every team in a contest in creation order."""
    result = await session.execute(
        select(FantasyTeam)
        .where(FantasyTeam.contest_id == contest_id)
        .order_by(FantasyTeam.created_at, FantasyTeam.id)
    )
    return result.scalars().all()


async def get_teams_by_standing(session: AsyncSession, contest_id: UUID) -> List[FantasyTeam]:
    """
    Get every team in a contest ordered by points.

    Ties on total_points go to the earlier entry, then to the lower id, so
    the order is identical on every run.
    """
    result = await session.execute(
        select(FantasyTeam)
        .where(FantasyTeam.contest_id == contest_id)
        .order_by(
            FantasyTeam.total_points.desc(),
            FantasyTeam.created_at.asc(),
            FantasyTeam.id.asc()
        )
    )
    return result.scalars().all()


async def get_teams_by_rank(
    session: AsyncSession,
    contest_id: UUID,
    limit: int = 20,
    offset: int = 0
) -> List[FantasyTeam]:
    """Get a page of the contest leaderboard using the stored ranks."""
    result = await session.execute(
        select(FantasyTeam)
        .where(FantasyTeam.contest_id == contest_id)
        .order_by(FantasyTeam.rank.asc().nulls_last(), FantasyTeam.created_at, FantasyTeam.id)
        .limit(limit)
        .offset(offset)
    )
    return result.scalars().all()


async def count_teams(session: AsyncSession, contest_id: UUID) -> int:
    """Count teams in a contest."""
    result = await session.execute(
        select(func.count(FantasyTeam.id)).where(FantasyTeam.contest_id == contest_id)
    )
    return result.scalar_one()
