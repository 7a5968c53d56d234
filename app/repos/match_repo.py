"""
Match and player match points repository
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.models.match import Match
from app.models.player_match_points import PlayerMatchPoints
from app.models.enums import MatchStatus


async def get_match_by_id(session: AsyncSession, match_id: UUID) -> Optional[Match]:
    """
    Get match by ID.

    Args:
        session: Database session
        match_id: Match UUID

    Returns:
        Match instance or None if not found
    """
    result = await session.execute(
        select(Match).where(Match.id == match_id)
    )
    return result.scalar_one_or_none()


async def get_player_match_points(
    session: AsyncSession,
    player_id: UUID,
    match_id: UUID
) -> Optional[PlayerMatchPoints]:
    """Get the points row for one (player, match) pair, locked for update."""
    result = await session.execute(
        select(PlayerMatchPoints)
        .where(
            PlayerMatchPoints.player_id == player_id,
            PlayerMatchPoints.match_id == match_id
        )
        .with_for_update()
    )
    return result.scalar_one_or_none()


async def upsert_player_match_points(
    session: AsyncSession,
    player_id: UUID,
    match_id: UUID,
    points,
    breakdown: dict
) -> PlayerMatchPoints:
    """
    Create or overwrite the points row for a (player, match) pair.

    Args:
        session: Database session
        player_id: Player UUID
        match_id: Match UUID
        points: Total fantasy points for the match
        breakdown: JSON-serializable scoring breakdown

    Returns:
        The created or updated PlayerMatchPoints instance
    """
    row = await get_player_match_points(session, player_id, match_id)
    if row is None:
        row = PlayerMatchPoints(
            player_id=player_id,
            match_id=match_id,
            points=points,
            breakdown=breakdown
        )
        session.add(row)
    else:
        row.points = points
        row.breakdown = breakdown
    await session.flush()
    return row


async def get_points_for_match(session: AsyncSession, match_id: UUID) -> List[PlayerMatchPoints]:
    """Get every player's points row for a match."""
    result = await session.execute(
        select(PlayerMatchPoints)
        .where(PlayerMatchPoints.match_id == match_id)
        .order_by(PlayerMatchPoints.created_at)
    )
    return result.scalars().all()


async def get_tournament_points_for_players(
    session: AsyncSession,
    tournament_id: UUID,
    player_ids: List[UUID]
) -> List[PlayerMatchPoints]:
    """
    Get all points rows earned by the given players in completed matches
    of a tournament.
    """
    if not player_ids:
        return []

    result = await session.execute(
        select(PlayerMatchPoints)
        .join(Match, Match.id == PlayerMatchPoints.match_id)
        .where(
            Match.tournament_id == tournament_id,
            Match.status == MatchStatus.COMPLETED.value,
            PlayerMatchPoints.player_id.in_(player_ids)
        )
    )
    return result.scalars().all()
