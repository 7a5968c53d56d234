"""
Fantasy contest and tournament repository
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update

from app.models.fantasy_contest import FantasyContest
from app.models.tournament import Tournament
from app.models.enums import ContestStatus


async def get_tournament_by_id(session: AsyncSession, tournament_id: UUID) -> Optional[Tournament]:
    """
    Get tournament by ID.

    Args:
        session: Database session
        tournament_id: Tournament UUID

    Returns:
        Tournament instance or None if not found
    """
    result = await session.execute(
        select(Tournament).where(Tournament.id == tournament_id)
    )
    return result.scalar_one_or_none()


async def get_contest_by_id(
    session: AsyncSession,
    contest_id: UUID,
    for_update: bool = False
) -> Optional[FantasyContest]:
    """
    Get contest by ID.

    Args:
        session: Database session
        contest_id: Contest UUID
        for_update: Lock the contest row for the rest of the transaction

    Returns:
        FantasyContest instance or None if not found
    """
    query = select(FantasyContest).where(FantasyContest.id == contest_id)
    if for_update:
        query = query.with_for_update()
    result = await session.execute(query)
    return result.scalar_one_or_none()


async def get_contests_for_tournament(
    session: AsyncSession,
    tournament_id: UUID
) -> List[FantasyContest]:
    """Get every contest of a tournament, oldest first."""
    result = await session.execute(
        select(FantasyContest)
        .where(FantasyContest.tournament_id == tournament_id)
        .order_by(FantasyContest.created_at, FantasyContest.id)
    )
    return result.scalars().all()


async def get_scoreable_contests(
    session: AsyncSession,
    tournament_id: UUID
) -> List[FantasyContest]:
    """
    Get contests whose standings still move with new match results.

    Cancelled contests and contests whose prizes are already distributed
    are frozen.
    """
    result = await session.execute(
        select(FantasyContest)
        .where(
            FantasyContest.tournament_id == tournament_id,
            FantasyContest.status != ContestStatus.CANCELLED.value,
            FantasyContest.is_prizes_distributed.is_(False)
        )
        .order_by(FantasyContest.created_at, FantasyContest.id)
    )
    return result.scalars().all()


async def claim_prize_distribution(session: AsyncSession, contest_id: UUID) -> bool:
    """
    Atomically mark a contest as processing prizes.

    A single conditional UPDATE so two concurrent callers cannot both pass
    the not-yet-distributed check.

    Returns:
        True if this caller won the claim, False otherwise
    """
    result = await session.execute(
        update(FantasyContest)
        .where(
            FantasyContest.id == contest_id,
            FantasyContest.is_prizes_distributed.is_(False),
            FantasyContest.is_prizes_processing.is_(False)
        )
        .values(is_prizes_processing=True)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def finish_prize_distribution(session: AsyncSession, contest_id: UUID) -> None:
    """Clear the processing flag once payouts have been handed off."""
    await session.execute(
        update(FantasyContest)
        .where(FantasyContest.id == contest_id)
        .values(is_prizes_processing=False)
        .execution_options(synchronize_session=False)
    )
