"""
Prize distribution rule repository.

Rule sets are never patched row by row: a scope's rules are deleted and
recreated together inside the caller's transaction.
"""

from typing import Iterable, List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete

from app.models.prize_rule import PrizeDistributionRule


async def get_contest_rules(session: AsyncSession, contest_id: UUID) -> List[PrizeDistributionRule]:
    """Get a contest's override rules ordered by rank."""
    result = await session.execute(
        select(PrizeDistributionRule)
        .where(PrizeDistributionRule.contest_id == contest_id)
        .order_by(PrizeDistributionRule.rank)
    )
    return result.scalars().all()


async def get_tournament_rules(session: AsyncSession, tournament_id: UUID) -> List[PrizeDistributionRule]:
    """Get a tournament's default rules (rows without a contest) ordered by rank."""
    result = await session.execute(
        select(PrizeDistributionRule)
        .where(
            PrizeDistributionRule.tournament_id == tournament_id,
            PrizeDistributionRule.contest_id.is_(None)
        )
        .order_by(PrizeDistributionRule.rank)
    )
    return result.scalars().all()


async def get_contest_overrides_for_tournament(
    session: AsyncSession,
    tournament_id: UUID
) -> List[PrizeDistributionRule]:
    """Get every contest-scoped rule under a tournament."""
    result = await session.execute(
        select(PrizeDistributionRule)
        .where(
            PrizeDistributionRule.tournament_id == tournament_id,
            PrizeDistributionRule.contest_id.is_not(None)
        )
        .order_by(PrizeDistributionRule.contest_id, PrizeDistributionRule.rank)
    )
    return result.scalars().all()


async def replace_rules(
    session: AsyncSession,
    tournament_id: UUID,
    contest_id,
    rules: Iterable
) -> List[PrizeDistributionRule]:
    """
    Delete a scope's rules and insert the new set.

    Args:
        session: Database session
        tournament_id: Tournament UUID owning the rules
        contest_id: Contest UUID for an override set, None for tournament defaults
        rules: Validated rule specs with rank, percentage and min_players

    Returns:
        The newly created rule rows
    """
    scope = PrizeDistributionRule.contest_id == contest_id if contest_id is not None \
        else PrizeDistributionRule.contest_id.is_(None)

    await session.execute(
        delete(PrizeDistributionRule)
        .where(PrizeDistributionRule.tournament_id == tournament_id, scope)
        .execution_options(synchronize_session=False)
    )

    rows = [
        PrizeDistributionRule(
            tournament_id=tournament_id,
            contest_id=contest_id,
            rank=rule.rank,
            percentage=rule.percentage,
            min_players=rule.min_players
        )
        for rule in rules
    ]
    session.add_all(rows)
    await session.flush()
    return rows
