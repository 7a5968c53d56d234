"""
Dynamic prize pool: sizes a contest's pool and payout tiers from its entries.
"""

import logging
from decimal import Decimal
from typing import Dict, List
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import NotFoundError, InvalidStateError
from app.repos.audit_log_repo import create_audit_log
from app.repos.contest_repo import get_contest_by_id, get_contests_for_tournament, get_tournament_by_id
from app.repos.payment_repo import get_collected_fees
from app.repos.prize_rule_repo import replace_rules
from app.repos.team_repo import count_teams
from app.services.money import percent_of, quantize_money, to_decimal
from app.services.prize_rules import PrizeRuleSpec

logger = logging.getLogger(__name__)

# (minimum entrants, percentages by rank), largest bracket first
DISTRIBUTION_TIERS = (
    (26, (40, 20, 15, 7, 5, 4, 3, 3, 2, 1)),
    (16, (50, 25, 15, 7, 3)),
    (9, (60, 25, 15)),
    (5, (70, 30)),
    (0, (100,)),
)


def distribution_tier(entrants: int) -> List[int]:
    """Percentages paid to ranks 1..n for a contest of this size."""
    for minimum, percentages in DISTRIBUTION_TIERS:
        if entrants >= minimum:
            return list(percentages)
    return [100]


def calculate_prize_pool(entry_fee, entrants: int) -> Decimal:
    """Entry fees collected times the payout share, rounded to 0.01."""
    collected = to_decimal(entry_fee) * entrants
    return percent_of(collected, settings.prize_pool_payout_pct)


async def recalculate_contest_prize_pool(
    session: AsyncSession,
    contest_id: UUID,
    actor: str = "system"
) -> Dict:
    """
    Resize a contest's prize pool and tier rules to its current entries.

    The contest's override rules are replaced by the tier for its size,
    every tier rule applying from one player upwards.

    Args:
        session: Database session
        contest_id: Contest UUID
        actor: Who triggered the recompute, for the audit trail

    Returns:
        Dict with entrants, prize_pool and the new rules
    """
    try:
        contest = await get_contest_by_id(session, contest_id, for_update=True)
        if not contest:
            raise NotFoundError("Contest", contest_id)

        if contest.is_prizes_distributed:
            raise InvalidStateError(
                f"Contest {contest_id} prizes already distributed, pool is frozen",
                "Prize pool cannot change after prizes are distributed"
            )

        entrants = await count_teams(session, contest_id)
        prize_pool = calculate_prize_pool(contest.entry_fee, entrants)
        specs = [
            PrizeRuleSpec(rank=rank, percentage=quantize_money(percentage), min_players=1)
            for rank, percentage in enumerate(distribution_tier(entrants), start=1)
        ]

        previous_pool = contest.prize_pool
        contest.prize_pool = prize_pool
        contest.current_entries = entrants
        rows = await replace_rules(session, contest.tournament_id, contest_id, specs)
        rules = [row.to_dict() for row in rows]

        await create_audit_log(
            session=session,
            action="prize_pool_recalculated",
            resource_type="contest",
            resource_id=contest_id,
            details={
                "entrants": entrants,
                "previous_prize_pool": str(previous_pool),
                "prize_pool": str(prize_pool),
                "rules": rules
            },
            actor=actor
        )
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    logger.info(f"Contest {contest_id} prize pool set to {prize_pool} for {entrants} entrants")

    return {
        "contest_id": str(contest_id),
        "entrants": entrants,
        "prize_pool": str(prize_pool),
        "payout_percentage": str(to_decimal(settings.prize_pool_payout_pct)),
        "rules": rules,
    }


async def get_tournament_prize_pool(session: AsyncSession, tournament_id: UUID) -> Dict:
    """
    Summarise entry fees and the dynamic prize pool across a tournament's contests.

    Returns:
        Dict with total_entry_fees, total_registrations, payout_percentage,
        dynamic_prize_pool and collected_payments
    """
    tournament = await get_tournament_by_id(session, tournament_id)
    if not tournament:
        raise NotFoundError("Tournament", tournament_id)

    contests = await get_contests_for_tournament(session, tournament_id)

    total_entry_fees = Decimal("0")
    total_registrations = 0
    for contest in contests:
        teams = await count_teams(session, contest.id)
        total_entry_fees += to_decimal(contest.entry_fee) * teams
        total_registrations += teams

    collected = await get_collected_fees(session, [contest.id for contest in contests])

    return {
        "tournament_id": str(tournament_id),
        "total_entry_fees": str(quantize_money(total_entry_fees)),
        "total_registrations": total_registrations,
        "payout_percentage": str(to_decimal(settings.prize_pool_payout_pct)),
        "dynamic_prize_pool": str(percent_of(total_entry_fees, settings.prize_pool_payout_pct)),
        "collected_payments": str(quantize_money(collected)),
    }
