"""
Prize distribution: turns final standings into disbursements exactly once
and hands each one off to the payout provider.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import (
    NotFoundError,
    InvalidStateError,
    AlreadyDistributedError,
    NoParticipantsError,
    PayoutFailure,
)
from app.models.enums import TournamentStatus, DisbursementStatus
from app.models.prize_disbursement import PrizeDisbursement
from app.repos.audit_log_repo import create_audit_log
from app.repos.bank_account_repo import get_primary_bank_account
from app.repos.contest_repo import (
    get_contest_by_id,
    get_tournament_by_id,
    claim_prize_distribution,
    finish_prize_distribution,
)
from app.repos.disbursement_repo import get_contest_disbursements
from app.repos.team_repo import get_teams_by_standing
from app.services.money import percent_of, quantize_money
from app.services.payouts import PayoutProvider, get_payout_provider
from app.services.prize_rules import applicable_rules

logger = logging.getLogger(__name__)


def split_prize(prize_pool, percentage) -> Dict:
    """
    Gross, processing fee and net for one winner.

    Returns:
        Dict with amount, processing_fee and net_amount as Decimals
    """
    amount = percent_of(prize_pool, percentage)
    processing_fee = percent_of(amount, settings.prize_processing_fee_pct)
    return {
        "amount": amount,
        "processing_fee": processing_fee,
        "net_amount": quantize_money(amount - processing_fee),
    }


async def distribute_prizes(
    session: AsyncSession,
    contest_id: UUID,
    process_payouts: bool = True,
    provider: Optional[PayoutProvider] = None,
    actor: str = "system"
) -> Dict:
    """
    Distribute a finished contest's prize pool to its top teams.

    Disbursement rows and the distributed flag are committed together, so a
    contest is paid at most once. Payouts are then attempted one by one;
    a failed payout is recorded on its disbursement and the loop moves on.

    Args:
        session: Database session
        contest_id: Contest UUID
        process_payouts: Hand disbursements to the payout provider
        provider: Payout provider override, defaults to the configured one
        actor: Who triggered the distribution, for the audit trail

    Returns:
        Dict with success, prize_pool and the resulting disbursements
    """
    try:
        contest = await get_contest_by_id(session, contest_id, for_update=True)
        if not contest:
            raise NotFoundError("Contest", contest_id)

        tournament = await get_tournament_by_id(session, contest.tournament_id)
        if not tournament:
            raise NotFoundError("Tournament", contest.tournament_id)

        if tournament.status != TournamentStatus.COMPLETED.value:
            raise InvalidStateError(
                f"Tournament {tournament.id} is {tournament.status}, not completed",
                "Tournament must be completed before distributing prizes"
            )

        if contest.is_prizes_distributed:
            raise AlreadyDistributedError(contest_id)

        if contest.is_prizes_processing:
            raise InvalidStateError(
                f"Prize distribution for contest {contest_id} is already in progress",
                "Prize distribution is already in progress for this contest"
            )

        teams = await get_teams_by_standing(session, contest_id)
        if not teams:
            raise NoParticipantsError(contest_id)

        rules, source = await applicable_rules(session, contest, len(teams))
        paid_positions = min(len(rules), len(teams))

        if not await claim_prize_distribution(session, contest_id):
            await session.refresh(contest)
            if contest.is_prizes_distributed:
                raise AlreadyDistributedError(contest_id)
            raise InvalidStateError(
                f"Contest {contest_id} claimed by another distribution",
                "Prize distribution is already in progress for this contest"
            )

        prize_pool = quantize_money(contest.prize_pool)
        disbursements: List[PrizeDisbursement] = []
        for position in range(paid_positions):
            team = teams[position]
            rule = rules[position]
            split = split_prize(prize_pool, rule.percentage)
            disbursements.append(PrizeDisbursement(
                contest_id=contest_id,
                fantasy_team_id=team.id,
                user_id=team.user_id,
                rank=position + 1,
                amount=split["amount"],
                processing_fee=split["processing_fee"],
                net_amount=split["net_amount"],
                status=DisbursementStatus.PENDING.value
            ))
        session.add_all(disbursements)

        contest.is_prizes_distributed = True
        contest.prizes_distributed_at = datetime.now(timezone.utc)

        await create_audit_log(
            session=session,
            action="prize_distribution",
            resource_type="contest",
            resource_id=contest_id,
            details={
                "prize_pool": str(prize_pool),
                "rule_source": source,
                "team_count": len(teams),
                "paid_positions": paid_positions,
                "winners": [
                    {"rank": d.rank, "team_id": str(d.fantasy_team_id), "net_amount": str(d.net_amount)}
                    for d in disbursements
                ]
            },
            actor=actor
        )
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    logger.info(
        f"Contest {contest_id} distributed: pool {prize_pool}, "
        f"{paid_positions} winners from {len(teams)} teams ({source} rules)"
    )

    try:
        if process_payouts:
            await _hand_off_payouts(session, disbursements, provider or get_payout_provider())
    except Exception:
        await session.rollback()
        raise
    finally:
        await finish_prize_distribution(session, contest_id)
        await session.commit()

    return {
        "success": True,
        "contest_id": str(contest_id),
        "prize_pool": str(prize_pool),
        "paid_positions": paid_positions,
        "disbursements": [d.to_dict() for d in disbursements],
    }


async def _hand_off_payouts(
    session: AsyncSession,
    disbursements: List[PrizeDisbursement],
    provider: PayoutProvider
) -> None:
    """Attempt every payout, committing each outcome on its own."""
    for disbursement in disbursements:
        try:
            bank_account = await get_primary_bank_account(session, disbursement.user_id)
            if not bank_account:
                raise PayoutFailure(
                    f"User {disbursement.user_id} has no primary bank account",
                    "No bank account on file"
                )

            payout = await provider.create_payout(disbursement, bank_account)
            disbursement.status = DisbursementStatus.PROCESSING.value
            disbursement.transaction_id = payout["id"]
            disbursement.payment_details = payout
            logger.info(f"Payout {payout['id']} started for disbursement {disbursement.id}")
        except Exception as e:
            reason = e.user_message if isinstance(e, PayoutFailure) else str(e)
            disbursement.status = DisbursementStatus.FAILED.value
            disbursement.notes = f"Payout failed: {reason}"[:512]
            logger.error(f"Payout failed for disbursement {disbursement.id}: {e}")

        await session.commit()


async def list_disbursements(session: AsyncSession, contest_id: UUID) -> List[Dict]:
    """List a contest's disbursements ordered by rank."""
    contest = await get_contest_by_id(session, contest_id)
    if not contest:
        raise NotFoundError("Contest", contest_id)

    disbursements = await get_contest_disbursements(session, contest_id)
    return [d.to_dict() for d in disbursements]
