"""
Payment gateway event intake: captured entry fees and payout status updates
"""

import logging
from decimal import Decimal
from typing import Dict, Any, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.enums import DisbursementStatus
from app.repos.audit_log_repo import create_audit_log
from app.repos.contest_repo import get_contest_by_id
from app.repos.disbursement_repo import get_disbursement_by_transaction_id
from app.repos.payment_repo import get_payment_event, create_payment_event
from app.services.prize_pool import recalculate_contest_prize_pool

logger = logging.getLogger(__name__)

PAYOUT_EVENT_STATUS = {
    "payout.processed": DisbursementStatus.PAID.value,
    "payout.failed": DisbursementStatus.FAILED.value,
    "payout.reversed": DisbursementStatus.FAILED.value,
    "payout.rejected": DisbursementStatus.FAILED.value,
}

TERMINAL_STATUSES = (DisbursementStatus.PAID.value, DisbursementStatus.FAILED.value)


async def record_captured_payment(
    session: AsyncSession,
    payment_id: str,
    amount: Decimal,
    user_id: UUID,
    tournament_id: UUID,
    contest_id: UUID
) -> Dict[str, Any]:
    """
    Record a captured entry-fee payment and resize the contest's prize pool.

    A payment id seen before is acknowledged without side effects.

    Returns:
        Dict with payment_id, duplicate flag and the prize pool result
    """
    contest = await get_contest_by_id(session, contest_id)
    if not contest:
        raise NotFoundError("Contest", contest_id)

    existing = await get_payment_event(session, payment_id)
    if existing:
        logger.info(f"Payment {payment_id} already recorded, skipping")
        return {"payment_id": payment_id, "duplicate": True}

    try:
        await create_payment_event(session, payment_id, amount, user_id, tournament_id, contest_id)
        await session.commit()
    except IntegrityError:
        # Lost a race with a concurrent delivery of the same payment
        await session.rollback()
        logger.info(f"Payment {payment_id} recorded concurrently, skipping")
        return {"payment_id": payment_id, "duplicate": True}

    logger.info(f"Recorded payment {payment_id} of {amount} for contest {contest_id}")

    if contest.is_prizes_distributed:
        logger.warning(f"Payment {payment_id} arrived after contest {contest_id} was distributed, pool left frozen")
        return {"payment_id": payment_id, "duplicate": False, "prize_pool": None}

    prize_pool = await recalculate_contest_prize_pool(session, contest_id, actor=f"payment:{payment_id}")
    return {"payment_id": payment_id, "duplicate": False, "prize_pool": prize_pool}


async def apply_payout_update(
    session: AsyncSession,
    transaction_id: str,
    event: str,
    failure_reason: Optional[str] = None
) -> Dict[str, Any]:
    """
    Move a disbursement to PAID or FAILED from a payout webhook event.

    Args:
        session: Database session
        transaction_id: Payout id returned when the payout was created
        event: Gateway event name, e.g. "payout.processed"
        failure_reason: Gateway-supplied reason for failed payouts

    Returns:
        Dict describing whether the disbursement changed
    """
    new_status = PAYOUT_EVENT_STATUS.get(event)
    if new_status is None:
        logger.info(f"Ignoring unsupported payout event {event} for {transaction_id}")
        return {"transaction_id": transaction_id, "updated": False, "reason": "unsupported_event"}

    try:
        disbursement = await get_disbursement_by_transaction_id(session, transaction_id)
        if not disbursement:
            logger.warning(f"Payout event {event} for unknown transaction {transaction_id}")
            return {"transaction_id": transaction_id, "updated": False, "reason": "unknown_transaction"}

        if disbursement.status in TERMINAL_STATUSES:
            logger.info(f"Disbursement {disbursement.id} already {disbursement.status}, ignoring {event}")
            return {
                "transaction_id": transaction_id,
                "updated": False,
                "reason": "terminal",
                "status": disbursement.status
            }

        previous_status = disbursement.status
        disbursement.status = new_status
        if new_status == DisbursementStatus.FAILED.value:
            disbursement.notes = f"Payout {event.split('.')[-1]}: {failure_reason or 'no reason given'}"[:512]

        await create_audit_log(
            session=session,
            action="payout_status_update",
            resource_type="prize_disbursement",
            resource_id=disbursement.id,
            details={
                "transaction_id": transaction_id,
                "event": event,
                "from": previous_status,
                "to": new_status,
                "failure_reason": failure_reason
            }
        )
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    logger.info(f"Disbursement {disbursement.id} moved {previous_status} -> {new_status} ({event})")
    return {
        "transaction_id": transaction_id,
        "updated": True,
        "status": new_status,
        "disbursement_id": str(disbursement.id)
    }
