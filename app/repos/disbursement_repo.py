"""
Prize disbursement repository
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.models.prize_disbursement import PrizeDisbursement


async def get_contest_disbursements(session: AsyncSession, contest_id: UUID) -> List[PrizeDisbursement]:
    """Get a contest's disbursements ordered by rank."""
    result = await session.execute(
        select(PrizeDisbursement)
        .where(PrizeDisbursement.contest_id == contest_id)
        .order_by(PrizeDisbursement.rank)
    )
    return result.scalars().all()


async def get_disbursement_by_transaction_id(
    session: AsyncSession,
    transaction_id: str
) -> Optional[PrizeDisbursement]:
    """Get the disbursement an external payout reference belongs to."""
    result = await session.execute(
        select(PrizeDisbursement)
        .where(PrizeDisbursement.transaction_id == transaction_id)
        .with_for_update()
    )
    return result.scalar_one_or_none()
