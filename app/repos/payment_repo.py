"""
Captured payment repository
"""

from decimal import Decimal
from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from app.models.payment_event import PaymentEvent


async def get_payment_event(session: AsyncSession, payment_id: str) -> Optional[PaymentEvent]:
    """Get a captured payment by gateway payment id."""
    result = await session.execute(
        select(PaymentEvent).where(PaymentEvent.payment_id == payment_id)
    )
    return result.scalar_one_or_none()


async def create_payment_event(
    session: AsyncSession,
    payment_id: str,
    amount: Decimal,
    user_id: UUID,
    tournament_id: UUID,
    contest_id: UUID
) -> PaymentEvent:
    """Insert a captured payment; the unique payment_id rejects duplicates."""
    event = PaymentEvent(
        payment_id=payment_id,
        amount=amount,
        user_id=user_id,
        tournament_id=tournament_id,
        contest_id=contest_id
    )
    session.add(event)
    await session.flush()
    return event


async def get_collected_fees(session: AsyncSession, contest_ids: List[UUID]) -> Decimal:
    """Sum the captured entry fees across contests."""
    if not contest_ids:
        return Decimal("0")
    result = await session.execute(
        select(func.coalesce(func.sum(PaymentEvent.amount), 0))
        .where(PaymentEvent.contest_id.in_(contest_ids))
    )
    return Decimal(str(result.scalar_one()))
