"""
Bank account repository for payout routing lookups
"""

from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.models.bank_account import BankAccount


async def get_primary_bank_account(session: AsyncSession, user_id: UUID) -> Optional[BankAccount]:
    """
    Get the user's primary payout account.

    Args:
        session: Database session
        user_id: User UUID

    Returns:
        BankAccount instance or None if the user has not linked one
    """
    result = await session.execute(
        select(BankAccount)
        .where(BankAccount.user_id == user_id, BankAccount.is_primary.is_(True))
        .order_by(BankAccount.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()
