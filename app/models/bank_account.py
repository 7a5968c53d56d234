"""
Payout routing details for a user
"""

from sqlalchemy import Column, String, Boolean, DateTime, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db.base import Base
import uuid


class BankAccount(Base):
    """Bank account model - payout destination for prize money"""
    __tablename__ = "bank_accounts"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), nullable=False)
    account_holder_name = Column(String(255), nullable=False)
    account_number = Column(String(64), nullable=False)
    ifsc_code = Column(String(16), nullable=False)
    fund_account_id = Column(String(128), nullable=True)
    is_primary = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index('idx_bank_accounts_user_id', 'user_id'),
    )

    def __repr__(self):
        return f"<BankAccount(id={self.id}, user_id={self.user_id}, primary={self.is_primary})>"
