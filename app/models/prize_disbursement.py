"""
Prize disbursement model - money owed to one winning team
"""

from sqlalchemy import Column, String, Numeric, DateTime, Integer, JSON, UniqueConstraint, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db.base import Base
import sqlalchemy as sa
import uuid


class PrizeDisbursement(Base):
    """Prize disbursement model - created exactly once per winner per contest"""
    __tablename__ = "prize_disbursements"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    contest_id = Column(UUID(as_uuid=True), nullable=False)
    fantasy_team_id = Column(UUID(as_uuid=True), nullable=False)
    user_id = Column(UUID(as_uuid=True), nullable=False)
    rank = Column(Integer, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    processing_fee = Column(Numeric(14, 2), nullable=False)
    net_amount = Column(Numeric(14, 2), nullable=False)
    status = Column(sa.Enum('pending', 'processing', 'failed', 'paid', name='disbursement_status'), nullable=False, default='pending')
    transaction_id = Column(String(128), nullable=True)
    payment_details = Column(JSON, nullable=True)
    notes = Column(String(512), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint('contest_id', 'fantasy_team_id', name='uq_disbursement_contest_team'),
        Index('idx_disbursements_transaction_id', 'transaction_id'),
    )

    def __repr__(self):
        return f"<PrizeDisbursement(id={self.id}, rank={self.rank}, net_amount={self.net_amount}, status={self.status})>"

    def to_dict(self):
        return {
            "id": str(self.id),
            "contest_id": str(self.contest_id),
            "fantasy_team_id": str(self.fantasy_team_id),
            "user_id": str(self.user_id),
            "rank": self.rank,
            "amount": str(self.amount),
            "processing_fee": str(self.processing_fee),
            "net_amount": str(self.net_amount),
            "status": self.status,
            "transaction_id": self.transaction_id,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }
