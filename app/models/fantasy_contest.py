"""
Fantasy contest model
"""

from sqlalchemy import Column, String, Numeric, DateTime, Integer, Boolean, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db.base import Base
import sqlalchemy as sa
import uuid


class FantasyContest(Base):
    """Fantasy contest model - a prize pool over one tournament"""
    __tablename__ = "fantasy_contests"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tournament_id = Column(UUID(as_uuid=True), nullable=False)
    name = Column(String(255), nullable=False)
    entry_fee = Column(Numeric(12, 2), nullable=False, default=0)
    prize_pool = Column(Numeric(14, 2), nullable=False, default=0)
    max_entries = Column(Integer, nullable=True)
    current_entries = Column(Integer, nullable=False, default=0)
    status = Column(sa.Enum('upcoming', 'in_progress', 'completed', 'cancelled', name='contest_status'), nullable=False, default='upcoming')
    is_prizes_distributed = Column(Boolean, nullable=False, default=False)
    is_prizes_processing = Column(Boolean, nullable=False, default=False)
    prizes_distributed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index('idx_fantasy_contests_tournament_id', 'tournament_id'),
    )

    def __repr__(self):
        return f"<FantasyContest(id={self.id}, name={self.name}, prize_pool={self.prize_pool})>"

    def to_dict(self):
        """Convert contest to dictionary for API responses"""
        return {
            "id": str(self.id),
            "tournament_id": str(self.tournament_id),
            "name": self.name,
            "entry_fee": str(self.entry_fee),
            "prize_pool": str(self.prize_pool),
            "max_entries": self.max_entries,
            "current_entries": self.current_entries,
            "status": self.status,
            "is_prizes_distributed": self.is_prizes_distributed,
            "is_prizes_processing": self.is_prizes_processing,
            "prizes_distributed_at": self.prizes_distributed_at.isoformat() if self.prizes_distributed_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }
