"""
Prize distribution rule model
"""

from sqlalchemy import Column, Numeric, DateTime, Integer, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db.base import Base
import uuid


class PrizeDistributionRule(Base):
    """One (rank, percentage, min_players) row.

    contest_id NULL means a tournament-level default rule, otherwise the row
    belongs to that contest's override set.
    """
    __tablename__ = "prize_distribution_rules"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tournament_id = Column(UUID(as_uuid=True), nullable=False)
    contest_id = Column(UUID(as_uuid=True), nullable=True)
    rank = Column(Integer, nullable=False)
    percentage = Column(Numeric(5, 2), nullable=False)
    min_players = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index('idx_prize_rules_scope', 'tournament_id', 'contest_id'),
    )

    def __repr__(self):
        return f"<PrizeDistributionRule(rank={self.rank}, percentage={self.percentage}, min_players={self.min_players})>"

    def to_dict(self):
        return {
            "rank": self.rank,
            "percentage": str(self.percentage),
            "min_players": self.min_players
        }
