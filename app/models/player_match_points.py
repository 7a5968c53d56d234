"""
Per-player fantasy points earned in one match
"""

from sqlalchemy import Column, Numeric, DateTime, JSON, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db.base import Base
import uuid


class PlayerMatchPoints(Base):
    """One row per (player, match), overwritten in place on recalculation"""
    __tablename__ = "player_match_points"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    player_id = Column(UUID(as_uuid=True), nullable=False)
    match_id = Column(UUID(as_uuid=True), nullable=False)
    points = Column(Numeric(12, 2), nullable=False, default=0)
    breakdown = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint('player_id', 'match_id', name='uq_player_match_points'),
    )

    def __repr__(self):
        return f"<PlayerMatchPoints(player_id={self.player_id}, match_id={self.match_id}, points={self.points})>"

    def to_dict(self):
        return {
            "id": str(self.id),
            "player_id": str(self.player_id),
            "match_id": str(self.match_id),
            "points": str(self.points),
            "breakdown": self.breakdown
        }
