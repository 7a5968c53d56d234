"""
Match model - a single completed or scheduled tournament match
"""

from sqlalchemy import Column, String, DateTime, Integer, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db.base import Base
import sqlalchemy as sa
import uuid


class Match(Base):
    """Match model - matches matches table"""
    __tablename__ = "matches"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tournament_id = Column(UUID(as_uuid=True), nullable=False)
    player1_id = Column(UUID(as_uuid=True), nullable=False)
    player2_id = Column(UUID(as_uuid=True), nullable=False)
    round = Column(String(128), nullable=True)
    player1_score = Column(Integer, nullable=False, default=0)
    player2_score = Column(Integer, nullable=False, default=0)
    status = Column(sa.Enum('scheduled', 'in_progress', 'completed', 'cancelled', name='match_status'), nullable=False, default='scheduled')
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index('idx_matches_tournament_id', 'tournament_id'),
    )

    def __repr__(self):
        return f"<Match(id={self.id}, round={self.round}, score={self.player1_score}-{self.player2_score})>"

    def to_dict(self):
        """Convert match to dictionary for API responses"""
        return {
            "id": str(self.id),
            "tournament_id": str(self.tournament_id),
            "player1_id": str(self.player1_id),
            "player2_id": str(self.player2_id),
            "round": self.round,
            "player1_score": self.player1_score,
            "player2_score": self.player2_score,
            "status": self.status,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None
        }
