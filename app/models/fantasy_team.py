"""
Fantasy team and roster membership models
"""

from sqlalchemy import Column, String, Numeric, DateTime, Integer, Boolean, ForeignKey, UniqueConstraint, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base import Base
import uuid


class FantasyTeam(Base):
    """A user's drafted team in one contest.

    total_points and rank are derived state, written only by the team
    aggregator and the ranking engine.
    """
    __tablename__ = "fantasy_teams"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    contest_id = Column(UUID(as_uuid=True), nullable=False)
    user_id = Column(UUID(as_uuid=True), nullable=False)
    name = Column(String(255), nullable=False)
    total_points = Column(Numeric(14, 2), nullable=False, default=0)
    rank = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    players = relationship(
        "FantasyTeamPlayer",
        back_populates="team",
        cascade="all, delete-orphan",
        lazy="selectin"
    )

    __table_args__ = (
        Index('idx_fantasy_teams_contest_id', 'contest_id'),
    )

    def __repr__(self):
        return f"<FantasyTeam(id={self.id}, name={self.name}, total_points={self.total_points}, rank={self.rank})>"

    def to_dict(self):
        return {
            "id": str(self.id),
            "contest_id": str(self.contest_id),
            "user_id": str(self.user_id),
            "name": self.name,
            "total_points": str(self.total_points),
            "rank": self.rank,
            "players": [p.to_dict() for p in self.players],
            "created_at": self.created_at.isoformat() if self.created_at else None
        }


class FantasyTeamPlayer(Base):
    """Roster membership; caches the player's weighted contribution to the team"""
    __tablename__ = "fantasy_team_players"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    team_id = Column(UUID(as_uuid=True), ForeignKey("fantasy_teams.id", ondelete="CASCADE"), nullable=False)
    player_id = Column(UUID(as_uuid=True), nullable=False)
    is_captain = Column(Boolean, nullable=False, default=False)
    is_vice_captain = Column(Boolean, nullable=False, default=False)
    raw_points = Column(Numeric(14, 2), nullable=False, default=0)
    role_multiplier = Column(Numeric(4, 2), nullable=False, default=1)
    contribution = Column(Numeric(14, 2), nullable=False, default=0)

    team = relationship("FantasyTeam", back_populates="players")

    __table_args__ = (
        UniqueConstraint('team_id', 'player_id', name='uq_team_player'),
    )

    def __repr__(self):
        return f"<FantasyTeamPlayer(team_id={self.team_id}, player_id={self.player_id}, captain={self.is_captain})>"

    def to_dict(self):
        return {
            "player_id": str(self.player_id),
            "is_captain": self.is_captain,
            "is_vice_captain": self.is_vice_captain,
            "raw_points": str(self.raw_points),
            "role_multiplier": str(self.role_multiplier),
            "contribution": str(self.contribution)
        }
