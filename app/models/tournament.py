"""
Tournament model - only the fields the fantasy engine reads
"""

from sqlalchemy import Column, String, DateTime
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db.base import Base
import sqlalchemy as sa
import uuid


class Tournament(Base):
    """Tournament model - matches tournaments table"""
    __tablename__ = "tournaments"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    status = Column(sa.Enum('upcoming', 'in_progress', 'completed', 'cancelled', name='tournament_status'), nullable=False, default='upcoming')
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Tournament(id={self.id}, name={self.name}, status={self.status})>"

    def to_dict(self):
        return {
            "id": str(self.id),
            "name": self.name,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }
