"""
Captured entry-fee payment, deduplicated by the gateway payment id
"""

from sqlalchemy import Column, String, Numeric, DateTime
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db.base import Base
import uuid


class PaymentEvent(Base):
    """Payment event model - one row per captured gateway payment"""
    __tablename__ = "payment_events"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    payment_id = Column(String(128), nullable=False, unique=True)
    amount = Column(Numeric(14, 2), nullable=False)
    user_id = Column(UUID(as_uuid=True), nullable=False)
    tournament_id = Column(UUID(as_uuid=True), nullable=False)
    contest_id = Column(UUID(as_uuid=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<PaymentEvent(payment_id={self.payment_id}, amount={self.amount}, contest_id={self.contest_id})>"
