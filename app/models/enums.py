"""
Status enums shared by models and services
"""

import enum


class TournamentStatus(enum.Enum):
    """Tournament status enum"""
    UPCOMING = "upcoming"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class MatchStatus(enum.Enum):
    """Match status enum"""
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ContestStatus(enum.Enum):
    """Fantasy contest status enum"""
    UPCOMING = "upcoming"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class DisbursementStatus(enum.Enum):
    """Prize disbursement status enum"""
    PENDING = "pending"
    PROCESSING = "processing"
    FAILED = "failed"
    PAID = "paid"
