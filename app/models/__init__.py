# Models Package
from .tournament import Tournament
from .match import Match
from .player_match_points import PlayerMatchPoints
from .fantasy_contest import FantasyContest
from .fantasy_team import FantasyTeam, FantasyTeamPlayer
from .prize_rule import PrizeDistributionRule
from .prize_disbursement import PrizeDisbursement
from .payment_event import PaymentEvent
from .bank_account import BankAccount
from .audit_log import AuditLog

__all__ = [
    "Tournament",
    "Match",
    "PlayerMatchPoints",
    "FantasyContest",
    "FantasyTeam",
    "FantasyTeamPlayer",
    "PrizeDistributionRule",
    "PrizeDisbursement",
    "PaymentEvent",
    "BankAccount",
    "AuditLog"
]
