"""
Domain exceptions for the scoring and prize engine.

Every exception carries a stable ``code`` and the HTTP status the API layer
responds with, so callers can tell one failure kind from another.
"""


class FantasyError(Exception):
    """Base exception for scoring and prize errors."""
    code = "fantasy_error"
    status_code = 400

    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message

    def to_dict(self):
        return {
            "success": False,
            "error": self.code,
            "message": self.user_message,
        }


class NotFoundError(FantasyError):
    """Raised when a match, contest, team or tournament does not exist."""
    code = "not_found"
    status_code = 404

    def __init__(self, resource: str, resource_id):
        super().__init__(
            f"{resource} {resource_id} not found",
            f"{resource} not found"
        )
        self.resource = resource
        self.resource_id = resource_id


class InvalidStateError(FantasyError):
    """Raised when an operation is attempted against the wrong status."""
    code = "invalid_state"
    status_code = 409


class AlreadyDistributedError(InvalidStateError):
    """Raised when prizes for a contest were already distributed."""
    code = "already_distributed"

    def __init__(self, contest_id):
        super().__init__(
            f"Prizes for contest {contest_id} already distributed",
            "Prizes have already been distributed for this contest"
        )
        self.contest_id = contest_id


class ValidationError(FantasyError):
    """Raised when a prize rule set is malformed."""
    code = "validation_error"
    status_code = 400


class NoRulesDefinedError(FantasyError):
    """Raised when neither contest nor tournament prize rules exist."""
    code = "no_rules_defined"
    status_code = 422

    def __init__(self, contest_id):
        super().__init__(
            f"No prize distribution rules defined for contest {contest_id}",
            "No prize distribution rules defined for this contest"
        )


class InsufficientParticipantsError(FantasyError):
    """Raised when no prize rule clears its minimum participant bar."""
    code = "insufficient_participants"
    status_code = 422

    def __init__(self, contest_id, team_count: int):
        super().__init__(
            f"Contest {contest_id} has {team_count} teams, no prize rule applies",
            "Not enough participants to meet prize distribution criteria"
        )
        self.team_count = team_count


class NoParticipantsError(FantasyError):
    """Raised when a contest has no teams to pay."""
    code = "no_participants"
    status_code = 422

    def __init__(self, contest_id):
        super().__init__(
            f"No teams participated in contest {contest_id}",
            "No teams participated in this contest"
        )


class PayoutFailure(FantasyError):
    """Raised by payout providers; recorded on the disbursement, never propagated."""
    code = "payout_failed"
    status_code = 502
