"""
Prize rule editing and resolution.

A rule set is either a tournament default (contest_id is NULL) or a
contest override. Sets are validated as a whole and replaced wholesale.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, List, NamedTuple, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    NotFoundError,
    ValidationError,
    NoRulesDefinedError,
    InsufficientParticipantsError,
)
from app.models.prize_rule import PrizeDistributionRule
from app.repos.audit_log_repo import create_audit_log
from app.repos.contest_repo import get_contest_by_id, get_tournament_by_id
from app.repos.prize_rule_repo import (
    get_contest_rules,
    get_tournament_rules,
    get_contest_overrides_for_tournament,
    replace_rules,
)
from app.repos.team_repo import count_teams
from app.services.money import CENTS, HUNDRED

logger = logging.getLogger(__name__)


class PrizeRuleSpec(NamedTuple):
    """One validated rank → percentage rule."""
    rank: int
    percentage: Decimal
    min_players: int = 0


def validate_rule_set(rules: Iterable) -> List[PrizeRuleSpec]:
    """
    Validate a rule set and normalise it into PrizeRuleSpec values.

    Accepts dicts or objects exposing rank, percentage and min_players.

    Raises:
        ValidationError: if the set is empty, a rank is repeated or below 1,
            a percentage falls outside (0, 100], min_players is negative or
            the percentages do not add up to exactly 100
    """
    specs = []
    seen_ranks = set()

    for raw in rules or []:
        if isinstance(raw, dict):
            rank = raw.get("rank")
            percentage = raw.get("percentage")
            min_players = raw.get("min_players", 0)
        else:
            rank = raw.rank
            percentage = raw.percentage
            min_players = getattr(raw, "min_players", 0)

        if isinstance(rank, bool) or not isinstance(rank, int) or rank < 1:
            raise ValidationError(f"Invalid rank {rank!r}", "Rank must be a positive integer")
        if rank in seen_ranks:
            raise ValidationError(f"Duplicate rank {rank}", f"Rank {rank} appears more than once")
        seen_ranks.add(rank)

        try:
            value = Decimal(str(percentage))
            if not value.is_finite():
                raise InvalidOperation
            quantized = value.quantize(CENTS)
        except (InvalidOperation, TypeError):
            raise ValidationError(f"Invalid percentage {percentage!r}", "Percentage must be a number")
        if quantized != value:
            raise ValidationError(
                f"Percentage {value} for rank {rank} has more than two decimal places",
                "Percentage can have at most two decimal places"
            )
        percentage = quantized
        if percentage <= 0 or percentage > HUNDRED:
            raise ValidationError(
                f"Percentage {percentage} out of range for rank {rank}",
                "Percentage must be greater than 0 and at most 100"
            )

        if min_players is None:
            min_players = 0
        if isinstance(min_players, bool) or not isinstance(min_players, int) or min_players < 0:
            raise ValidationError(
                f"Invalid min_players {min_players!r} for rank {rank}",
                "Minimum players must be zero or more"
            )

        specs.append(PrizeRuleSpec(rank=rank, percentage=percentage, min_players=min_players))

    if not specs:
        raise ValidationError("Empty prize rule set", "At least one prize rule is required")

    total = sum((spec.percentage for spec in specs), Decimal("0"))
    if total != HUNDRED:
        raise ValidationError(
            f"Prize percentages sum to {total}, expected 100",
            "Total prize distribution percentage must equal 100%"
        )

    return sorted(specs, key=lambda spec: spec.rank)


async def replace_tournament_rules(
    session: AsyncSession,
    tournament_id: UUID,
    rules: Iterable,
    actor: str = "system"
) -> List[Dict]:
    """
    Replace a tournament's default rule set. Contest overrides are untouched.

    Returns:
        The stored rules as dicts, ordered by rank
    """
    specs = validate_rule_set(rules)

    try:
        tournament = await get_tournament_by_id(session, tournament_id)
        if not tournament:
            raise NotFoundError("Tournament", tournament_id)

        rows = await replace_rules(session, tournament_id, None, specs)
        stored = [row.to_dict() for row in rows]

        await create_audit_log(
            session=session,
            action="prize_rules_replaced",
            resource_type="tournament",
            resource_id=tournament_id,
            details={"scope": "tournament", "rules": stored},
            actor=actor
        )
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    logger.info(f"Replaced default prize rules for tournament {tournament_id}: {len(stored)} ranks")
    return stored


async def replace_contest_rules(
    session: AsyncSession,
    contest_id: UUID,
    rules: Iterable,
    actor: str = "system"
) -> List[Dict]:
    """Replace a contest's override rule set."""
    specs = validate_rule_set(rules)

    try:
        contest = await get_contest_by_id(session, contest_id)
        if not contest:
            raise NotFoundError("Contest", contest_id)

        rows = await replace_rules(session, contest.tournament_id, contest_id, specs)
        stored = [row.to_dict() for row in rows]

        await create_audit_log(
            session=session,
            action="prize_rules_replaced",
            resource_type="contest",
            resource_id=contest_id,
            details={"scope": "contest", "rules": stored},
            actor=actor
        )
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    logger.info(f"Replaced prize rules for contest {contest_id}: {len(stored)} ranks")
    return stored


async def get_rules(session: AsyncSession, tournament_id: UUID) -> Dict:
    """
    Get a tournament's default rules and every contest override set.

    Returns:
        Dict with tournament_id, default_rules and contest_rules keyed by contest id
    """
    tournament = await get_tournament_by_id(session, tournament_id)
    if not tournament:
        raise NotFoundError("Tournament", tournament_id)

    defaults = await get_tournament_rules(session, tournament_id)
    overrides = await get_contest_overrides_for_tournament(session, tournament_id)

    contest_rules: Dict[str, List[Dict]] = {}
    for rule in overrides:
        contest_rules.setdefault(str(rule.contest_id), []).append(rule.to_dict())

    return {
        "tournament_id": str(tournament_id),
        "default_rules": [rule.to_dict() for rule in defaults],
        "contest_rules": contest_rules,
    }


async def applicable_rules(
    session: AsyncSession,
    contest,
    team_count: int
) -> Tuple[List[PrizeDistributionRule], str]:
    """
    Pick the rule set that governs a contest and drop rules it is too small for.

    Returns:
        (applicable rules ordered by rank, "contest" or "tournament")
    """
    rules = await get_contest_rules(session, contest.id)
    source = "contest"
    if not rules:
        rules = await get_tournament_rules(session, contest.tournament_id)
        source = "tournament"
    if not rules:
        raise NoRulesDefinedError(contest.id)

    applicable = [rule for rule in rules if rule.min_players <= team_count]
    if not applicable:
        raise InsufficientParticipantsError(contest.id, team_count)

    return applicable, source


async def resolve_rules(session: AsyncSession, contest_id: UUID) -> Dict:
    """
    Resolve the prize rules that would apply to a contest right now.

    Args:
        session: Database session
        contest_id: Contest UUID

    Returns:
        Dict with the applicable rules, their source, the team count and
        the number of paid positions
    """
    contest = await get_contest_by_id(session, contest_id)
    if not contest:
        raise NotFoundError("Contest", contest_id)

    team_count = await count_teams(session, contest_id)
    rules, source = await applicable_rules(session, contest, team_count)

    return {
        "contest_id": str(contest_id),
        "source": source,
        "team_count": team_count,
        "rules": [rule.to_dict() for rule in rules],
        "paid_positions": min(len(rules), team_count),
    }
