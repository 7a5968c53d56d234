"""
Team aggregation: a fantasy team's cumulative tournament points.

total_points is a cache of a pure function over PlayerMatchPoints. It is
always recomputed from source and replaced, never incremented.
"""

import logging
from decimal import Decimal
from typing import Dict
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.fantasy_team import FantasyTeam
from app.repos.contest_repo import get_contest_by_id
from app.repos.match_repo import get_tournament_points_for_players
from app.repos.team_repo import get_team_by_id
from app.services.scoring import role_multiplier

logger = logging.getLogger(__name__)


async def aggregate_team(session: AsyncSession, team: FantasyTeam, tournament_id: UUID) -> Decimal:
    """
    Recompute and write one team's total without committing.

    Each roster row gets the player's raw tournament points, the role
    multiplier applied and the resulting contribution.
    """
    player_ids = [member.player_id for member in team.players]
    rows = await get_tournament_points_for_players(session, tournament_id, player_ids)

    raw_by_player: Dict[UUID, Decimal] = {player_id: Decimal("0") for player_id in player_ids}
    for row in rows:
        raw_by_player[row.player_id] += Decimal(str(row.points))

    total = Decimal("0")
    for member in team.players:
        multiplier = role_multiplier(member.is_captain, member.is_vice_captain)
        raw = raw_by_player[member.player_id]
        contribution = raw * multiplier

        member.raw_points = raw
        member.role_multiplier = multiplier
        member.contribution = contribution
        total += contribution

    team.total_points = total
    await session.flush()
    return total


async def recompute_team_total(session: AsyncSession, team_id: UUID) -> Dict:
    """
    Recompute a fantasy team's total points across its tournament.

    Args:
        session: Database session
        team_id: Fantasy team UUID

    Returns:
        Dict with team_id and the new total_points
    """
    try:
        team = await get_team_by_id(session, team_id)
        if not team:
            raise NotFoundError("Fantasy team", team_id)

        contest = await get_contest_by_id(session, team.contest_id)
        if not contest:
            raise NotFoundError("Contest", team.contest_id)

        total = await aggregate_team(session, team, contest.tournament_id)
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    logger.info(f"Team {team_id} total points recomputed: {total}")
    return {"team_id": str(team_id), "total_points": str(total)}
