"""
Match points recorder: persists calculator output per (player, match) and
fans out team and ranking recomputation.
"""

import logging
from typing import Dict
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import NotFoundError, InvalidStateError
from app.models.enums import MatchStatus
from app.repos.match_repo import get_match_by_id, upsert_player_match_points
from app.services.ranking import refresh_tournament_standings
from app.services.scoring import calculate_match_points

logger = logging.getLogger(__name__)


def _breakdown_json(breakdown: Dict) -> Dict:
    """JSON-safe copy of a calculator breakdown."""
    return {**breakdown, "total_points": str(breakdown["total_points"])}


async def record_match_points(session: AsyncSession, match_id: UUID, fan_out: bool = True) -> Dict:
    """
    Record fantasy points for both players of a completed match.

    Safe to re-run after a score correction: each (player, match) row is
    overwritten in place.

    Args:
        session: Database session
        match_id: Match UUID
        fan_out: Refresh team totals and rankings afterwards

    Returns:
        Dict with player1_points and player2_points
    """
    try:
        match = await get_match_by_id(session, match_id)
        if not match:
            raise NotFoundError("Match", match_id)

        if match.status != MatchStatus.COMPLETED.value:
            raise InvalidStateError(
                f"Match {match_id} is {match.status}, not completed",
                "Cannot calculate points for an unfinished match"
            )

        player1, player2 = calculate_match_points(
            match.player1_score or 0,
            match.player2_score or 0,
            match.round
        )

        await upsert_player_match_points(
            session, match.player1_id, match.id, player1["total_points"], _breakdown_json(player1)
        )
        await upsert_player_match_points(
            session, match.player2_id, match.id, player2["total_points"], _breakdown_json(player2)
        )
        tournament_id = match.tournament_id
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    logger.info(
        f"Recorded points for match {match_id}: "
        f"player1={player1['total_points']} player2={player2['total_points']}"
    )

    result = {
        "match_id": str(match_id),
        "player1_id": str(match.player1_id),
        "player2_id": str(match.player2_id),
        "player1_points": str(player1["total_points"]),
        "player2_points": str(player2["total_points"]),
        "player1_breakdown": _breakdown_json(player1),
        "player2_breakdown": _breakdown_json(player2),
    }

    if fan_out:
        result["fanout"] = await fan_out_standings(session, tournament_id)

    return result


async def fan_out_standings(session: AsyncSession, tournament_id: UUID) -> str:
    """
    Refresh every affected contest after new match points are committed.

    In celery mode one task per team is queued with the contest rankings as
    the chord callback, so ranks are only computed after all totals land.
    """
    if settings.scoring_fanout == "celery":
        from app.tasks.scoring import enqueue_tournament_refresh
        await enqueue_tournament_refresh(session, tournament_id)
        return "queued"

    await refresh_tournament_standings(session, tournament_id)
    return "completed"
