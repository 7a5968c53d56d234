"""
Celery tasks for scoring fan-out and prize distribution
"""

import asyncio
import logging
from typing import List
from uuid import UUID

from celery import chord
from sqlalchemy.ext.asyncio import AsyncSession

from app.celery_app import celery
from app.db.session import AsyncSessionLocal, async_engine
from app.repos.contest_repo import get_scoreable_contests
from app.repos.team_repo import get_contest_teams
from app.services.match_points import record_match_points
from app.services.prize_distribution import distribute_prizes
from app.services.ranking import recompute_rankings
from app.services.team_points import recompute_team_total

# Configure logging
logger = logging.getLogger(__name__)


def _run(service, *args, **kwargs):
    """Run an async service in a fresh session on this worker's own event loop."""
    async def _process():
        try:
            async with AsyncSessionLocal() as session:
                return await service(session, *args, **kwargs)
        finally:
            # Pooled connections are bound to the loop that opened them
            await async_engine.dispose()

    return asyncio.run(_process())


async def enqueue_tournament_refresh(session: AsyncSession, tournament_id: UUID) -> List[str]:
    """
    Queue one chord per scoring contest: recompute every team, then rank.

    Returns:
        Ids of the contests a chord was queued for
    """
    queued = []
    for contest in await get_scoreable_contests(session, tournament_id):
        teams = await get_contest_teams(session, contest.id)
        if not teams:
            continue
        chord(
            recompute_team_task.s(str(team.id)) for team in teams
        )(rank_contest_task.si(str(contest.id)))
        queued.append(str(contest.id))

    logger.info(f"Queued standings refresh for {len(queued)} contests in tournament {tournament_id}")
    return queued


@celery.task(bind=True, max_retries=3, default_retry_delay=30)
def record_match_points_task(self, match_id: str):
    """
    Record points for a completed match and fan out standings.

    Args:
        match_id: Match UUID as string
    """
    try:
        logger.info(f"Recording points for match: {match_id}")
        return _run(record_match_points, UUID(match_id))
    except Exception as exc:
        logger.error(f"Error recording points for match {match_id}: {exc}")
        if self.request.retries < self.max_retries:
            raise self.retry(countdown=30 * (2 ** self.request.retries))
        raise


@celery.task(bind=True, max_retries=3, default_retry_delay=30)
def recompute_team_task(self, team_id: str):
    """
    Recompute one fantasy team's total points.

    Args:
        team_id: Fantasy team UUID as string
    """
    try:
        return _run(recompute_team_total, UUID(team_id))
    except Exception as exc:
        logger.error(f"Error recomputing team {team_id}: {exc}")
        if self.request.retries < self.max_retries:
            raise self.retry(countdown=30 * (2 ** self.request.retries))
        raise


@celery.task(bind=True, max_retries=3, default_retry_delay=30)
def rank_contest_task(self, contest_id: str):
    """
    Re-rank a contest once all of its team totals are fresh.

    Args:
        contest_id: Contest UUID as string
    """
    try:
        standings = _run(recompute_rankings, UUID(contest_id))
        logger.info(f"Ranked contest {contest_id}: {len(standings)} teams")
        return standings
    except Exception as exc:
        logger.error(f"Error ranking contest {contest_id}: {exc}")
        if self.request.retries < self.max_retries:
            raise self.retry(countdown=30 * (2 ** self.request.retries))
        raise


@celery.task(bind=True)
def distribute_prizes_task(self, contest_id: str, process_payouts: bool = True):
    """
    Distribute a contest's prizes in the background.

    Not retried: distribution is guarded to run at most once, so a retry
    after a partial run could only report "already distributed".

    Args:
        contest_id: Contest UUID as string
        process_payouts: Hand disbursements to the payout provider
    """
    logger.info(f"Distributing prizes for contest: {contest_id}")
    try:
        return _run(distribute_prizes, UUID(contest_id), process_payouts=process_payouts)
    except Exception as exc:
        logger.error(f"Error distributing prizes for contest {contest_id}: {exc}")
        raise
