"""
Integration tests for prize distribution
"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock
from uuid import uuid4

from sqlalchemy import select, func

from app.core.exceptions import (
    AlreadyDistributedError,
    InvalidStateError,
    NoParticipantsError,
    PayoutFailure,
)
from app.models.audit_log import AuditLog
from app.models.enums import TournamentStatus
from app.models.prize_disbursement import PrizeDisbursement
from app.services.payouts import PayoutProvider
from app.services.prize_distribution import distribute_prizes, list_disbursements
from tests.fixtures.database import (
    create_test_tournament,
    create_test_contest,
    create_test_rules,
    create_ranked_teams,
    create_test_bank_account,
)


async def count_disbursements(db_session, contest_id):
    return (await db_session.execute(
        select(func.count(PrizeDisbursement.id)).where(PrizeDisbursement.contest_id == contest_id)
    )).scalar_one()


@pytest.fixture
async def finished_contest(db_session):
    """Six ranked teams, a 10,000 pool and a 70/30 split, every winner with a bank account"""
    tournament = await create_test_tournament(db_session, status=TournamentStatus.COMPLETED)
    contest = await create_test_contest(db_session, tournament, prize_pool=Decimal("10000.00"))
    await create_test_rules(db_session, tournament, [(1, "70", 1), (2, "30", 1)], contest=contest)
    teams = await create_ranked_teams(db_session, contest, ["90", "80", "70", "60", "50", "40"])
    for team in teams:
        await create_test_bank_account(db_session, team.user_id)
    return contest, teams


class TestDistributePrizes:
    """Turning standings into disbursements"""

    @pytest.mark.asyncio
    async def test_two_winners_from_six_teams(self, db_session, finished_contest):
        contest, teams = finished_contest

        result = await distribute_prizes(db_session, contest.id)

        assert result["success"] is True
        assert result["paid_positions"] == 2
        first, second = result["disbursements"]

        assert first["fantasy_team_id"] == str(teams[0].id)
        assert Decimal(first["amount"]) == Decimal("7000.00")
        assert Decimal(first["processing_fee"]) == Decimal("165.20")
        assert Decimal(first["net_amount"]) == Decimal("6834.80")

        assert second["fantasy_team_id"] == str(teams[1].id)
        assert Decimal(second["amount"]) == Decimal("3000.00")
        assert Decimal(second["processing_fee"]) == Decimal("70.80")
        assert Decimal(second["net_amount"]) == Decimal("2929.20")

        for disbursement in result["disbursements"]:
            assert disbursement["status"] == "processing"
            assert disbursement["transaction_id"].startswith("pout_mock_")

        await db_session.refresh(contest)
        assert contest.is_prizes_distributed is True
        assert contest.is_prizes_processing is False
        assert contest.prizes_distributed_at is not None

    @pytest.mark.asyncio
    async def test_second_call_pays_nothing(self, db_session, finished_contest):
        contest, _ = finished_contest
        contest_id = contest.id
        await distribute_prizes(db_session, contest_id)

        with pytest.raises(AlreadyDistributedError) as exc_info:
            await distribute_prizes(db_session, contest_id)

        assert exc_info.value.code == "already_distributed"
        assert await count_disbursements(db_session, contest_id) == 2

    @pytest.mark.asyncio
    async def test_payout_failure_is_recorded_and_loop_continues(self, db_session, finished_contest):
        contest, _ = finished_contest
        provider = AsyncMock(spec=PayoutProvider)
        provider.create_payout.side_effect = [
            PayoutFailure("gateway said no", "Insufficient balance"),
            {"id": "pout_ok", "status": "processing"},
        ]

        result = await distribute_prizes(db_session, contest.id, provider=provider)

        first, second = result["disbursements"]
        assert first["status"] == "failed"
        assert "Insufficient balance" in first["notes"]
        assert second["status"] == "processing"
        assert second["transaction_id"] == "pout_ok"
        assert provider.create_payout.await_count == 2

        await db_session.refresh(contest)
        assert contest.is_prizes_distributed is True
        assert contest.is_prizes_processing is False

    @pytest.mark.asyncio
    async def test_missing_bank_account_fails_that_payout(self, db_session):
        tournament = await create_test_tournament(db_session, status=TournamentStatus.COMPLETED)
        contest = await create_test_contest(db_session, tournament, prize_pool=Decimal("1000.00"))
        await create_test_rules(db_session, tournament, [(1, "100", 0)])
        await create_ranked_teams(db_session, contest, ["10"])

        result = await distribute_prizes(db_session, contest.id)

        disbursement = result["disbursements"][0]
        assert disbursement["status"] == "failed"
        assert "No bank account" in disbursement["notes"]

    @pytest.mark.asyncio
    async def test_skip_payouts_leaves_disbursements_pending(self, db_session, finished_contest):
        contest, _ = finished_contest
        provider = AsyncMock(spec=PayoutProvider)

        result = await distribute_prizes(db_session, contest.id, process_payouts=False, provider=provider)

        assert [d["status"] for d in result["disbursements"]] == ["pending", "pending"]
        provider.create_payout.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unlocked_rules_paid_at_their_own_percentage(self, db_session):
        """Two teams with rank 2 locked behind three players: rank 1 gets its 70%"""
        tournament = await create_test_tournament(db_session, status=TournamentStatus.COMPLETED)
        contest = await create_test_contest(db_session, tournament, prize_pool=Decimal("1000.00"))
        await create_test_rules(db_session, tournament, [(1, "70", 1), (2, "30", 3)])
        await create_ranked_teams(db_session, contest, ["20", "10"])

        result = await distribute_prizes(db_session, contest.id, process_payouts=False)

        assert len(result["disbursements"]) == 1
        assert Decimal(result["disbursements"][0]["amount"]) == Decimal("700.00")

    @pytest.mark.asyncio
    async def test_writes_audit_log(self, db_session, finished_contest):
        contest, _ = finished_contest
        await distribute_prizes(db_session, contest.id, process_payouts=False)

        logs = (await db_session.execute(
            select(AuditLog).where(AuditLog.action == "prize_distribution")
        )).scalars().all()
        assert len(logs) == 1
        assert logs[0].details["paid_positions"] == 2

    @pytest.mark.asyncio
    async def test_list_disbursements(self, db_session, finished_contest):
        contest, _ = finished_contest
        await distribute_prizes(db_session, contest.id, process_payouts=False)

        listed = await list_disbursements(db_session, contest.id)
        assert [d["rank"] for d in listed] == [1, 2]


class TestDistributionPreconditions:
    """Nothing is paid unless every precondition holds"""

    @pytest.mark.asyncio
    async def test_tournament_must_be_completed(self, db_session):
        tournament = await create_test_tournament(db_session, status=TournamentStatus.IN_PROGRESS)
        contest = await create_test_contest(db_session, tournament, prize_pool=Decimal("1000.00"))
        await create_test_rules(db_session, tournament, [(1, "100", 0)])
        await create_ranked_teams(db_session, contest, ["10"])
        contest_id = contest.id

        with pytest.raises(InvalidStateError):
            await distribute_prizes(db_session, contest_id)

        await db_session.refresh(contest)
        assert contest.is_prizes_distributed is False
        assert contest.is_prizes_processing is False
        assert await count_disbursements(db_session, contest_id) == 0

    @pytest.mark.asyncio
    async def test_contest_without_teams(self, db_session):
        tournament = await create_test_tournament(db_session, status=TournamentStatus.COMPLETED)
        contest = await create_test_contest(db_session, tournament, prize_pool=Decimal("1000.00"))
        await create_test_rules(db_session, tournament, [(1, "100", 0)])

        with pytest.raises(NoParticipantsError):
            await distribute_prizes(db_session, contest.id)

    @pytest.mark.asyncio
    async def test_distribution_in_progress_elsewhere(self, db_session, finished_contest):
        contest, _ = finished_contest
        contest.is_prizes_processing = True
        await db_session.commit()
        contest_id = contest.id

        with pytest.raises(InvalidStateError) as exc_info:
            await distribute_prizes(db_session, contest_id)

        assert not isinstance(exc_info.value, AlreadyDistributedError)
        assert await count_disbursements(db_session, contest_id) == 0
