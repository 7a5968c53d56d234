"""
Integration tests for the HTTP API and the Razorpay webhook
"""

import hashlib
import hmac
import json
import pytest
from decimal import Decimal
from unittest.mock import patch
from uuid import uuid4

from app.models.enums import TournamentStatus
from tests.fixtures.database import (
    create_test_tournament,
    create_test_contest,
    create_test_match,
    create_test_team,
    create_test_rules,
    create_ranked_teams,
)


def captured_payment(payment_id, contest, amount_paise=10000, user_id=None):
    return {
        "event": "payment.captured",
        "payload": {
            "payment": {
                "entity": {
                    "id": payment_id,
                    "amount": amount_paise,
                    "notes": {
                        "user_id": str(user_id or uuid4()),
                        "tournament_id": str(contest.tournament_id),
                        "contest_id": str(contest.id),
                    }
                }
            }
        }
    }


class TestFantasyEndpoints:
    """Scoring and leaderboard endpoints"""

    @pytest.mark.asyncio
    async def test_record_match_points(self, test_client, db_session):
        tournament = await create_test_tournament(db_session)
        p1, p2 = uuid4(), uuid4()
        match = await create_test_match(db_session, tournament, p1, p2, 11, 9, round_label="Semifinal")

        response = await test_client.post(f"/api/v1/fantasy/matches/{match.id}/points")

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["player1_points"]) == Decimal("31.5")
        assert Decimal(data["player2_points"]) == Decimal("13.5")

        response = await test_client.get(f"/api/v1/fantasy/matches/{match.id}/points")
        assert response.status_code == 200
        assert len(response.json()) == 2

    @pytest.mark.asyncio
    async def test_unknown_match_is_404(self, test_client):
        response = await test_client.post(f"/api/v1/fantasy/matches/{uuid4()}/points")

        assert response.status_code == 404
        assert response.json()["success"] is False
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_team_recompute_and_leaderboard(self, test_client, db_session):
        tournament = await create_test_tournament(db_session)
        contest = await create_test_contest(db_session, tournament)
        p1, p2 = uuid4(), uuid4()
        match = await create_test_match(db_session, tournament, p1, p2, 11, 0)
        team = await create_test_team(db_session, contest, players=[(p1, True, False)])
        await create_test_team(db_session, contest, players=[(p2, True, False)], created_offset=1)
        await test_client.post(f"/api/v1/fantasy/matches/{match.id}/points")

        response = await test_client.post(f"/api/v1/fantasy/teams/{team.id}/recompute")
        assert response.status_code == 200
        # (11 + 15) x 2
        assert Decimal(response.json()["total_points"]) == Decimal("52")

        response = await test_client.post(f"/api/v1/fantasy/contests/{contest.id}/rankings")
        assert response.status_code == 200
        assert response.json()[0]["team_id"] == str(team.id)
        assert response.json()[0]["rank"] == 1

        response = await test_client.get(f"/api/v1/fantasy/contests/{contest.id}/leaderboard?limit=1")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert len(data["teams"]) == 1


class TestPrizeEndpoints:
    """Rule sets, pools and distribution over HTTP"""

    @pytest.mark.asyncio
    async def test_invalid_rule_set_is_400(self, test_client, db_session):
        tournament = await create_test_tournament(db_session)

        response = await test_client.put(
            f"/api/v1/tournaments/{tournament.id}/prize-rules",
            json={"rules": [{"rank": 1, "percentage": "60"}, {"rank": 2, "percentage": "30"}]}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_replace_and_read_rules(self, test_client, db_session):
        tournament = await create_test_tournament(db_session)

        response = await test_client.put(
            f"/api/v1/tournaments/{tournament.id}/prize-rules",
            json={"rules": [{"rank": 1, "percentage": "70"}, {"rank": 2, "percentage": "30", "min_players": 3}]}
        )
        assert response.status_code == 200
        assert response.json()["success"] is True

        response = await test_client.get(f"/api/v1/tournaments/{tournament.id}/prize-rules")
        assert response.status_code == 200
        assert [rule["rank"] for rule in response.json()["default_rules"]] == [1, 2]

    @pytest.mark.asyncio
    async def test_resolve_without_rules_is_422(self, test_client, db_session):
        tournament = await create_test_tournament(db_session)
        contest = await create_test_contest(db_session, tournament)
        await create_ranked_teams(db_session, contest, ["1"])

        response = await test_client.get(f"/api/v1/contests/{contest.id}/prize-rules/resolved")

        assert response.status_code == 422
        assert response.json()["error"] == "no_rules_defined"

    @pytest.mark.asyncio
    async def test_distribute_then_conflict(self, test_client, db_session):
        tournament = await create_test_tournament(db_session, status=TournamentStatus.COMPLETED)
        contest = await create_test_contest(db_session, tournament, prize_pool=Decimal("1000.00"))
        await create_test_rules(db_session, tournament, [(1, "100", 0)])
        await create_ranked_teams(db_session, contest, ["10", "5"])

        response = await test_client.post(
            f"/api/v1/contests/{contest.id}/distribute-prizes?process_payouts=false"
        )
        assert response.status_code == 200
        data = response.json()
        assert data["paid_positions"] == 1
        assert Decimal(data["disbursements"][0]["net_amount"]) == Decimal("976.40")

        response = await test_client.post(f"/api/v1/contests/{contest.id}/distribute-prizes")
        assert response.status_code == 409
        assert response.json()["error"] == "already_distributed"

        response = await test_client.get(f"/api/v1/contests/{contest.id}/disbursements")
        assert response.status_code == 200
        assert len(response.json()) == 1

    @pytest.mark.asyncio
    async def test_prize_pool_endpoints(self, test_client, db_session):
        tournament = await create_test_tournament(db_session)
        contest = await create_test_contest(db_session, tournament, entry_fee=Decimal("100.00"))
        await create_ranked_teams(db_session, contest, ["0"] * 6)

        response = await test_client.post(f"/api/v1/contests/{contest.id}/prize-pool")
        assert response.status_code == 200
        assert Decimal(response.json()["prize_pool"]) == Decimal("465.84")

        response = await test_client.get(f"/api/v1/tournaments/{tournament.id}/prize-pool")
        assert response.status_code == 200
        assert response.json()["total_registrations"] == 6


class TestRazorpayWebhook:
    """Signature checks, dedupe and event routing"""

    @pytest.mark.asyncio
    async def test_captured_payment_then_duplicate(self, test_client, db_session, fake_redis):
        tournament = await create_test_tournament(db_session)
        contest = await create_test_contest(db_session, tournament)
        await create_ranked_teams(db_session, contest, ["0"])
        payload = captured_payment("pay_web_1", contest)

        response = await test_client.post("/api/v1/webhooks/razorpay", json=payload)
        assert response.status_code == 200
        assert response.json() == {"ok": True, "event": "payment.captured", "duplicate": False}
        assert "razorpay:payment:pay_web_1" in fake_redis.seen

        response = await test_client.post("/api/v1/webhooks/razorpay", json=payload)
        assert response.status_code == 200
        assert response.json()["duplicate"] is True

    @pytest.mark.asyncio
    async def test_failed_processing_releases_dedupe_key(self, test_client, db_session, fake_redis):
        tournament = await create_test_tournament(db_session)
        contest = await create_test_contest(db_session, tournament)
        payload = captured_payment("pay_web_2", contest)
        payload["payload"]["payment"]["entity"]["notes"]["contest_id"] = str(uuid4())

        response = await test_client.post("/api/v1/webhooks/razorpay", json=payload)

        assert response.status_code == 404
        assert "razorpay:payment:pay_web_2" not in fake_redis.seen

    @pytest.mark.asyncio
    async def test_missing_notes_is_400(self, test_client, db_session):
        tournament = await create_test_tournament(db_session)
        contest = await create_test_contest(db_session, tournament)
        payload = captured_payment("pay_web_3", contest)
        del payload["payload"]["payment"]["entity"]["notes"]["contest_id"]

        response = await test_client.post("/api/v1/webhooks/razorpay", json=payload)

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_signature_required_when_secret_set(self, test_client, db_session):
        body = json.dumps({"event": "order.paid"}).encode()
        signature = hmac.new(b"whsec", body, hashlib.sha256).hexdigest()

        with patch("app.api.webhooks.settings.webhook_secret", "whsec"):
            response = await test_client.post(
                "/api/v1/webhooks/razorpay",
                content=body,
                headers={"X-Razorpay-Signature": "bad"}
            )
            assert response.status_code == 401

            response = await test_client.post(
                "/api/v1/webhooks/razorpay",
                content=body,
                headers={"X-Razorpay-Signature": signature}
            )
            assert response.status_code == 200
            assert response.json() == {"ok": True, "event": "order.paid", "ignored": True}

    @pytest.mark.asyncio
    async def test_payout_event_settles_disbursement(self, test_client, db_session):
        tournament = await create_test_tournament(db_session, status=TournamentStatus.COMPLETED)
        contest = await create_test_contest(db_session, tournament, prize_pool=Decimal("1000.00"))
        await create_test_rules(db_session, tournament, [(1, "100", 0)])
        teams = await create_ranked_teams(db_session, contest, ["10"])
        from tests.fixtures.database import create_test_bank_account
        await create_test_bank_account(db_session, teams[0].user_id)

        response = await test_client.post(f"/api/v1/contests/{contest.id}/distribute-prizes")
        transaction_id = response.json()["disbursements"][0]["transaction_id"]

        response = await test_client.post("/api/v1/webhooks/razorpay", json={
            "event": "payout.processed",
            "payload": {"payout": {"entity": {"id": transaction_id}}}
        })

        assert response.status_code == 200
        assert response.json() == {"ok": True, "event": "payout.processed", "updated": True}

        response = await test_client.get(f"/api/v1/contests/{contest.id}/disbursements")
        assert response.json()[0]["status"] == "paid"
