"""
Unit tests for payout providers
"""

import json
import pytest
from decimal import Decimal
from types import SimpleNamespace
from uuid import uuid4

import httpx

from app.core.exceptions import PayoutFailure
from app.services.payouts import MockPayoutProvider, RazorpayXPayoutProvider


def make_disbursement(net_amount="6834.80"):
    return SimpleNamespace(
        id=uuid4(),
        contest_id=uuid4(),
        rank=1,
        net_amount=Decimal(net_amount)
    )


def make_bank_account(fund_account_id=None):
    return SimpleNamespace(
        user_id=uuid4(),
        account_holder_name="Test Winner",
        account_number="000111222333",
        ifsc_code="HDFC0000001",
        fund_account_id=fund_account_id
    )


def make_provider(handler):
    return RazorpayXPayoutProvider(
        key_id="rzp_test_key",
        key_secret="secret",
        account_number="2323230000000000",
        transport=httpx.MockTransport(handler)
    )


class TestMockPayoutProvider:

    @pytest.mark.asyncio
    async def test_returns_processing_payout_in_paise(self):
        payout = await MockPayoutProvider().create_payout(make_disbursement(), make_bank_account())
        assert payout["id"].startswith("pout_mock_")
        assert payout["status"] == "processing"
        assert payout["amount"] == 683480


class TestRazorpayXPayoutProvider:

    @pytest.mark.asyncio
    async def test_creates_contact_fund_account_and_payout(self):
        """First payout to an account registers it, then pays the net amount in paise"""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append((request.url.path, json.loads(request.content)))
            if request.url.path.endswith("/contacts"):
                return httpx.Response(200, json={"id": "cont_1"})
            if request.url.path.endswith("/fund_accounts"):
                return httpx.Response(200, json={"id": "fa_1"})
            return httpx.Response(200, json={"id": "pout_1", "status": "processing"})

        bank_account = make_bank_account()
        payout = await make_provider(handler).create_payout(make_disbursement(), bank_account)

        assert payout["id"] == "pout_1"
        assert [path for path, _ in calls] == ["/v1/contacts", "/v1/fund_accounts", "/v1/payouts"]
        assert calls[2][1]["amount"] == 683480
        assert calls[2][1]["fund_account_id"] == "fa_1"
        assert bank_account.fund_account_id == "fa_1"

    @pytest.mark.asyncio
    async def test_reuses_known_fund_account(self):
        paths = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            return httpx.Response(200, json={"id": "pout_2", "status": "queued"})

        await make_provider(handler).create_payout(make_disbursement(), make_bank_account("fa_known"))
        assert paths == ["/v1/payouts"]

    @pytest.mark.asyncio
    async def test_api_error_raises_payout_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": {"description": "Insufficient balance"}})

        with pytest.raises(PayoutFailure) as exc_info:
            await make_provider(handler).create_payout(make_disbursement(), make_bank_account("fa_known"))
        assert exc_info.value.user_message == "Insufficient balance"

    @pytest.mark.asyncio
    async def test_missing_credentials_raise_payout_failure(self):
        provider = RazorpayXPayoutProvider(key_id="", key_secret="", account_number="")
        provider.key_id = None
        with pytest.raises(PayoutFailure):
            await provider.create_payout(make_disbursement(), make_bank_account())
