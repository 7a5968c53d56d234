"""
Payout providers for prize disbursements
"""

import logging
import uuid
from typing import Dict, Any, Optional

import httpx

from app.core.config import settings
from app.core.exceptions import PayoutFailure
from app.services.money import to_paise

# Configure logging
logger = logging.getLogger(__name__)


class PayoutProvider:
    """Base payout provider interface"""

    async def create_payout(self, disbursement, bank_account) -> Dict[str, Any]:
        """
        Hand a disbursement's net amount off to the payment network.

        Args:
            disbursement: PrizeDisbursement to pay
            bank_account: Recipient's BankAccount

        Returns:
            Dictionary with at least id and status of the created payout

        Raises:
            PayoutFailure: if the payout could not be created
        """
        raise NotImplementedError


class MockPayoutProvider(PayoutProvider):
    """Mock payout provider for testing and development"""

    async def create_payout(self, disbursement, bank_account) -> Dict[str, Any]:
        logger.info(f"Mock payout for disbursement {disbursement.id}: {disbursement.net_amount}")

        return {
            "id": f"pout_mock_{uuid.uuid4().hex[:14]}",
            "entity": "payout",
            "fund_account_id": bank_account.fund_account_id or f"fa_mock_{uuid.uuid4().hex[:14]}",
            "amount": to_paise(disbursement.net_amount),
            "currency": settings.currency,
            "status": "processing",
            "mode": "IMPS",
            "purpose": "payout",
            "reference_id": str(disbursement.id),
            "_mock": True
        }


class RazorpayXPayoutProvider(PayoutProvider):
    """RazorpayX payouts API provider"""

    def __init__(
        self,
        key_id: str = None,
        key_secret: str = None,
        account_number: str = None,
        base_url: str = None,
        timeout: float = None,
        transport: httpx.AsyncBaseTransport = None
    ):
        self.key_id = key_id or settings.razorpay_key_id
        self.key_secret = key_secret or settings.razorpay_key_secret
        self.account_number = account_number or settings.razorpay_account_number
        self.base_url = (base_url or settings.razorpay_base_url).rstrip("/")
        self.timeout = timeout or settings.payout_timeout_seconds
        self.transport = transport

    async def _post(self, client: httpx.AsyncClient, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await client.post(path, json=payload)
        except httpx.HTTPError as e:
            raise PayoutFailure(f"RazorpayX request to {path} failed: {e}", "Payout service unreachable")

        if response.status_code >= 400:
            try:
                description = response.json().get("error", {}).get("description", response.text)
            except ValueError:
                description = response.text
            raise PayoutFailure(
                f"RazorpayX {path} returned {response.status_code}: {description}",
                description
            )
        return response.json()

    async def _ensure_fund_account(self, client: httpx.AsyncClient, bank_account) -> str:
        """Create contact and fund account once, then reuse the stored id."""
        if bank_account.fund_account_id:
            return bank_account.fund_account_id

        contact = await self._post(client, "/contacts", {
            "name": bank_account.account_holder_name,
            "type": "customer",
            "reference_id": str(bank_account.user_id)
        })
        fund_account = await self._post(client, "/fund_accounts", {
            "contact_id": contact["id"],
            "account_type": "bank_account",
            "bank_account": {
                "name": bank_account.account_holder_name,
                "ifsc": bank_account.ifsc_code,
                "account_number": bank_account.account_number
            }
        })
        bank_account.fund_account_id = fund_account["id"]
        return fund_account["id"]

    async def create_payout(self, disbursement, bank_account) -> Dict[str, Any]:
        if not (self.key_id and self.key_secret and self.account_number):
            raise PayoutFailure("RazorpayX credentials are not configured", "Payouts are not configured")

        async with httpx.AsyncClient(
            base_url=self.base_url,
            auth=(self.key_id, self.key_secret),
            timeout=self.timeout,
            transport=self.transport
        ) as client:
            fund_account_id = await self._ensure_fund_account(client, bank_account)
            payout = await self._post(client, "/payouts", {
                "account_number": self.account_number,
                "fund_account_id": fund_account_id,
                "amount": to_paise(disbursement.net_amount),
                "currency": settings.currency,
                "mode": "IMPS",
                "purpose": "payout",
                "queue_if_low_balance": True,
                "reference_id": str(disbursement.id),
                "narration": "Prize payout",
                "notes": {
                    "contest_id": str(disbursement.contest_id),
                    "rank": str(disbursement.rank)
                }
            })

        logger.info(f"RazorpayX payout {payout.get('id')} created for disbursement {disbursement.id}")
        return payout


# Global provider instance
_provider: Optional[PayoutProvider] = None


def get_payout_provider() -> PayoutProvider:
    """Get the configured payout provider"""
    global _provider
    if _provider is None:
        if settings.payout_provider == "razorpayx":
            _provider = RazorpayXPayoutProvider()
        else:
            _provider = MockPayoutProvider()
    return _provider


def set_payout_provider(provider: Optional[PayoutProvider]) -> None:
    """Swap the global provider; None resets to the configured one."""
    global _provider
    _provider = provider
