"""
Razorpay webhook endpoint

Handles captured entry-fee payments and payout status updates. Deliveries
are deduplicated in Redis first and by payment id in the database second.
"""

import hashlib
import hmac
import json
import logging
from decimal import Decimal, InvalidOperation
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, status, Request, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.redis_client import get_redis_client
from app.db.session import get_db
from app.services.money import quantize_money
from app.services.payments import record_captured_payment, apply_payout_update

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter()

DEDUPE_TTL_SECONDS = 86400


def verify_razorpay_signature(body: bytes, signature: Optional[str]) -> bool:
    """
    Verify the webhook signature using HMAC-SHA256 over the raw body.

    Args:
        body: Raw request body
        signature: Value of the X-Razorpay-Signature header

    Returns:
        True if signature is valid or no secret is configured, False otherwise
    """
    if not settings.webhook_secret:
        logger.warning("Webhook secret not set, signature verification skipped")
        return True

    if not signature:
        return False

    expected_signature = hmac.new(
        settings.webhook_secret.encode(),
        body,
        hashlib.sha256
    ).hexdigest()

    return hmac.compare_digest(signature, expected_signature)


async def mark_payment_seen(redis_client, payment_id: str) -> Optional[bool]:
    """
    Claim a payment id in Redis with SETNX.

    Returns:
        True on first sight, False for a repeat, None if Redis is unavailable
    """
    try:
        key = f"razorpay:payment:{payment_id}"
        return bool(await redis_client.set(key, "1", nx=True, ex=DEDUPE_TTL_SECONDS))
    except Exception as e:
        logger.error(f"Error checking webhook idempotency for {payment_id}: {e}")
        return None


async def forget_payment(redis_client, payment_id: str) -> None:
    """Release a claimed payment id so a retried delivery is processed."""
    try:
        await redis_client.delete(f"razorpay:payment:{payment_id}")
    except Exception as e:
        logger.error(f"Error releasing webhook idempotency key for {payment_id}: {e}")


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


@router.post("/webhooks/razorpay")
async def razorpay_webhook(
    request: Request,
    session: AsyncSession = Depends(get_db),
    redis_client=Depends(get_redis_client)
):
    """
    Razorpay webhook:
    - payment.captured records the entry fee and resizes the contest pool
    - payout.* events settle the matching prize disbursement
    - anything else is acknowledged and ignored
    """
    body = await request.body()
    if not verify_razorpay_signature(body, request.headers.get("X-Razorpay-Signature")):
        logger.warning("Rejected Razorpay webhook with invalid signature")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid signature")

    try:
        payload = json.loads(body)
    except ValueError:
        raise _bad_request("Invalid JSON payload")

    event = payload.get("event", "")

    if event == "payment.captured":
        entity = payload.get("payload", {}).get("payment", {}).get("entity", {})
        notes = entity.get("notes") or {}
        payment_id = entity.get("id")
        try:
            amount = quantize_money(Decimal(str(entity["amount"])) / 100)
            user_id = UUID(notes["user_id"])
            tournament_id = UUID(notes["tournament_id"])
            contest_id = UUID(notes["contest_id"])
        except (KeyError, TypeError, ValueError, InvalidOperation):
            raise _bad_request("Payment entity is missing amount or contest notes")
        if not payment_id:
            raise _bad_request("Payment entity is missing id")

        if await mark_payment_seen(redis_client, payment_id) is False:
            logger.info(f"Duplicate payment webhook for {payment_id}")
            return {"ok": True, "event": event, "duplicate": True}

        try:
            result = await record_captured_payment(
                session,
                payment_id=payment_id,
                amount=amount,
                user_id=user_id,
                tournament_id=tournament_id,
                contest_id=contest_id
            )
        except Exception:
            await forget_payment(redis_client, payment_id)
            raise

        return {"ok": True, "event": event, "duplicate": result["duplicate"]}

    if event.startswith("payout."):
        entity = payload.get("payload", {}).get("payout", {}).get("entity", {})
        transaction_id = entity.get("id")
        if not transaction_id:
            raise _bad_request("Payout entity is missing id")

        result = await apply_payout_update(
            session,
            transaction_id,
            event,
            failure_reason=entity.get("failure_reason")
        )
        return {"ok": True, "event": event, "updated": result["updated"]}

    logger.info(f"Ignoring Razorpay event {event!r}")
    return {"ok": True, "event": event, "ignored": True}
