"""
Prize API endpoints: rule sets, prize pools and distribution
"""

import logging
from decimal import Decimal
from typing import List, Dict, Any
from uuid import UUID

from fastapi import APIRouter, Query, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.services.prize_distribution import distribute_prizes, list_disbursements
from app.services.prize_pool import recalculate_contest_prize_pool, get_tournament_prize_pool
from app.services.prize_rules import (
    resolve_rules,
    get_rules,
    replace_tournament_rules,
    replace_contest_rules,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class PrizeRuleIn(BaseModel):
    """One rank's share of the prize pool"""
    rank: int = Field(..., description="Finishing position, starting at 1")
    percentage: Decimal = Field(..., description="Share of the prize pool for this rank")
    min_players: int = Field(0, description="Teams required before this rank is paid")


class PrizeRuleSetRequest(BaseModel):
    """Replacement rule set; percentages must add up to 100"""
    rules: List[PrizeRuleIn]


class PrizeRuleSetResponse(BaseModel):
    """Stored rule set"""
    success: bool
    rules: List[Dict[str, Any]]


class DistributionResponse(BaseModel):
    """Prize distribution response model"""
    success: bool
    contest_id: str
    prize_pool: str
    paid_positions: int
    disbursements: List[Dict[str, Any]]


@router.get("/contests/{contest_id}/prize-rules/resolved")
async def resolve_rules_endpoint(
    contest_id: UUID,
    session: AsyncSession = Depends(get_db)
):
    """Show which prize rules would pay out for the contest as it stands."""
    return await resolve_rules(session, contest_id)


@router.get("/tournaments/{tournament_id}/prize-rules")
async def get_rules_endpoint(
    tournament_id: UUID,
    session: AsyncSession = Depends(get_db)
):
    """Get a tournament's default rules and its contest overrides."""
    return await get_rules(session, tournament_id)


@router.put("/tournaments/{tournament_id}/prize-rules", response_model=PrizeRuleSetResponse)
async def replace_tournament_rules_endpoint(
    tournament_id: UUID,
    request: PrizeRuleSetRequest,
    session: AsyncSession = Depends(get_db)
):
    """Replace a tournament's default prize rules."""
    rules = await replace_tournament_rules(session, tournament_id, request.rules, actor="api")
    return PrizeRuleSetResponse(success=True, rules=rules)


@router.put("/contests/{contest_id}/prize-rules", response_model=PrizeRuleSetResponse)
async def replace_contest_rules_endpoint(
    contest_id: UUID,
    request: PrizeRuleSetRequest,
    session: AsyncSession = Depends(get_db)
):
    """Replace a contest's override prize rules."""
    rules = await replace_contest_rules(session, contest_id, request.rules, actor="api")
    return PrizeRuleSetResponse(success=True, rules=rules)


@router.post("/contests/{contest_id}/prize-pool")
async def recalculate_prize_pool_endpoint(
    contest_id: UUID,
    session: AsyncSession = Depends(get_db)
):
    """Resize a contest's prize pool and tiers from its current entries."""
    return await recalculate_contest_prize_pool(session, contest_id, actor="api")


@router.get("/tournaments/{tournament_id}/prize-pool")
async def tournament_prize_pool_endpoint(
    tournament_id: UUID,
    session: AsyncSession = Depends(get_db)
):
    """Summarise entry fees and the dynamic prize pool for a tournament."""
    return await get_tournament_prize_pool(session, tournament_id)


@router.post("/contests/{contest_id}/distribute-prizes", response_model=DistributionResponse)
async def distribute_prizes_endpoint(
    contest_id: UUID,
    process_payouts: bool = Query(True, description="Hand disbursements to the payout provider"),
    session: AsyncSession = Depends(get_db)
):
    """
    Distribute a completed contest's prizes.

    Payout failures do not fail the request; they show up as FAILED
    disbursements in the response.
    """
    return await distribute_prizes(session, contest_id, process_payouts=process_payouts, actor="api")


@router.get("/contests/{contest_id}/disbursements")
async def list_disbursements_endpoint(
    contest_id: UUID,
    session: AsyncSession = Depends(get_db)
):
    """List a contest's prize disbursements by rank."""
    return await list_disbursements(session, contest_id)
