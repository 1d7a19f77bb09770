"""Tier routes — /api/v1/tiers."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from raspadinha.api.deps import get_engine
from raspadinha.api.schemas.tiers import TierResponse
from raspadinha.core.errors import UnknownTier
from raspadinha.services.odds import hit_rate, return_to_player
from raspadinha.services.prize_engine import PriceTier, PrizeEngine
from raspadinha.services.tiers import describe_tier

router = APIRouter(prefix="/api/v1/tiers", tags=["tiers"])


def _tier_response(tier: PriceTier) -> TierResponse:
    return TierResponse(
        **describe_tier(tier),
        return_to_player=round(return_to_player(tier), 4),
        hit_rate=round(hit_rate(tier), 4),
    )


@router.get("")
def list_tiers(engine: PrizeEngine = Depends(get_engine)) -> dict[str, Any]:
    """List every ticket price with its payout table, cheapest first."""
    items = [_tier_response(t) for t in engine.tiers]
    return {"items": items, "total": len(items)}


@router.get("/{tier_value}")
def get_tier(tier_value: str, engine: PrizeEngine = Depends(get_engine)) -> TierResponse:
    """Get a single tier by price."""
    try:
        tier = engine.get_tier(tier_value)
    except UnknownTier as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    return _tier_response(tier)
