"""Tier loading — build validated price tiers from configuration data.

Payout tables live in ``core.constants`` as plain rows so new tiers can be
added without touching the draw algorithm. By default the literal odds are
kept; ``normalize=True`` rescales each table to sum to exactly 1.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import Decimal
from typing import Any

from raspadinha.core.constants import PRICE_TIERS, PROBABILITY_EPSILON
from raspadinha.core.errors import InvalidConfiguration
from raspadinha.services.prize_engine import PriceTier, PrizeEngine, PrizeOutcome

logger = logging.getLogger(__name__)


def _to_decimal(raw: Any, field: str) -> Decimal:
    try:
        return Decimal(str(raw))
    except ArithmeticError as exc:
        raise InvalidConfiguration(f"Invalid {field}: {raw!r}") from exc


def build_price_tier(raw: dict[str, Any], *, normalize: bool = False) -> PriceTier:
    """Convert one raw tier mapping into a :class:`PriceTier`.

    Args:
        raw: ``{"value": ..., "label": ..., "payouts": [(amount, probability, message), ...]}``
        normalize: Rescale probabilities so they sum to exactly 1.

    Raises:
        InvalidConfiguration: If required keys are missing or malformed.
    """
    try:
        value = _to_decimal(raw["value"], "tier value")
        label = str(raw.get("label") or f"R$ {value}")
        rows = list(raw["payouts"])
    except (KeyError, TypeError) as exc:
        raise InvalidConfiguration(f"Malformed tier definition: {raw!r}") from exc

    outcomes: list[PrizeOutcome] = []
    for row in rows:
        try:
            amount, probability, message = row
            outcomes.append(
                PrizeOutcome(
                    amount=_to_decimal(amount, "amount"),
                    probability=float(probability),
                    message=str(message),
                )
            )
        except (TypeError, ValueError) as exc:
            raise InvalidConfiguration(f"Tier {label!r}: malformed payout row {row!r}") from exc

    if normalize and outcomes:
        total = sum(o.probability for o in outcomes)
        if total > 0:
            outcomes = [
                PrizeOutcome(amount=o.amount, probability=o.probability / total, message=o.message)
                for o in outcomes
            ]
            logger.debug("Normalized tier %s payout table (raw sum %.6f)", label, total)

    return PriceTier(value=value, label=label, payout_table=tuple(outcomes))


def load_price_tiers(
    raw_tiers: Iterable[dict[str, Any]] = PRICE_TIERS,
    *,
    normalize: bool = False,
) -> list[PriceTier]:
    """Build every configured tier. Validation happens in :class:`PrizeEngine`."""
    return [build_price_tier(raw, normalize=normalize) for raw in raw_tiers]


def build_prize_engine(
    raw_tiers: Iterable[dict[str, Any]] = PRICE_TIERS,
    *,
    normalize: bool = False,
    epsilon: float = PROBABILITY_EPSILON,
) -> PrizeEngine:
    """Load, validate and wrap the tiers in a :class:`PrizeEngine`.

    Raises:
        InvalidConfiguration: If any tier fails validation.
    """
    tiers = load_price_tiers(raw_tiers, normalize=normalize)
    engine = PrizeEngine(tiers, epsilon=epsilon)
    logger.info(
        "Loaded %d price tiers: %s",
        len(tiers),
        ", ".join(t.label for t in engine.tiers),
    )
    return engine


def describe_tier(tier: PriceTier) -> dict[str, Any]:
    """Display-ready dict for a tier, used by the tier listing."""
    return {
        "value": tier.value,
        "label": tier.label,
        "max_prize": tier.max_prize,
        "payout_table": [
            {"amount": o.amount, "probability": o.probability, "message": o.message}
            for o in tier.payout_table
        ],
    }
