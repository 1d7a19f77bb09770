"""Theoretical return and Monte Carlo checks per tier."""

from __future__ import annotations

import math
import random
from decimal import Decimal
from typing import Any

from raspadinha.core.constants import SIMULATION_DEFAULT_ROUNDS, SIMULATION_MAX_ROUNDS
from raspadinha.core.errors import OutOfRangeInput
from raspadinha.services.prize_engine import PriceTier, draw


def expected_return(tier: PriceTier) -> float:
    """Expected payout of one ticket: sum of amount x probability."""
    return math.fsum(float(o.amount) * o.probability for o in tier.payout_table)


def return_to_player(tier: PriceTier) -> float:
    """Expected payout as a fraction of the ticket price."""
    return expected_return(tier) / float(tier.value)


def house_edge(tier: PriceTier) -> float:
    return 1.0 - return_to_player(tier)


def hit_rate(tier: PriceTier) -> float:
    """Probability that a ticket pays anything."""
    return math.fsum(o.probability for o in tier.payout_table if o.is_win)


def tier_summary(tier: PriceTier) -> dict[str, Any]:
    return {
        "value": tier.value,
        "label": tier.label,
        "max_prize": tier.max_prize,
        "total_probability": round(tier.total_probability, 6),
        "expected_return": round(expected_return(tier), 4),
        "return_to_player": round(return_to_player(tier), 4),
        "house_edge": round(house_edge(tier), 4),
        "hit_rate": round(hit_rate(tier), 4),
    }


def simulate(
    tier: PriceTier,
    rounds: int = SIMULATION_DEFAULT_ROUNDS,
    seed: int = 42,
) -> dict[str, Any]:
    """Run *rounds* draws with a seeded generator and measure the results.

    Returns measured RTP, hit rate, max payout and per-outcome frequencies
    (keyed by table position, since amounts can repeat).
    """
    if not 1 <= rounds <= SIMULATION_MAX_ROUNDS:
        raise OutOfRangeInput(f"rounds must be between 1 and {SIMULATION_MAX_ROUNDS}")

    rng = random.Random(seed)
    counts = [0] * len(tier.payout_table)
    index_of = {id(o): i for i, o in enumerate(tier.payout_table)}
    total_returned = Decimal(0)
    wins = 0
    max_hit = Decimal(0)

    for _ in range(rounds):
        outcome = draw(tier, rng.random())
        counts[index_of[id(outcome)]] += 1
        total_returned += outcome.amount
        if outcome.is_win:
            wins += 1
        max_hit = max(max_hit, outcome.amount)

    total_wagered = tier.value * rounds
    return {
        "value": tier.value,
        "rounds": rounds,
        "seed": seed,
        "total_wagered": total_wagered,
        "total_returned": total_returned,
        "rtp_measured": round(float(total_returned / total_wagered), 4),
        "rtp_theoretical": round(return_to_player(tier), 4),
        "hit_rate": round(wins / rounds, 4),
        "max_prize_hit": max_hit,
        "distribution": [
            {
                "amount": o.amount,
                "message": o.message,
                "probability": o.probability,
                "frequency": round(counts[i] / rounds, 4),
            }
            for i, o in enumerate(tier.payout_table)
        ],
    }
