"""Hypothesis property-based tests for the draw algorithm."""

from __future__ import annotations

from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st

from raspadinha.services.prize_engine import PriceTier, PrizeOutcome, draw
from raspadinha.services.tiers import build_prize_engine

ENGINE = build_prize_engine()

units = st.floats(min_value=0.0, max_value=1.0, exclude_max=True, allow_nan=False)
configured_tiers = st.sampled_from(ENGINE.tiers)


@st.composite
def payout_tables(draw_: st.DrawFn) -> PriceTier:
    """Random well-formed tiers whose probabilities sum to at most 1."""
    weights = draw_(st.lists(st.integers(min_value=1, max_value=1000), min_size=1, max_size=8))
    shortfall = draw_(st.floats(min_value=0.0, max_value=0.5))
    scale = (1.0 - shortfall) / sum(weights)
    outcomes = tuple(
        PrizeOutcome(amount=Decimal(i * 5), probability=w * scale, message=f"#{i}")
        for i, w in enumerate(weights)
    )
    return PriceTier(value=Decimal(5), label="R$ 5,00", payout_table=outcomes)


@given(tier=configured_tiers, unit=units)
@settings(max_examples=300)
def test_draw_is_total_over_configured_tiers(tier: PriceTier, unit: float):
    """Every unit in [0, 1) yields a member of the tier's table."""
    assert draw(tier, unit) in tier.payout_table


@given(tier=payout_tables(), unit=units)
@settings(max_examples=300)
def test_draw_is_total_over_short_tables(tier: PriceTier, unit: float):
    """Tables summing to less than 1 still always produce an outcome."""
    assert draw(tier, unit) in tier.payout_table


@given(tier=configured_tiers, unit=units)
@settings(max_examples=200)
def test_draw_is_deterministic(tier: PriceTier, unit: float):
    assert draw(tier, unit) is draw(tier, unit)


@given(tier=payout_tables(), a=units, b=units)
@settings(max_examples=300)
def test_draw_is_monotonic_in_unit(tier: PriceTier, a: float, b: float):
    """A larger unit never selects an earlier table entry."""
    lo, hi = sorted((a, b))
    table = list(tier.payout_table)
    assert table.index(draw(tier, lo)) <= table.index(draw(tier, hi))


@given(tier=payout_tables())
@settings(max_examples=100)
def test_zero_selects_first_entry(tier: PriceTier):
    assert draw(tier, 0.0) is tier.payout_table[0]
